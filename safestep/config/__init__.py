"""Configuration package."""

from safestep.config.settings import ProviderSnapshot, RoutingEndpoint, Settings, resolve_provider_snapshot

__all__ = ["ProviderSnapshot", "RoutingEndpoint", "Settings", "resolve_provider_snapshot"]
