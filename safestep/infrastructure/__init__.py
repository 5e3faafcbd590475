"""Infrastructure services and cross-cutting utilities."""

from safestep.infrastructure.cache import MemoryCache, NullCache, make_cache_key
from safestep.infrastructure.logging import StructuredLogger, get_logger

__all__ = ["MemoryCache", "NullCache", "make_cache_key", "StructuredLogger", "get_logger"]
