"""SafeStep route-time and safety estimation core."""

__version__ = "1.0.0"
