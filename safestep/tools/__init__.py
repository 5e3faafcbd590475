"""Tool protocols shared by adapters and services."""
