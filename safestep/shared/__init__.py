"""Shared cross-layer types and exceptions."""

from safestep.shared.exceptions import KeyMissingError, PayloadError, ToolError

__all__ = ["ToolError", "KeyMissingError", "PayloadError"]
