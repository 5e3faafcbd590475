"""Parsing helpers for model output."""

from safestep.parsing.json_payload import parse_json_object, strip_code_fences

__all__ = ["parse_json_object", "strip_code_fences"]
