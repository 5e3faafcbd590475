"""Turn free-form model output into a JSON object."""

from __future__ import annotations

import json
import re
from typing import Any

from safestep.shared.exceptions import PayloadError

_FENCE_RE = re.compile(r"```(?:json|JSON)?")


def strip_code_fences(text: str) -> str:
    """Drop markdown code-fence markers anywhere in the text."""
    return _FENCE_RE.sub("", str(text or "")).strip()


def parse_json_object(text: str) -> dict[str, Any]:
    content = strip_code_fences(text)
    if not content:
        raise PayloadError("empty model response")
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        # Models sometimes wrap the object in a sentence.
        start, end = content.find("{"), content.rfind("}")
        if start == -1 or end <= start:
            raise PayloadError("model response is not JSON") from None
        try:
            data = json.loads(content[start : end + 1])
        except json.JSONDecodeError:
            raise PayloadError("model response is not JSON") from None
    if not isinstance(data, dict):
        raise PayloadError(f"expected a JSON object, got {type(data).__name__}")
    return data


__all__ = ["strip_code_fences", "parse_json_object"]
