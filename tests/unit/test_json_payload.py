"""Model output parsing."""

from __future__ import annotations

import pytest

from safestep.parsing.json_payload import parse_json_object, strip_code_fences
from safestep.shared.exceptions import PayloadError


def test_plain_object():
    assert parse_json_object('{"score": 8, "tip": "ok"}') == {"score": 8, "tip": "ok"}


@pytest.mark.parametrize(
    "text",
    [
        '```json\n{"score": 8}\n```',
        '```JSON\n{"score": 8}\n```',
        '```\n{"score": 8}\n```',
    ],
)
def test_fenced_object(text):
    assert parse_json_object(text) == {"score": 8}


def test_object_inside_prose():
    text = 'Here is my analysis: {"score": 4, "tip": "Avoid the park."} Stay safe!'
    assert parse_json_object(text)["score"] == 4


@pytest.mark.parametrize("text", ["", "   ", None, "no json here", "[1, 2, 3]", '"just a string"', "{broken"])
def test_rejects_non_objects(text):
    with pytest.raises(PayloadError):
        parse_json_object(text)


def test_payload_error_is_value_error():
    assert issubclass(PayloadError, ValueError)


def test_strip_code_fences_keeps_content():
    assert strip_code_fences("```json\nabc\n```") == "abc"
    assert strip_code_fences("abc") == "abc"
