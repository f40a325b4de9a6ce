from __future__ import annotations

import pytest

from skillforge.ai.json_extract import JSONExtractionError, extract_json_object, strip_code_fences


def test_plain_json() -> None:
    assert extract_json_object('{"a": 1}') == {"a": 1}


def test_fenced_json_with_language_tag() -> None:
    text = 'Here you go:\n```json\n{"title": "Plan", "steps": []}\n```\nGood luck!'
    assert extract_json_object(text) == {"title": "Plan", "steps": []}


def test_fence_without_language_tag() -> None:
    assert strip_code_fences("```\n{}\n```") == "{}"


def test_prose_around_object_is_ignored() -> None:
    text = 'Sure! {"outer": {"inner": true}} Hope this helps.'
    assert extract_json_object(text) == {"outer": {"inner": True}}


@pytest.mark.parametrize(
    "text",
    [
        "no json here",
        "} backwards {",
        '{"unterminated": ',
        "```json\n[1, 2, 3]\n```",
    ],
)
def test_unrecoverable_text_raises(text: str) -> None:
    with pytest.raises(JSONExtractionError):
        extract_json_object(text)
