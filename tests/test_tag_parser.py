
import pytest
from tag_generator.tag_parser import (
    MAX_TAGS,
    ParsedTags,
    Unparseable,
    json_candidate,
    parse_tag_content,
    sanitize_tags,
    split_fallback,
)


def test_candidate_spans_first_and_last_brace():
    content = 'Here you go: {"tags": ["a"]} hope that helps {}'
    assert json_candidate(content) == '{"tags": ["a"]} hope that helps {}'


def test_candidate_is_whole_content_without_braces():
    assert json_candidate("lofi, chill") == "lofi, chill"
    assert json_candidate("} backwards {") == "} backwards {"


def test_parse_wrapped_json():
    result = parse_tag_content('```json\n{"tags": ["lofi", "chill"]}\n```')
    assert result == ParsedTags(value=["lofi", "chill"])


def test_parse_non_object_json():
    assert parse_tag_content('["lofi", "chill"]') == ParsedTags(value=None)


def test_parse_falls_back_on_bad_json():
    result = parse_tag_content("lofi, study beats\r\n\nchill hop,, ")
    assert result == Unparseable(fallback=["lofi", "study beats", "chill hop"])


def test_fallback_is_capped():
    content = "\n".join(f"tag {i}" for i in range(40))
    assert len(split_fallback(content)) == MAX_TAGS


def test_empty_content_yields_no_tags():
    result = parse_tag_content("")
    assert isinstance(result, Unparseable)
    assert sanitize_tags(result.fallback) == []


@pytest.mark.parametrize("value", [None, "lofi, chill", {"a": 1}, 3])
def test_sanitize_non_list(value):
    assert sanitize_tags(value) == []


def test_sanitize_normalizes_each_tag():
    assert sanitize_tags(["  Lofi Music ", "lofi, beats,", ",", "", None, 42, True]) == [
        "lofi music",
        "lofi beats",
        "42",
        "true",
    ]


def test_sanitize_caps_after_dropping_empties():
    value = [""] * 10 + [f"t{i}" for i in range(30)]
    out = sanitize_tags(value)
    assert len(out) == MAX_TAGS
    assert out[0] == "t0"


def test_sanitize_is_idempotent():
    once = sanitize_tags([" A, B ", "Chill Hop", "x" * 3, "  ", "Long-Tail Tag,"] * 8)
    assert sanitize_tags(once) == once


@pytest.mark.parametrize("content,expected", [
    ("NaN", ["nan"]),
    ("Infinity", ["infinity"]),
    ('{"tags": ["lofi"], "score": NaN}', ['{"tags": ["lofi"]', '"score": nan}']),
])
def test_non_standard_json_constants_fall_back(content, expected):
    result = parse_tag_content(content)
    assert isinstance(result, Unparseable)
    assert sanitize_tags(result.fallback) == expected
