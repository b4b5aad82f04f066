"""
Best-effort extraction of keyword tags from free-form model output.

The model is asked for ``{"tags": [...]}`` but may wrap it in prose or ignore
the format entirely. ``parse_tag_content`` returns either ``ParsedTags`` (a JSON
object was found) or ``Unparseable`` (fallback comma/newline split), and
``sanitize_tags`` normalizes whatever came out.
"""
from dataclasses import dataclass
from typing import Any, List, Union
import json
import re

MAX_TAGS = 25

_LINE_BREAKS = re.compile(r"[\r\n]+")


@dataclass(frozen=True)
class ParsedTags:
    # raw "tags" field of the decoded object; may be any JSON shape
    value: Any


@dataclass(frozen=True)
class Unparseable:
    fallback: List[str]


TagParseResult = Union[ParsedTags, Unparseable]


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not valid JSON
    raise ValueError(f"invalid JSON constant {name}")


def json_candidate(content: str) -> str:
    first = content.find("{")
    last = content.rfind("}")
    if first >= 0 and last > first:
        return content[first:last + 1]
    return content


def split_fallback(content: str) -> List[str]:
    pieces = _LINE_BREAKS.sub(",", content).split(",")
    return [p.strip() for p in pieces if p.strip()][:MAX_TAGS]


def parse_tag_content(content: str) -> TagParseResult:
    try:
        obj = json.loads(json_candidate(content), parse_constant=_reject_constant)
    except ValueError:
        return Unparseable(fallback=split_fallback(content))
    if isinstance(obj, dict):
        return ParsedTags(value=obj.get("tags"))
    return ParsedTags(value=None)


def sanitize_tags(value: Any) -> List[str]:
    """Lowercase, strip commas and whitespace, drop empties, cap at MAX_TAGS."""
    if not isinstance(value, list):
        return []
    out: List[str] = []
    for item in value:
        if item is None:
            continue
        tag = str(item).lower().replace(",", "").strip()
        if tag:
            out.append(tag)
        if len(out) == MAX_TAGS:
            break
    return out

