"""Tolerant parsing of provider output.

Providers wrap JSON in prose or markdown fences, return a bare array, an
object holding the array under ``questions``, or a single object. Every
response is classified once into a ``ParsedPayload`` and callers resolve it in
a fixed order instead of probing the shape themselves.
"""
import json
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

_FENCE_RE = re.compile(r"```(?:json|JSON)?")

WRAPPER_FIELD = "questions"


class PayloadShape(str, Enum):
    ARRAY = "array"
    WRAPPED = "wrapped"
    SINGLE_OBJECT = "single_object"
    UNPARSEABLE = "unparseable"


@dataclass
class ParsedPayload:
    shape: PayloadShape
    items: List[Any] = field(default_factory=list)


def extract_json_span(text: Optional[str]) -> Optional[str]:
    """Return the first balanced ``{...}`` or ``[...]`` span in ``text``."""
    if not text:
        return None
    cleaned = _FENCE_RE.sub("", text)

    start = None
    for idx, char in enumerate(cleaned):
        if char in "{[":
            start = idx
            break
    if start is None:
        return None

    stack = []
    in_string = False
    escaped = False
    for idx in range(start, len(cleaned)):
        char = cleaned[idx]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in "{[":
            stack.append("}" if char == "{" else "]")
        elif char in "}]":
            if not stack or stack.pop() != char:
                return None
            if not stack:
                return cleaned[start:idx + 1]
    return None


def _loads(text: Optional[str]) -> Any:
    span = extract_json_span(text)
    if span is None:
        return None
    try:
        return json.loads(span)
    except ValueError:
        return None


def parse_payload(text: Optional[str]) -> ParsedPayload:
    data = _loads(text)
    if isinstance(data, list):
        return ParsedPayload(PayloadShape.ARRAY, data)
    if isinstance(data, dict):
        wrapped = data.get(WRAPPER_FIELD)
        if isinstance(wrapped, list):
            return ParsedPayload(PayloadShape.WRAPPED, wrapped)
        return ParsedPayload(PayloadShape.SINGLE_OBJECT, [data])
    return ParsedPayload(PayloadShape.UNPARSEABLE)


def parse_object(text: Optional[str]) -> Optional[dict]:
    """First JSON object in ``text``, or None."""
    data = _loads(text)
    return data if isinstance(data, dict) else None
