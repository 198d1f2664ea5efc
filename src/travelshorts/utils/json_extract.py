"""Tolerant JSON extraction for free-form text-generation output."""

import json
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Union


@dataclass
class Parsed:
    """JSON value recovered from model output."""

    value: Any


@dataclass
class Malformed:
    """No strategy could recover JSON from the text."""

    reason: str


ParseResult = Union[Parsed, Malformed]


def strip_markdown_code_blocks(text: str) -> str:
    """Strip markdown code fences from AI response text.

    Args:
        text: Raw text that may be wrapped in a code block

    Returns:
        Text with a leading ```json / ``` and trailing ``` removed
    """
    text = text.strip()
    if text.startswith('```json'):
        text = text[7:]
    elif text.startswith('```'):
        text = text[3:]
    if text.endswith('```'):
        text = text[:-3]
    return text.strip()


def find_balanced_json(text: str, open_char: str) -> Optional[str]:
    """Return the first balanced span opened by ``open_char``.

    Brackets inside string literals are ignored, and backslash escapes
    inside strings are honoured.

    Args:
        text: Arbitrary text possibly containing embedded JSON
        open_char: Either ``{`` or ``[``

    Returns:
        The matched substring, or None if no balanced span exists
    """
    close_char = '}' if open_char == '{' else ']'
    start = text.find(open_char)
    if start < 0:
        return None

    depth = 0
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        char = text[index]

        if in_string:
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == open_char:
            depth += 1
        elif char == close_char:
            depth -= 1
            if depth == 0:
                return text[start:index + 1]

    return None


def _direct(text: str) -> Optional[str]:
    return text.strip()


def _fence_stripped(text: str) -> Optional[str]:
    return strip_markdown_code_blocks(text)


def _balanced_object(text: str) -> Optional[str]:
    return find_balanced_json(strip_markdown_code_blocks(text), '{')


def _balanced_array(text: str) -> Optional[str]:
    return find_balanced_json(strip_markdown_code_blocks(text), '[')


# Tried in order; the first candidate that parses wins.
STRATEGIES: List[Callable[[str], Optional[str]]] = [
    _direct,
    _fence_stripped,
    _balanced_object,
    _balanced_array,
]


def extract_json(text: Optional[str]) -> ParseResult:
    """Recover a JSON value from model output.

    Args:
        text: Raw model output

    Returns:
        Parsed(value) on success, Malformed(reason) otherwise
    """
    if not text or not text.strip():
        return Malformed("empty response")

    for strategy in STRATEGIES:
        candidate = strategy(text)
        if not candidate:
            continue
        try:
            return Parsed(json.loads(candidate))
        except json.JSONDecodeError:
            continue

    return Malformed("no parseable JSON found")
