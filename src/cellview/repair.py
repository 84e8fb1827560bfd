"""Best-effort repair of JSON documents truncated at the end.

Table UIs cut long cell values and append an ellipsis. The repair keeps the
part of the document known to be well formed, drops the suspect tail and
closes whatever containers are still open. It makes exactly one attempt and
never raises: unrecoverable input yields ``FAILED``.

Truncation inside a number, an escape sequence or a literal such as ``tru``
is not recovered.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Tuple

from .parsing import NOT_JSON, parse_json

logger = logging.getLogger(__name__)

_TRAILING_ELLIPSIS = re.compile(r"\.{2,}\Z|\u2026\Z")
_TRAILING_SEPARATORS = re.compile(r"[, ]+\Z")
# A key announced but never given a value: `, "fieldName":`
_DANGLING_KEY = re.compile(r',?\s*"[^"]*"\s*:\s*\Z')

_OPENERS = {"{": "}", "[": "]"}
_CLOSERS = frozenset("}]")
_STRUCTURAL = frozenset("{}[],")


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one lexical pass over a document."""

    tokens: Tuple[Tuple[int, str], ...]  # (index, char) of brackets/commas outside strings
    ends_in_string: bool


def scan(text: str) -> ScanResult:
    """Single pass tracking string literals and backslash escapes.

    A backslash consumes the following character whatever it is, inside or
    outside a string.
    """
    tokens = []
    in_string = False
    escape = False
    for index, char in enumerate(text):
        if escape:
            escape = False
            continue
        if char == "\\":
            escape = True
        elif char == '"':
            in_string = not in_string
        elif not in_string and char in _STRUCTURAL:
            tokens.append((index, char))
    return ScanResult(tokens=tuple(tokens), ends_in_string=in_string)


def strip_ellipsis(text: str) -> str:
    """Remove a trailing ``..`` (or longer) run or a single ``…``."""
    return _TRAILING_ELLIPSIS.sub("", text, count=1)


def close_dangling_quote(text: str) -> str:
    """Close a string literal left open at the end of the text."""
    if scan(text).ends_in_string:
        return text + '"'
    return text


def find_truncation_point(text: str) -> int:
    """Index of the last opening bracket or nested comma, or -1.

    Everything from this index on is treated as possibly truncated.
    """
    depth = 0
    last_valid = -1
    for index, char in scan(text).tokens:
        if char in _OPENERS:
            depth += 1
            last_valid = index
        elif char in _CLOSERS:
            depth -= 1
        elif depth > 0:
            last_valid = index
    return last_valid


def truncate_at(text: str, index: int) -> str:
    """Cut text before index and drop dangling commas/spaces.

    Index 0 or -1 means there is no safe cut and the text is kept whole.
    """
    if index <= 0:
        return text
    return _TRAILING_SEPARATORS.sub("", text[:index])


def strip_dangling_key(text: str) -> str:
    return _DANGLING_KEY.sub("", text, count=1)


def close_brackets(text: str) -> str:
    """Append the closers of every container still open, innermost first.

    Any closing bracket pops the innermost opener, matching or not.
    """
    stack = []
    for _index, char in scan(text).tokens:
        if char in _OPENERS:
            stack.append(_OPENERS[char])
        elif char in _CLOSERS and stack:
            stack.pop()
    return text + "".join(reversed(stack))


def repair_text(text: str) -> str:
    """Run the textual repair passes and return the reconstructed document."""
    cleaned = close_dangling_quote(strip_ellipsis(text))
    cut = truncate_at(cleaned, find_truncation_point(cleaned))
    return close_brackets(strip_dangling_key(cut))


@dataclass(frozen=True)
class Recovered:
    """A value recovered from truncated text.

    Repaired documents may have lost trailing data and must be flagged as such
    wherever they are shown.
    """

    value: Any
    repaired_text: str
    repaired: bool = True


class _Failed:
    """Repair could not produce valid JSON. Falsy singleton."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "FAILED"


FAILED = _Failed()


def try_repair(text: str):
    """Recover a JSON object or array from text truncated at the end.

    Returns ``Recovered`` on success and ``FAILED`` otherwise. Callers should
    leave the original text untouched on ``FAILED``.
    """
    text = text.strip()
    if not text.startswith(tuple(_OPENERS)):
        return FAILED

    repaired = repair_text(text)
    value = parse_json(repaired)
    if value is NOT_JSON:
        logger.debug("Repair failed for %.80r (reconstructed %.80r)", text, repaired)
        return FAILED

    logger.debug("Repaired truncated JSON: %.80r -> %.80r", text, repaired)
    return Recovered(value=value, repaired_text=repaired)
