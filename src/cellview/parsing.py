"""Strict JSON parsing of candidate cell text using ijson."""

import io
import logging
from typing import Any

import ijson
from ijson.common import JSONError

logger = logging.getLogger(__name__)

_CANDIDATE_DELIMITERS = (("{", "}"), ("[", "]"))


class _NotJson:
    """Negative parse result. Falsy, and distinct from a parsed JSON ``null``."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_JSON"


NOT_JSON = _NotJson()


def is_candidate(text: str) -> bool:
    """Return True if the trimmed text is delimited like an object or array."""
    trimmed = text.strip()
    return any(
        trimmed.startswith(open_char) and trimmed.endswith(close_char)
        for open_char, close_char in _CANDIDATE_DELIMITERS
    )


def parse_json(text: str) -> Any:
    """Parse exactly one JSON value from text.

    Integers come back as ``int`` and every other number as ``Decimal`` so no
    digits are lost. Returns NOT_JSON on any syntax error or trailing data.
    """
    try:
        values = list(ijson.items(io.BytesIO(text.encode("utf-8")), ""))
    except (JSONError, ValueError, ArithmeticError, UnicodeError) as exc:
        logger.debug("Strict parse failed: %s", exc)
        return NOT_JSON
    if len(values) != 1:
        return NOT_JSON
    return values[0]


def try_parse(text: str) -> Any:
    """Parse candidate text as a JSON object or array.

    Text that does not trim to ``{...}`` or ``[...]`` is rejected without
    invoking the parser.
    """
    if not is_candidate(text):
        return NOT_JSON
    return parse_json(text.strip())
