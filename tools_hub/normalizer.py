"""
Normalization and validation of model output that was asked to be JSON.

Models wrap JSON in markdown fences and swap in typographic quotes. This
module strips that noise, parses the result and checks it against a
feature ``Schema``. Every function here is pure: failures are raised as
``MalformedResponseError`` / ``InvalidShapeError`` and logged by the caller.
"""

from __future__ import annotations

import json
import re
from typing import Any

from tools_hub.errors import InvalidShapeError, MalformedResponseError
from tools_hub.schemas import Schema

# A fence marker, its optional language tag and the whitespace around it.
# ``json`` is always a tag; any other word only when a line break follows,
# so inline fences inside string values keep their text.
_FENCE_RE = re.compile(r"\s*```(?:(?i:json)\b|[A-Za-z][\w+#.-]*(?=[ \t]*\r?\n))?\s*")

_DOUBLE_QUOTES = str.maketrans({
    "\u201c": '"',
    "\u201d": '"',
    "\u201e": '"',
    "\u201f": '"',
})

# Left/right single quotes and apostrophe look-alikes
_SINGLE_QUOTES = str.maketrans({
    "\u2018": "'",
    "\u2019": "'",
    "\u201a": "'",
    "\u201b": "'",
    "\u2032": "'",
    "\u02bc": "'",
})


def strip_fences(text: str) -> str:
    """Remove fence markers until none remain.

    A single pass can join stray backticks into a new fence, so repeat
    until the text stops changing. Every change shortens the text.
    """
    while True:
        stripped = _FENCE_RE.sub("", text)
        if stripped == text:
            return stripped
        text = stripped


def normalize(raw_text: str) -> str:
    """Return the cleaned form of *raw_text*; idempotent."""
    text = strip_fences(raw_text)
    text = text.translate(_DOUBLE_QUOTES)
    text = text.translate(_SINGLE_QUOTES)
    return text.strip()


def parse(raw_text: str, schema: Schema) -> tuple[Any, str]:
    """Normalize and JSON-decode. Returns ``(parsed, cleaned_text)``."""
    cleaned = normalize(raw_text)
    try:
        return json.loads(cleaned), cleaned
    except json.JSONDecodeError:
        raise MalformedResponseError(schema.label, raw_text, cleaned) from None


def missing_fields(parsed: Any, schema: Schema) -> list[str]:
    """Sorted names of required fields that are absent or falsy.

    ``""``, ``[]``, ``{}``, ``null``, ``0`` and ``false`` all count as
    missing. A value that is not a JSON object is missing every field.
    """
    if not isinstance(parsed, dict):
        return sorted(schema.required)
    return sorted(name for name in schema.required if not parsed.get(name))


def normalize_and_validate(raw_text: str, schema: Schema) -> dict[str, Any]:
    """Full pipeline: clean, parse, validate. Returns the parsed object.

    Extra fields in the model output are passed through untouched.
    """
    parsed, cleaned = parse(raw_text, schema)
    missing = missing_fields(parsed, schema)
    if missing:
        raise InvalidShapeError(schema.label, missing, raw_text, cleaned)
    return parsed
