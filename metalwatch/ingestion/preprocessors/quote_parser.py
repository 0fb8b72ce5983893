"""Parse gold/silver quotes out of free-form model output.

Two stages, each usable on its own:

1. ``extract_payload`` is tolerant. It drops markdown fences, prose and
   assignment prefixes and returns the first balanced ``{...}`` block.
2. ``validate_quote`` is strict. It decodes that block and requires numeric
   ``gold`` and ``silver`` fields.

Example:
    >>> parse_quote("Price = {'gold': 151500, 'silver': 1950}")
    ParsedQuote(gold=151500, silver=1950)
"""

import json
import math
import re
from numbers import Real
from typing import Any

from metalwatch.shared.errors import MalformedPayloadError, SchemaMismatchError
from metalwatch.shared.records import MAX_PRICE, ParsedQuote

FENCE_PATTERN = re.compile(r"```[a-zA-Z]*")

REQUIRED_FIELDS = ("gold", "silver")


def extract_payload(raw: str) -> str:
    """Return the first brace-balanced object literal in ``raw``.

    Raises:
        MalformedPayloadError: No ``{`` or no matching ``}`` in the text.
    """
    text = FENCE_PATTERN.sub("", raw or "").strip()
    if not text:
        raise MalformedPayloadError("Empty response")

    start = text.find("{")
    if start == -1:
        raise MalformedPayloadError("No object found in response")

    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]

    raise MalformedPayloadError("Unbalanced braces in response")


def validate_quote(payload: str) -> ParsedQuote:
    """Decode an extracted payload and check the quote schema.

    Single quotes are treated as double quotes; the payload is a flat
    numeric object with no string values to corrupt.

    Raises:
        MalformedPayloadError: The payload is not a JSON object.
        SchemaMismatchError: ``gold`` or ``silver`` is missing, non-numeric,
            non-finite, not positive or above ``MAX_PRICE``.
    """
    try:
        data = json.loads(payload.replace("'", '"'))
    except ValueError as e:  # JSONDecodeError, or an int past the digit limit
        raise MalformedPayloadError(f"Payload is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedPayloadError(f"Expected an object, got {type(data).__name__}")

    values = {name: _numeric_field(data, name) for name in REQUIRED_FIELDS}
    return ParsedQuote(gold=values["gold"], silver=values["silver"])


def parse_quote(raw: str) -> ParsedQuote:
    """Extract and validate a quote from raw upstream text."""
    return validate_quote(extract_payload(raw))


def _numeric_field(data: dict[str, Any], name: str) -> float:
    if name not in data:
        raise SchemaMismatchError(f"Missing field '{name}'")

    value = data[name]
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, Real):
        raise SchemaMismatchError(f"Field '{name}' must be a number, got {value!r}")
    # Checked on floats only; huge ints overflow math.isfinite
    if isinstance(value, float) and not math.isfinite(value):
        raise SchemaMismatchError(f"Field '{name}' must be a positive finite number, got {value!r}")
    if value <= 0:
        raise SchemaMismatchError(f"Field '{name}' must be a positive finite number, got {value!r}")
    if value > MAX_PRICE:
        raise SchemaMismatchError(f"Field '{name}' exceeds the storable maximum {MAX_PRICE}")
    return value
