"""Unit tests for the quote parser (extraction and schema validation)."""

import pytest

from metalwatch.ingestion.preprocessors.quote_parser import (
    extract_payload,
    parse_quote,
    validate_quote,
)
from metalwatch.shared.errors import MalformedPayloadError, ParseError, SchemaMismatchError
from metalwatch.shared.records import ParsedQuote

STRICT = '{"gold": 151500, "silver": 1950}'
EXPECTED = ParsedQuote(gold=151500, silver=1950)

# ---------------------------------------------------------------------------
# Tolerant inputs
# ---------------------------------------------------------------------------


class TestNoisyInputs:
    """Noisy wrappings parse to the same quote as strict JSON."""

    @pytest.mark.parametrize(
        "raw",
        [
            STRICT,
            f"```json\n{STRICT}\n```",
            f"```\n{STRICT}\n```",
            "{'gold': 151500, 'silver': 1950}",
            "Price = {'gold': 151500, 'silver': 1950}",
            "Today's hallmark rates from the page are:\n```json\n{'gold': 151500, 'silver': 1950}\n```\nPrices are per tola.",
            f"   \n{STRICT}\n\n",
        ],
        ids=["strict", "json-fence", "bare-fence", "single-quotes", "assignment", "prose", "whitespace"],
    )
    def test_matches_strict_equivalent(self, raw: str) -> None:
        assert parse_quote(raw) == parse_quote(STRICT) == EXPECTED

    def test_fractional_values_preserved(self) -> None:
        quote = parse_quote("{'gold': 151500.5, 'silver': 1949.75}")
        assert quote.gold == 151500.5
        assert quote.silver == 1949.75

    def test_extra_keys_ignored(self) -> None:
        quote = parse_quote('{"gold": 151500, "silver": 1950, "unit": 1}')
        assert quote == EXPECTED

    def test_first_of_multiple_blocks_wins(self) -> None:
        raw = "{'gold': 151500, 'silver': 1950} and yesterday {'gold': 150000, 'silver': 2000}"
        assert parse_quote(raw) == EXPECTED


# ---------------------------------------------------------------------------
# Extraction stage
# ---------------------------------------------------------------------------


class TestExtractPayload:
    def test_returns_first_balanced_block(self) -> None:
        assert extract_payload("x = {'a': {'b': 1}} trailing {'c': 2}") == "{'a': {'b': 1}}"

    def test_strips_fences(self) -> None:
        assert extract_payload("```json\n{}\n```") == "{}"

    @pytest.mark.parametrize("raw", ["", "   ", "```json\n```", None])
    def test_empty_input(self, raw) -> None:
        with pytest.raises(MalformedPayloadError, match="Empty"):
            extract_payload(raw)

    def test_no_braces(self) -> None:
        with pytest.raises(MalformedPayloadError, match="No object"):
            extract_payload("Gold is 151500 and silver is 1950 today.")

    def test_unbalanced_braces(self) -> None:
        with pytest.raises(MalformedPayloadError, match="Unbalanced"):
            extract_payload("{'gold': 151500, 'silver': 1950")


# ---------------------------------------------------------------------------
# Validation stage
# ---------------------------------------------------------------------------


class TestValidateQuote:
    def test_valid(self) -> None:
        assert validate_quote(STRICT) == EXPECTED

    def test_not_json(self) -> None:
        with pytest.raises(MalformedPayloadError):
            validate_quote("{gold: 151500, silver: 1950}")

    @pytest.mark.parametrize(
        "payload, field",
        [
            ('{"silver": 1950}', "gold"),
            ('{"gold": 151500}', "silver"),
            ("{}", "gold"),
        ],
    )
    def test_missing_field(self, payload: str, field: str) -> None:
        with pytest.raises(SchemaMismatchError, match=f"Missing field '{field}'"):
            validate_quote(payload)

    @pytest.mark.parametrize(
        "payload",
        [
            '{"gold": "151500", "silver": 1950}',
            '{"gold": 151500, "silver": "1,950"}',
            '{"gold": null, "silver": 1950}',
            '{"gold": true, "silver": 1950}',
            '{"gold": [151500], "silver": 1950}',
            '{"gold": 151500, "silver": {"tola": 1950}}',
        ],
        ids=["string", "formatted-string", "null", "bool", "list", "object"],
    )
    def test_non_numeric_rejected(self, payload: str) -> None:
        with pytest.raises(SchemaMismatchError, match="must be a number"):
            validate_quote(payload)

    @pytest.mark.parametrize(
        "payload",
        [
            '{"gold": NaN, "silver": 1950}',
            '{"gold": 151500, "silver": Infinity}',
            '{"gold": 0, "silver": 1950}',
            '{"gold": 151500, "silver": -5}',
        ],
    )
    def test_non_positive_or_non_finite_rejected(self, payload: str) -> None:
        with pytest.raises(SchemaMismatchError, match="positive finite"):
            validate_quote(payload)

    def test_integer_too_large_for_float(self) -> None:
        payload = '{"gold": 1' + "0" * 400 + ', "silver": 1950}'
        with pytest.raises(SchemaMismatchError, match="storable maximum"):
            validate_quote(payload)

    @pytest.mark.parametrize(
        "payload",
        ['{"gold": 1e20, "silver": 1950}', '{"gold": 151500, "silver": 9223372036854775808}'],
    )
    def test_above_integer_column_range(self, payload: str) -> None:
        with pytest.raises(SchemaMismatchError, match="storable maximum"):
            validate_quote(payload)

    def test_largest_storable_value_accepted(self) -> None:
        quote = validate_quote('{"gold": 9223372036854775807, "silver": 1950}')
        assert quote.gold == 2**63 - 1

    def test_integer_past_digit_limit_is_parse_error(self) -> None:
        """Rejected while decoding where the interpreter caps int digits."""
        payload = '{"gold": 1' + "0" * 5000 + ', "silver": 1950}'
        with pytest.raises(ParseError):
            validate_quote(payload)


def test_all_parse_failures_are_parse_errors() -> None:
    for raw in ["", "no payload", "{'gold': 1}", "{'gold': 'x', 'silver': 1}"]:
        with pytest.raises(ParseError):
            parse_quote(raw)
