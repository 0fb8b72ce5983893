"""Preprocessors package - turn raw upstream text into validated quotes."""

from metalwatch.ingestion.preprocessors.quote_parser import (
    extract_payload,
    parse_quote,
    validate_quote,
)

__all__ = ["extract_payload", "parse_quote", "validate_quote"]
