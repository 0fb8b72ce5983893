"""Data ingestion module - quote sources and response parsing."""

from metalwatch.ingestion.collectors import BaseQuoteCollector, GeminiQuoteCollector
from metalwatch.ingestion.preprocessors import extract_payload, parse_quote, validate_quote

__all__ = [
    "BaseQuoteCollector",
    "GeminiQuoteCollector",
    "extract_payload",
    "parse_quote",
    "validate_quote",
]
