"""Collectors package - upstream quote sources."""

from metalwatch.ingestion.collectors.base_collector import BaseQuoteCollector
from metalwatch.ingestion.collectors.gemini_collector import GeminiQuoteCollector

__all__ = ["BaseQuoteCollector", "GeminiQuoteCollector"]
