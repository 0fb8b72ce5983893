"""Shared utilities and configuration."""

from metalwatch.shared.config import Config, parse_recipients
from metalwatch.shared.utils import setup_logger, today_in

__all__ = ["Config", "parse_recipients", "setup_logger", "today_in"]
