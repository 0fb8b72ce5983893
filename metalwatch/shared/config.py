"""Configuration management for metalwatch."""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def parse_recipients(raw: Optional[str]) -> list[str]:
    """Split a comma-delimited recipient string.

    Entries are trimmed; blanks and repeats are dropped, first occurrence wins.
    """
    recipients: list[str] = []
    for entry in (raw or "").split(","):
        entry = entry.strip()
        if entry and entry not in recipients:
            recipients.append(entry)
    return recipients


class Config:
    """Application configuration."""

    # Project paths
    ROOT_DIR = Path(__file__).parent.parent.parent
    DATA_DIR = ROOT_DIR / "data"
    LOGS_DIR = ROOT_DIR / "logs"

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'metal_prices.db'}")

    # Upstream quote source (Gemini)
    GEMINI_API_KEY: Optional[str] = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    PRICE_SOURCE_URL: str = os.getenv("PRICE_SOURCE_URL", "https://www.hamropatro.com/gold")

    # SMS delivery (Twilio)
    TWILIO_ACCOUNT_SID: Optional[str] = os.getenv("TWILIO_ACCOUNT_SID")
    TWILIO_AUTH_TOKEN: Optional[str] = os.getenv("TWILIO_AUTH_TOKEN")
    TWILIO_PHONE_NUMBER: Optional[str] = os.getenv("TWILIO_PHONE_NUMBER")
    RECIPIENT_PHONE_NUMBERS: str = os.getenv(
        "RECIPIENT_PHONE_NUMBERS", os.getenv("RECIPIENT_PHONE_NUMBER", "")
    )

    # Run settings
    MAX_FETCH_ATTEMPTS: int = int(os.getenv("MAX_FETCH_ATTEMPTS", "3"))
    TIMEZONE: str = os.getenv("TIMEZONE", "Asia/Kathmandu")
    REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "30"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration."""
        required = {
            "GEMINI_API_KEY": cls.GEMINI_API_KEY,
            "TWILIO_ACCOUNT_SID": cls.TWILIO_ACCOUNT_SID,
            "TWILIO_AUTH_TOKEN": cls.TWILIO_AUTH_TOKEN,
            "TWILIO_PHONE_NUMBER": cls.TWILIO_PHONE_NUMBER,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ValueError(f"{', '.join(missing)} not set in environment")
        if cls.MAX_FETCH_ATTEMPTS < 1:
            raise ValueError("MAX_FETCH_ATTEMPTS must be at least 1")

    @property
    def recipients(self) -> list[str]:
        """Recipient phone numbers in delivery order."""
        return parse_recipients(self.RECIPIENT_PHONE_NUMBERS)


config = Config()
