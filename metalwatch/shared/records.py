"""Domain records passed between the pipeline stages."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

# Largest value a signed 64-bit INTEGER column holds
MAX_PRICE = 2**63 - 1


@dataclass(frozen=True)
class ParsedQuote:
    """Gold and silver prices as read from the upstream text."""

    gold: float
    silver: float


@dataclass(frozen=True)
class PriceRecord:
    """One stored day of prices, in whole currency units per tola."""

    date: date
    gold: int
    silver: int

    def __post_init__(self) -> None:
        for name in ("gold", "silver"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
            if value > MAX_PRICE:
                raise ValueError(f"{name} exceeds the storable maximum {MAX_PRICE}")


@dataclass(frozen=True)
class DiffResult:
    """Day-over-day change; None means no record exists for the previous day."""

    gold_diff: int | None = None
    silver_diff: int | None = None


@dataclass(frozen=True)
class DeliveryResult:
    recipient: str
    ok: bool
    message_id: str | None = None
    reason: str | None = None

    @classmethod
    def delivered(cls, recipient: str, message_id: str | None = None) -> "DeliveryResult":
        return cls(recipient=recipient, ok=True, message_id=message_id)

    @classmethod
    def failed(cls, recipient: str, reason: str) -> "DeliveryResult":
        return cls(recipient=recipient, ok=False, reason=reason)


class DeliveryStatus(str, Enum):
    ALL_DELIVERED = "all_delivered"
    PARTIAL = "partial"
    ALL_FAILED = "all_failed"
    NO_RECIPIENTS = "no_recipients"
    SKIPPED = "skipped"


@dataclass
class DeliveryReport:
    """Per-recipient outcomes of one fan-out, in attempt order."""

    results: list[DeliveryResult] = field(default_factory=list)
    skipped: bool = False

    @property
    def succeeded(self) -> list[DeliveryResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[DeliveryResult]:
        return [r for r in self.results if not r.ok]

    @property
    def status(self) -> DeliveryStatus:
        if self.skipped:
            return DeliveryStatus.SKIPPED
        if not self.results:
            return DeliveryStatus.NO_RECIPIENTS
        if not self.failed:
            return DeliveryStatus.ALL_DELIVERED
        if self.succeeded:
            return DeliveryStatus.PARTIAL
        return DeliveryStatus.ALL_FAILED


@dataclass
class RunResult:
    """Terminal status of one pipeline invocation.

    ``ok`` reflects ingestion and storage only; delivery outcomes are
    carried in ``report``.
    """

    ok: bool
    summary: str
    record: PriceRecord | None = None
    diff: DiffResult | None = None
    report: DeliveryReport | None = None
    error: Exception | None = None
