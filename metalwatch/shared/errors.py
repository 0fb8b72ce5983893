"""Exception hierarchy for the price tracker.

``ParseError`` is the only retryable class; everything else ends the run
(``DeliveryError`` ends only the delivery to one recipient).
"""


class MetalWatchError(Exception):
    """Base class for all metalwatch errors."""


class ParseError(MetalWatchError):
    """The upstream text did not yield a valid quote."""


class MalformedPayloadError(ParseError):
    """No decodable object could be extracted from the text."""


class SchemaMismatchError(ParseError):
    """The object decoded but lacks numeric gold/silver fields."""


class FetchError(MetalWatchError):
    """The upstream quote source could not be reached."""


class ExhaustedError(MetalWatchError):
    """Every attempt in the budget produced a ParseError."""

    def __init__(self, attempts: int, last_error: ParseError | None) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"No valid quote after {attempts} attempt(s): {last_error}")


class StoreError(MetalWatchError):
    """The price store was unavailable or rejected the write."""


class DeliveryError(MetalWatchError):
    """A message could not be delivered to one recipient."""

    def __init__(self, recipient: str, reason: str) -> None:
        self.recipient = recipient
        self.reason = reason
        super().__init__(f"Delivery to {recipient} failed: {reason}")
