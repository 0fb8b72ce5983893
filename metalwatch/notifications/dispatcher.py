"""Fan a price summary out to SMS recipients."""

import logging
from collections.abc import Sequence

from metalwatch.notifications.base_sender import BaseMessageSender
from metalwatch.shared.errors import DeliveryError
from metalwatch.shared.records import DeliveryReport, DeliveryResult, DiffResult, PriceRecord
from metalwatch.shared.utils import setup_logger

MESSAGE_TEMPLATE = "\n".join(
    [
        "Gold Price: {gold}",
        "Silver Price: {silver}",
        "Gold Diff: {gold_diff}",
        "Silver Diff: {silver_diff}",
        "Reply STOP to unsubscribe.",
    ]
)


def _render_diff(value: int | None) -> str:
    return "null" if value is None else str(value)


def format_message(record: PriceRecord, diff: DiffResult) -> str:
    """Render the fixed-layout SMS body."""
    return MESSAGE_TEMPLATE.format(
        gold=record.gold,
        silver=record.silver,
        gold_diff=_render_diff(diff.gold_diff),
        silver_diff=_render_diff(diff.silver_diff),
    )


class NotificationDispatcher:
    """Send one summary to every recipient, one attempt each.

    A failed delivery is recorded and the next recipient is still tried.
    """

    def __init__(
        self,
        sender: BaseMessageSender,
        from_number: str,
        logger: logging.Logger | None = None,
    ) -> None:
        self.sender = sender
        self.from_number = from_number
        self.logger = logger or setup_logger(self.__class__.__name__)

    def send_all(
        self,
        record: PriceRecord,
        diff: DiffResult,
        recipients: Sequence[str],
    ) -> DeliveryReport:
        body = format_message(record, diff)
        report = DeliveryReport()

        for recipient in recipients:
            try:
                message_id = self.sender.send(body, self.from_number, recipient)
            except DeliveryError as e:
                self.logger.warning("SMS to %s failed: %s", recipient, e.reason)
                report.results.append(DeliveryResult.failed(recipient, e.reason))
                continue
            self.logger.info("SMS sent to %s (%s)", recipient, message_id)
            report.results.append(DeliveryResult.delivered(recipient, message_id))

        self.logger.info(
            "Delivered %d/%d messages (%s)",
            len(report.succeeded),
            len(report.results),
            report.status.value,
        )
        return report
