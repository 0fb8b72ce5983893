"""Unit tests for NotificationDispatcher and message formatting."""

from datetime import date
from unittest.mock import Mock

import pytest

from metalwatch.notifications.base_sender import BaseMessageSender
from metalwatch.notifications.dispatcher import NotificationDispatcher, format_message
from metalwatch.shared.errors import DeliveryError
from metalwatch.shared.records import DeliveryStatus, DiffResult, PriceRecord

RECORD = PriceRecord(date=date(2024, 1, 2), gold=151500, silver=1950)
FROM = "+15550000000"


@pytest.fixture
def sender() -> Mock:
    return Mock(spec=BaseMessageSender)


@pytest.fixture
def dispatcher(sender: Mock, quiet_logger) -> NotificationDispatcher:
    return NotificationDispatcher(sender, FROM, logger=quiet_logger)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


class TestFormatMessage:
    def test_with_diff(self):
        body = format_message(RECORD, DiffResult(gold_diff=1500, silver_diff=-50))
        assert body == (
            "Gold Price: 151500\n"
            "Silver Price: 1950\n"
            "Gold Diff: 1500\n"
            "Silver Diff: -50\n"
            "Reply STOP to unsubscribe."
        )

    def test_missing_diff_rendered_as_null(self):
        body = format_message(RECORD, DiffResult())
        assert "Gold Diff: null" in body
        assert "Silver Diff: null" in body

    def test_zero_diff_is_not_null(self):
        body = format_message(RECORD, DiffResult(gold_diff=0, silver_diff=0))
        assert "Gold Diff: 0" in body
        assert "Silver Diff: 0" in body


# ---------------------------------------------------------------------------
# Delivery
# ---------------------------------------------------------------------------


class TestSendAll:
    def test_same_body_to_every_recipient_in_order(self, dispatcher, sender):
        sender.send.side_effect = ["SM1", "SM2"]
        diff = DiffResult(gold_diff=1500, silver_diff=-50)

        report = dispatcher.send_all(RECORD, diff, ["+1111", "+2222"])

        body = format_message(RECORD, diff)
        assert [c.args for c in sender.send.call_args_list] == [
            (body, FROM, "+1111"),
            (body, FROM, "+2222"),
        ]
        assert [r.message_id for r in report.results] == ["SM1", "SM2"]
        assert report.status is DeliveryStatus.ALL_DELIVERED

    def test_failure_is_isolated_to_one_recipient(self, dispatcher, sender):
        sender.send.side_effect = ["SM1", DeliveryError("+2222", "invalid number"), "SM3"]

        report = dispatcher.send_all(RECORD, DiffResult(), ["+1111", "+2222", "+3333"])

        assert sender.send.call_count == 3
        assert [r.recipient for r in report.results] == ["+1111", "+2222", "+3333"]
        assert [r.ok for r in report.results] == [True, False, True]
        assert report.results[1].reason == "invalid number"
        assert len(report.succeeded) == 2
        assert len(report.failed) == 1
        assert report.status is DeliveryStatus.PARTIAL

    def test_all_failed_is_distinguishable(self, dispatcher, sender):
        sender.send.side_effect = DeliveryError("+1111", "transport outage")

        report = dispatcher.send_all(RECORD, DiffResult(), ["+1111", "+2222"])

        assert sender.send.call_count == 2
        assert report.succeeded == []
        assert report.status is DeliveryStatus.ALL_FAILED

    def test_no_recipients(self, dispatcher, sender):
        report = dispatcher.send_all(RECORD, DiffResult(), [])

        sender.send.assert_not_called()
        assert report.status is DeliveryStatus.NO_RECIPIENTS
