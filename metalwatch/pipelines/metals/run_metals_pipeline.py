"""
Metals Price Pipeline Runner

fetch + parse (retried) -> store and diff -> SMS fan-out
"""

import logging
from collections.abc import Sequence

from metalwatch.ingestion.collectors.base_collector import BaseQuoteCollector
from metalwatch.ingestion.collectors.gemini_collector import GeminiQuoteCollector
from metalwatch.notifications.dispatcher import NotificationDispatcher
from metalwatch.notifications.twilio_sender import TwilioSender
from metalwatch.pipelines.metals.retry import DEFAULT_MAX_ATTEMPTS, obtain_quote
from metalwatch.shared.config import Config
from metalwatch.shared.db import PriceStore, build_engine, create_session_factory
from metalwatch.shared.errors import ExhaustedError, FetchError, StoreError
from metalwatch.shared.records import DeliveryReport, RunResult
from metalwatch.shared.utils import setup_logger, today_in


class MetalsPipeline:
    """One scheduled run of the gold/silver tracker.

    Every collaborator is passed in, so tests can swap any of them for a
    double.
    """

    def __init__(
        self,
        source: BaseQuoteCollector,
        store: PriceStore,
        dispatcher: NotificationDispatcher,
        recipients: Sequence[str],
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        timezone: str = "Asia/Kathmandu",
        notify: bool = True,
        logger: logging.Logger | None = None,
    ) -> None:
        self.source = source
        self.store = store
        self.dispatcher = dispatcher
        self.recipients = list(recipients)
        self.max_attempts = max_attempts
        self.timezone = timezone
        self.notify = notify
        self.logger = logger or setup_logger(self.__class__.__name__)

    def run(self) -> RunResult:
        """Ingest, store and announce today's prices.

        Success means a quote was parsed and stored. Delivery failures are
        reported in ``RunResult.report`` but do not fail the run.
        """
        # -----------------------------
        # Fetch & parse
        # -----------------------------
        try:
            quote = obtain_quote(self.source.fetch, self.max_attempts, logger=self.logger)
        except FetchError as e:
            return self._failed(f"Quote source unreachable: {e}", e)
        except ExhaustedError as e:
            return self._failed(f"No valid quote after {e.attempts} attempt(s): {e.last_error}", e)

        # -----------------------------
        # Persist & diff
        # -----------------------------
        price_date = today_in(self.timezone)
        try:
            record, diff = self.store.upsert_and_diff(price_date, quote)
        except StoreError as e:
            return self._failed(f"Could not store prices for {price_date}: {e}", e)

        # -----------------------------
        # Notify
        # -----------------------------
        if self.notify:
            report = self.dispatcher.send_all(record, diff, self.recipients)
        else:
            self.logger.info("Notification disabled, skipping delivery")
            report = DeliveryReport(skipped=True)

        summary = (
            f"{record.date}: gold {record.gold} ({_signed(diff.gold_diff)}), "
            f"silver {record.silver} ({_signed(diff.silver_diff)}); "
            f"sms {len(report.succeeded)}/{len(report.results)} {report.status.value}"
        )
        self.logger.info(summary)
        return RunResult(ok=True, summary=summary, record=record, diff=diff, report=report)

    def _failed(self, summary: str, error: Exception) -> RunResult:
        self.logger.error(summary)
        return RunResult(ok=False, summary=summary, error=error)


def _signed(value: int | None) -> str:
    return "null" if value is None else f"{value:+d}"


def build_pipeline(config: Config, notify: bool = True, logger: logging.Logger | None = None) -> MetalsPipeline:
    """Construct every collaborator once from configuration."""
    source = GeminiQuoteCollector(
        api_key=config.GEMINI_API_KEY,
        model=config.GEMINI_MODEL,
        source_url=config.PRICE_SOURCE_URL,
        timeout=config.REQUEST_TIMEOUT,
        logger=logger,
    )
    store = PriceStore(create_session_factory(build_engine(config.DATABASE_URL)), logger=logger)
    sender = TwilioSender(
        account_sid=config.TWILIO_ACCOUNT_SID,
        auth_token=config.TWILIO_AUTH_TOKEN,
        timeout=config.REQUEST_TIMEOUT,
    )
    dispatcher = NotificationDispatcher(sender, config.TWILIO_PHONE_NUMBER, logger=logger)
    return MetalsPipeline(
        source=source,
        store=store,
        dispatcher=dispatcher,
        recipients=config.recipients,
        max_attempts=config.MAX_FETCH_ATTEMPTS,
        timezone=config.TIMEZONE,
        notify=notify,
        logger=logger,
    )


def run() -> RunResult:
    """Zero-argument entry point for schedulers."""
    config = Config()
    logger = setup_logger("metalwatch", config.LOGS_DIR / "metalwatch.log", config.LOG_LEVEL)

    try:
        config.validate()
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        return RunResult(ok=False, summary=f"Configuration error: {e}", error=e)

    pipeline = build_pipeline(config, logger=logger)
    try:
        pipeline.store.initialize()
    except StoreError as e:
        logger.error("Price store unavailable: %s", e)
        return RunResult(ok=False, summary=f"Price store unavailable: {e}", error=e)
    return pipeline.run()


if __name__ == "__main__":
    result = run()
    print(result.summary)
    raise SystemExit(0 if result.ok else 1)
