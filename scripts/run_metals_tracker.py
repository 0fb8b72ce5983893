"""Gold/silver price tracker run script.

Fetches today's hallmark gold and silver price per tola, stores it next to
yesterday's, and texts the summary to every configured recipient.

Usage:
    # Scheduled run (fetch, store, SMS)
    python scripts/run_metals_tracker.py

    # Store today's price without sending SMS
    python scripts/run_metals_tracker.py --no-notify

    # Allow more attempts when the model answer keeps failing to parse
    python scripts/run_metals_tracker.py --max-attempts 5

    # Health check only
    python scripts/run_metals_tracker.py --health-check

    # Export the stored history
    python scripts/run_metals_tracker.py --export-csv data/metal_prices.csv

Example:
    $ python scripts/run_metals_tracker.py
    [WARNING] Attempt 1/3: could not parse quote (SchemaMismatchError): Missing field 'silver'
    [INFO] Attempt 2/3: gold=151500 silver=1950
    [INFO] Stored 2024-01-02 gold=151500 silver=1950 (diff gold=1500 silver=-50)
    [INFO] Delivered 2/2 messages (all_delivered)
"""

import argparse
import sys
from pathlib import Path

from metalwatch.pipelines.metals.run_metals_pipeline import build_pipeline
from metalwatch.shared.config import Config
from metalwatch.shared.db import PriceStore, build_engine, create_session_factory
from metalwatch.shared.errors import StoreError
from metalwatch.shared.utils import setup_logger


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Track the daily gold and silver price and send it by SMS",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--max-attempts",
        type=int,
        help="Fetch+parse attempts before giving up. Default: MAX_FETCH_ATTEMPTS (3)",
        metavar="N",
    )

    parser.add_argument(
        "--no-notify",
        action="store_true",
        help="Store the price but do not send SMS",
    )

    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Run health check only and exit",
    )

    parser.add_argument(
        "--export-csv",
        type=Path,
        help="Export stored price history to CSV and exit",
        metavar="PATH",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level (DEBUG, INFO, ...). Default: LOG_LEVEL",
    )

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main run script."""
    args = parse_args(argv)
    config = Config()

    logger = setup_logger(
        "metalwatch",
        log_file=config.LOGS_DIR / "metalwatch.log",
        level=args.log_level or config.LOG_LEVEL,
    )

    try:
        if args.export_csv:
            store = PriceStore(
                create_session_factory(build_engine(config.DATABASE_URL)), logger=logger
            )
            store.initialize()
            store.export_to_csv(args.export_csv)
            return 0

        if args.max_attempts is not None:
            if args.max_attempts < 1:
                logger.error("--max-attempts must be at least 1")
                return 1
            config.MAX_FETCH_ATTEMPTS = args.max_attempts

        config.validate()
        pipeline = build_pipeline(config, notify=not args.no_notify, logger=logger)

        if args.health_check:
            if not pipeline.source.health_check():
                logger.error("Quote source health check failed")
                return 1
            logger.info("Health check: PASSED")
            return 0

        pipeline.store.initialize()
        result = pipeline.run()

        if not result.ok:
            logger.error("FAILED: %s", result.summary)
            return 1

        logger.info("SUCCESS: %s", result.summary)
        return 0

    except ValueError as e:
        logger.error("Configuration error: %s", e)
        logger.error("Make sure the Gemini and Twilio credentials are set in .env")
        return 1

    except StoreError as e:
        logger.error("Price store unavailable: %s", e)
        return 1

    except KeyboardInterrupt:
        logger.warning("Run interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
