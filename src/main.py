from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Sequence

from config import config
from db.db import init_db
from db.repositories import LedgerRepository
from domain.ledger import Ledger, LedgerError
from domain.transaction import Transaction
from importers import SUPPORTED_EXCHANGES, TransactionImportError, get_importer
from utils.debug_dump import dump_ledger
from utils.ledger_summary import compute_ledger_summary, render_ledger_summary

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_ledger(transactions: Iterable[Transaction]) -> Ledger:
    """Apply transactions in arrival order; the first error aborts the whole build."""
    return Ledger().apply_all(transactions)


def run(
    csv_path: Path,
    *,
    exchange: str,
    output_path: Path | None = None,
    db_file: str | None = None,
) -> Ledger:
    importer = get_importer(exchange, csv_path)
    ledger = build_ledger(importer.iter_transactions())
    logger.info("Built ledger with %d accounts from %s", len(ledger), csv_path)

    render_ledger_summary(compute_ledger_summary(ledger))

    if output_path is not None:
        dump_ledger(ledger, output_path)
        logger.info("Wrote ledger dump to %s", output_path)

    if db_file is not None:
        session = init_db(db_file)
        try:
            LedgerRepository(session).save(ledger)
        finally:
            session.close()
        logger.info("Persisted ledger to %s", db_file)

    # TODO: cost-basis / taxable event detection on top of the finished ledger.
    return ledger


def main(argv: Sequence[str] | None = None) -> int:
    settings = config()
    parser = argparse.ArgumentParser(description="Build a per-asset ledger from an exchange export.")
    parser.add_argument("csv", type=Path)
    parser.add_argument(
        "--exchange", default=settings.default_exchange, help=f"one of: {', '.join(SUPPORTED_EXCHANGES)}"
    )
    parser.add_argument("--output", type=Path, default=settings.output_path)
    parser.add_argument("--db", default=settings.db_file)
    parser.add_argument("--no-db", action="store_true", help="skip persisting the ledger to SQLite")
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS, default=settings.log_level
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    try:
        run(
            args.csv,
            exchange=args.exchange,
            output_path=args.output,
            db_file=None if args.no_db else args.db,
        )
    except (TransactionImportError, LedgerError, OSError) as err:
        logger.error("Application error: %s", err)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
