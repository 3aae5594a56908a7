"""Importers turning exchange exports into canonical transactions."""

from __future__ import annotations

from pathlib import Path

from importers.base import TransactionImporter
from importers.coinbase_importer import CoinbaseImporter
from importers.errors import (
    MalformedRowError,
    NumericParseError,
    TimeParseError,
    TransactionImportError,
    UnknownActionError,
    UnsupportedExchangeError,
)

IMPORTERS: dict[str, type[TransactionImporter]] = {
    CoinbaseImporter.exchange: CoinbaseImporter,
}

SUPPORTED_EXCHANGES = tuple(sorted(IMPORTERS))


def get_importer(exchange: str, source_path: str | Path) -> TransactionImporter:
    importer_cls = IMPORTERS.get(exchange.strip().lower())
    if importer_cls is None:
        raise UnsupportedExchangeError(exchange, supported=SUPPORTED_EXCHANGES)
    return importer_cls(source_path)


__all__ = [
    "CoinbaseImporter",
    "IMPORTERS",
    "MalformedRowError",
    "NumericParseError",
    "SUPPORTED_EXCHANGES",
    "TimeParseError",
    "TransactionImportError",
    "TransactionImporter",
    "UnknownActionError",
    "UnsupportedExchangeError",
    "get_importer",
]
