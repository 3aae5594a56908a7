from __future__ import annotations

import logging
import re
from csv import DictReader
from csv import Error as CSVError
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from itertools import chain
from typing import Iterable, Iterator

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from domain.transaction import AssetId, Conversion, Transaction, TransactionType, to_epoch_millis
from importers.base import TransactionImporter
from importers.errors import MalformedRowError, NumericParseError, TimeParseError, UnknownActionError

logger = logging.getLogger(__name__)

HEADER_PREFIX = "Timestamp"

COINBASE_ACTIONS = {
    "Buy": TransactionType.BUY,
    "Advanced Trade Buy": TransactionType.BUY,
    "Sell": TransactionType.SELL,
    "Advanced Trade Sell": TransactionType.SELL,
    "Rewards Income": TransactionType.INCOME,
    "Coinbase Earn": TransactionType.INCOME,
    "Staking Income": TransactionType.INCOME,
    "Learning Reward": TransactionType.INCOME,
    "Convert": TransactionType.CONVERT,
}

_CONVERT_NOTE = re.compile(
    r"^Converted\s+[\d,.]+\s+(?P<source>\S+)\s+to\s+(?P<quantity>[\d,.]+)\s+(?P<name>\S+)",
    re.IGNORECASE,
)
_TIMESTAMP_FORMATS = ("%Y-%m-%d %H:%M:%S %Z", "%Y-%m-%d %H:%M:%S")


class CoinbaseRow(BaseModel):
    timestamp: str = Field(alias="Timestamp")
    transaction_type: str = Field(alias="Transaction Type")
    asset: str = Field(alias="Asset")
    quantity: str = Field(alias="Quantity Transacted")
    spot_price: str = Field(
        default="",
        validation_alias=AliasChoices("USD Spot Price at Transaction", "Spot Price at Transaction"),
    )
    notes: str = Field(default="", alias="Notes")

    @field_validator("spot_price", "notes", mode="before")
    @classmethod
    def _missing_optional(cls, value: str | None) -> str:
        if value is None:
            return ""
        return value

    @field_validator("*", mode="after")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()


def parse_timestamp(raw: str, *, line_number: int | None = None) -> int:
    value = raw.strip()
    parsed: datetime | None = None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        for fmt in _TIMESTAMP_FORMATS:
            try:
                parsed = datetime.strptime(value, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        raise TimeParseError(raw, line_number=line_number)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return to_epoch_millis(parsed)


def parse_decimal(raw: str, *, column: str, line_number: int | None = None) -> Decimal:
    cleaned = raw.strip().replace(",", "").lstrip("$€£")
    try:
        value = Decimal(cleaned)
    except InvalidOperation as err:
        raise NumericParseError(raw, column=column, line_number=line_number) from err
    if not value.is_finite():
        raise NumericParseError(raw, column=column, line_number=line_number)
    return value


def _normalize_asset(asset: str) -> AssetId:
    return AssetId(asset.strip().upper())


class CoinbaseImporter(TransactionImporter):
    """Coinbase "transaction history" CSV export.

    Exports start with a few lines of prose before the real header row; those
    are skipped. Convert rows carry the destination side only in the notes
    column ("Converted 1,641.4065951 XLM to 774.762752 ALGO").
    """

    exchange = "coinbase"

    def iter_transactions(self) -> Iterator[Transaction]:
        count = 0
        for line_number, row in self.iter_rows():
            yield self.create_transaction(row, line_number=line_number)
            count += 1
        logger.info("Coinbase importer: read %d transactions from %s", count, self._source_path)

    def iter_rows(self) -> Iterator[tuple[int, CoinbaseRow]]:
        last_line = 0
        try:
            with self._source_path.open(encoding="utf-8-sig", newline="") as handle:
                for last_line, row in self._read_rows(handle):
                    yield last_line, row
        except (UnicodeDecodeError, CSVError) as err:
            raise MalformedRowError(
                f"Unreadable Coinbase export {self._source_path} after line {last_line}: {err}"
            ) from err

    def _read_rows(self, lines: Iterable[str]) -> Iterator[tuple[int, CoinbaseRow]]:
        numbered = enumerate(lines, start=1)
        header_line_number = None
        header = ""
        for line_number, line in numbered:
            if line.lstrip('"').startswith(HEADER_PREFIX):
                header_line_number = line_number
                header = line
                break
        if header_line_number is None:
            raise MalformedRowError(f"No header row starting with {HEADER_PREFIX!r} in {self._source_path}")
        if header_line_number > 1:
            logger.info("Coinbase importer: skipped %d preamble lines", header_line_number - 1)

        reader = DictReader(chain([header], (line for _, line in numbered)))
        for raw_row in reader:
            line_number = header_line_number - 1 + reader.line_num
            raw_row.pop(None, None)  # type: ignore[call-overload]
            if not any((value or "").strip() for value in raw_row.values()):
                continue
            try:
                row = CoinbaseRow.model_validate(raw_row)
            except ValidationError as err:
                raise MalformedRowError(f"Malformed Coinbase row: {err}", line_number=line_number) from err
            yield line_number, row

    def create_transaction(self, row: CoinbaseRow, *, line_number: int | None = None) -> Transaction:
        action = COINBASE_ACTIONS.get(row.transaction_type)
        if action is None:
            raise UnknownActionError(row.transaction_type, exchange=self.exchange, line_number=line_number)
        if not row.asset:
            raise MalformedRowError("Coinbase row has no asset", line_number=line_number)

        asset = _normalize_asset(row.asset)
        timestamp = parse_timestamp(row.timestamp, line_number=line_number)
        # Some exports report disposals as negative quantities.
        quantity = abs(parse_decimal(row.quantity, column="Quantity Transacted", line_number=line_number))
        price = Decimal(0)
        if row.spot_price:
            price = parse_decimal(row.spot_price, column="Spot Price at Transaction", line_number=line_number)

        conversion = None
        if action == TransactionType.CONVERT:
            conversion = self._parse_conversion(row.notes, source=asset, line_number=line_number)

        return Transaction(
            timestamp=timestamp,
            action=action,
            asset=asset,
            quantity=quantity,
            price=price,
            conversion_to=conversion,
        )

    def _parse_conversion(self, notes: str, *, source: AssetId, line_number: int | None) -> Conversion:
        match = _CONVERT_NOTE.match(notes)
        if match is None:
            raise MalformedRowError(f"Cannot read conversion target from notes {notes!r}", line_number=line_number)
        if _normalize_asset(match.group("source")) != source:
            raise MalformedRowError(
                f"Conversion note {notes!r} does not start from asset {source}", line_number=line_number
            )
        return Conversion(
            name=_normalize_asset(match.group("name")),
            quantity=parse_decimal(match.group("quantity"), column="Notes", line_number=line_number),
        )
