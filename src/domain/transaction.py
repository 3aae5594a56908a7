from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import StrEnum
from typing import NewType

from pydantic import BaseModel, ConfigDict, model_validator

AssetId = NewType("AssetId", str)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class TransactionType(StrEnum):
    BUY = "BUY"
    SELL = "SELL"
    INCOME = "INCOME"
    CONVERT = "CONVERT"


class Conversion(BaseModel):
    """Destination side of a conversion: the asset and the amount received."""

    model_config = ConfigDict(frozen=True)

    name: AssetId
    quantity: Decimal

    @model_validator(mode="after")
    def _validate_fields(self) -> Conversion:
        if not self.name:
            raise ValueError("Conversion.name must be non-empty")
        if self.quantity < 0:
            raise ValueError("Conversion.quantity must be >= 0")
        return self


class Transaction(BaseModel):
    """A single exchange record, as reported by an importer.

    `quantity` is always stored non-negative; the direction of the balance
    change is decided by `action`. `price` is informational only.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: int
    action: TransactionType
    asset: AssetId
    quantity: Decimal
    price: Decimal = Decimal(0)
    conversion_to: Conversion | None = None

    @model_validator(mode="after")
    def _validate_fields(self) -> Transaction:
        if not self.asset:
            raise ValueError("Transaction.asset must be non-empty")
        if self.quantity < 0:
            raise ValueError("Transaction.quantity must be >= 0")
        if self.action == TransactionType.CONVERT and self.conversion_to is None:
            raise ValueError("CONVERT transaction requires conversion_to")
        if self.action != TransactionType.CONVERT and self.conversion_to is not None:
            raise ValueError(f"{self.action} transaction must not carry conversion_to")
        return self

    @property
    def time(self) -> datetime:
        return EPOCH + timedelta(milliseconds=self.timestamp)

    @property
    def touched_assets(self) -> tuple[AssetId, ...]:
        if self.conversion_to is None or self.conversion_to.name == self.asset:
            return (self.asset,)
        return (self.asset, self.conversion_to.name)


def to_epoch_millis(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - EPOCH) // timedelta(milliseconds=1)
