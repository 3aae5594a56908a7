from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from random import Random
from typing import Callable

from domain.transaction import AssetId, Conversion, Transaction, TransactionType, to_epoch_millis

BASE_TIMESTAMP = to_epoch_millis(datetime(2024, 1, 1, tzinfo=timezone.utc))


@dataclass
class TimeGenerator:
    """Deterministic epoch-millisecond generator with random-ish gaps."""

    _current: int | None = None
    _rng: Random = Random(0)
    _seed: int = 0

    def __call__(self) -> int:
        return self.next()

    def next(self) -> int:
        if self._current is None:
            self._current = BASE_TIMESTAMP
        self._current += self._rng.randint(5, 60) * 1000
        return self._current

    def reset(self) -> None:
        self._current = None
        self._rng = Random(self._seed)


DEFAULT_TIME_GEN = TimeGenerator()


def make_transaction(
    *,
    action: TransactionType,
    asset: str,
    quantity: Decimal | str,
    timestamp: int | None = None,
    price: Decimal | str = "0",
    conversion_to: Conversion | None = None,
    ts_gen: Callable[[], int] | None = None,
) -> Transaction:
    """Helper to create a Transaction with an auto-generated timestamp."""
    if timestamp is None:
        if ts_gen is None:
            ts_gen = DEFAULT_TIME_GEN
        timestamp = ts_gen()

    return Transaction(
        timestamp=timestamp,
        action=action,
        asset=AssetId(asset),
        quantity=Decimal(quantity),
        price=Decimal(price),
        conversion_to=conversion_to,
    )


def make_convert(
    *,
    asset: str,
    quantity: Decimal | str,
    to_asset: str,
    to_quantity: Decimal | str,
    timestamp: int | None = None,
) -> Transaction:
    return make_transaction(
        action=TransactionType.CONVERT,
        asset=asset,
        quantity=quantity,
        timestamp=timestamp,
        conversion_to=Conversion(name=AssetId(to_asset), quantity=Decimal(to_quantity)),
    )
