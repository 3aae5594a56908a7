from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from domain.transaction import Conversion, Transaction, TransactionType, to_epoch_millis
from tests.constants import ALGO, BTC, XLM


def test_convert_requires_conversion_target() -> None:
    with pytest.raises(ValidationError):
        Transaction(timestamp=1, action=TransactionType.CONVERT, asset=XLM, quantity=Decimal("1"))


def test_non_convert_rejects_conversion_target() -> None:
    with pytest.raises(ValidationError):
        Transaction(
            timestamp=1,
            action=TransactionType.BUY,
            asset=BTC,
            quantity=Decimal("1"),
            conversion_to=Conversion(name=ALGO, quantity=Decimal("1")),
        )


def test_quantity_must_not_be_negative() -> None:
    with pytest.raises(ValidationError):
        Transaction(timestamp=1, action=TransactionType.SELL, asset=BTC, quantity=Decimal("-1"))


def test_transaction_is_immutable() -> None:
    transaction = Transaction(timestamp=1, action=TransactionType.BUY, asset=BTC, quantity=Decimal("1"))

    with pytest.raises(ValidationError):
        transaction.quantity = Decimal("2")  # type: ignore[misc]


def test_time_and_touched_assets() -> None:
    convert = Transaction(
        timestamp=1516678811000,
        action=TransactionType.CONVERT,
        asset=XLM,
        quantity=Decimal("10"),
        conversion_to=Conversion(name=ALGO, quantity=Decimal("4")),
    )

    assert convert.time == datetime(2018, 1, 23, 3, 40, 11, tzinfo=timezone.utc)
    assert convert.touched_assets == (XLM, ALGO)

    buy = Transaction(timestamp=0, action=TransactionType.BUY, asset=BTC, quantity=Decimal("1"))
    assert buy.touched_assets == (BTC,)


def test_to_epoch_millis_treats_naive_as_utc() -> None:
    assert to_epoch_millis(datetime(2018, 1, 23, 3, 40, 11)) == 1516678811000
    assert to_epoch_millis(datetime(2018, 1, 23, 3, 40, 11, 250000, tzinfo=timezone.utc)) == 1516678811250
