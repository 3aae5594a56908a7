from random import Random

from domain.transaction import TransactionType
from tests.constants import ETH
from tests.helpers.time_utils import BASE_TIMESTAMP, TimeGenerator, make_transaction


def test_time_generator_increases_with_seed() -> None:
    rng = Random(42)
    gen = TimeGenerator(_rng=rng)

    ts1 = gen()
    ts2 = gen()
    ts3 = gen()

    assert BASE_TIMESTAMP < ts1 < ts2 < ts3
    gaps = [ts2 - ts1, ts3 - ts2]
    for gap in gaps:
        assert 5_000 <= gap <= 60_000
        assert gap % 1000 == 0

    # Deterministic given the same seed
    gen_again = TimeGenerator(_rng=Random(42))
    ts1_b, ts2_b, ts3_b = gen_again(), gen_again(), gen_again()
    assert [ts2_b - ts1_b, ts3_b - ts2_b] == gaps


def test_make_transaction_uses_generator_when_timestamp_missing() -> None:
    gen = TimeGenerator(_rng=Random(1))

    first = make_transaction(action=TransactionType.BUY, asset=ETH, quantity="1", ts_gen=gen)
    second = make_transaction(action=TransactionType.BUY, asset=ETH, quantity="1", ts_gen=gen)

    assert first.timestamp < second.timestamp


def test_make_transaction_respects_provided_timestamp() -> None:
    transaction = make_transaction(action=TransactionType.INCOME, asset=ETH, quantity="1", timestamp=42)

    assert transaction.timestamp == 42


def test_default_generator_is_reset_between_tests() -> None:
    # After the autouse reset, we should start from the same baseline.
    first = make_transaction(action=TransactionType.BUY, asset=ETH, quantity="1")
    second = make_transaction(action=TransactionType.BUY, asset=ETH, quantity="1")

    assert first.timestamp < second.timestamp
