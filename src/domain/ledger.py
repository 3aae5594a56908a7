from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Iterator, assert_never

from .transaction import AssetId, Transaction, TransactionType

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    pass


class LedgerAccessError(LedgerError):
    """An account that was just ensured could not be looked up."""

    def __init__(self, asset_id: str, *, transaction: Transaction | None = None) -> None:
        super().__init__(f"Error accessing history for asset={asset_id!r}")
        self.asset_id = asset_id
        self.transaction = transaction


def signed_effect(transaction: Transaction, asset_id: str) -> Decimal:
    """Quantity change `transaction` causes on the account named `asset_id`.

    Zero for an asset the transaction does not touch.
    """
    if asset_id not in transaction.touched_assets:
        return Decimal(0)
    action = transaction.action
    if action == TransactionType.BUY:
        return transaction.quantity
    if action == TransactionType.SELL:
        return -transaction.quantity
    if action == TransactionType.INCOME:
        return transaction.quantity
    if action == TransactionType.CONVERT:
        conversion = transaction.conversion_to
        assert conversion is not None
        if asset_id == conversion.name:
            return conversion.quantity
        return -transaction.quantity
    assert_never(action)


def _search_position(history: list[Transaction], timestamp: int) -> int:
    """Binary search over `history` timestamps.

    Returns the index of *a* record with an equal timestamp when one exists
    (not necessarily the first or last one), otherwise the insertion point.
    Records sharing a timestamp therefore keep no particular arrival order.
    """
    lo, hi = 0, len(history)
    while lo < hi:
        mid = (lo + hi) // 2
        current = history[mid].timestamp
        if current == timestamp:
            return mid
        if current < timestamp:
            lo = mid + 1
        else:
            hi = mid
    return lo


@dataclass
class AssetAccount:
    name: AssetId
    quantity: Decimal = Decimal(0)
    history: list[Transaction] = field(default_factory=list)

    def record(self, transaction: Transaction) -> None:
        self.quantity += signed_effect(transaction, self.name)
        self.history.insert(_search_position(self.history, transaction.timestamp), transaction)


class Ledger:
    """Per-asset accounts built from a stream of transactions.

    Balances are updated in the order transactions are applied, while each
    account's history is kept sorted by timestamp.
    """

    def __init__(self, accounts: Iterable[AssetAccount] | None = None) -> None:
        self._accounts: dict[str, AssetAccount] = {}
        for account in accounts or ():
            self._accounts[account.name] = account

    def ensure_account(self, asset_id: str) -> AssetAccount:
        account = self._accounts.get(asset_id)
        if account is None:
            account = AssetAccount(name=AssetId(asset_id))
            self._accounts[asset_id] = account
            logger.debug("Created account for asset=%s", asset_id)
        return account

    def apply(self, transaction: Transaction) -> None:
        self.ensure_account(transaction.asset)

        if transaction.action != TransactionType.CONVERT:
            self._lookup(transaction.asset, transaction).record(transaction)
            return

        conversion = transaction.conversion_to
        assert conversion is not None
        self.ensure_account(conversion.name)

        # Resolve both sides before touching either, so a failed lookup leaves the ledger unchanged.
        destination = self._lookup(conversion.name, transaction)
        source = self._lookup(transaction.asset, transaction)

        destination.record(transaction)
        if source is not destination:
            source.record(transaction)

    def apply_all(self, transactions: Iterable[Transaction]) -> Ledger:
        for transaction in transactions:
            self.apply(transaction)
        return self

    def get(self, asset_id: str) -> AssetAccount | None:
        return self._accounts.get(asset_id)

    def accounts(self) -> list[AssetAccount]:
        return sorted(self._accounts.values(), key=lambda account: account.name)

    def _lookup(self, asset_id: str, transaction: Transaction) -> AssetAccount:
        account = self._accounts.get(asset_id)
        if account is None:
            raise LedgerAccessError(asset_id, transaction=transaction)
        return account

    def __getitem__(self, asset_id: str) -> AssetAccount:
        return self._accounts[asset_id]

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self._accounts

    def __iter__(self) -> Iterator[str]:
        return iter(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)
