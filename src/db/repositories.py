from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from db import models
from domain.ledger import AssetAccount, Ledger
from domain.transaction import AssetId, Conversion, Transaction, TransactionType


class LedgerRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def save(self, ledger: Ledger) -> None:
        for account in ledger.accounts():
            orm_account = self._session.get(models.AssetAccountOrm, account.name)
            if orm_account is None:
                orm_account = models.AssetAccountOrm(name=account.name)
                self._session.add(orm_account)
            orm_account.quantity = account.quantity
            orm_account.entries = [
                self._to_orm(transaction, position) for position, transaction in enumerate(account.history)
            ]
        self._session.commit()

    def get(self, asset_id: str) -> AssetAccount | None:
        orm_account = self._session.get(models.AssetAccountOrm, asset_id)
        if orm_account is None:
            return None
        return self._to_domain(orm_account)

    def load(self) -> Ledger:
        stmt = select(models.AssetAccountOrm).order_by(models.AssetAccountOrm.name)
        return Ledger(self._to_domain(orm_account) for orm_account in self._session.scalars(stmt))

    @staticmethod
    def _to_orm(transaction: Transaction, position: int) -> models.AccountEntryOrm:
        conversion = transaction.conversion_to
        return models.AccountEntryOrm(
            position=position,
            timestamp=transaction.timestamp,
            action=transaction.action.value,
            asset=transaction.asset,
            quantity=transaction.quantity,
            price=transaction.price,
            conversion_name=conversion.name if conversion else None,
            conversion_quantity=conversion.quantity if conversion else None,
        )

    @staticmethod
    def _to_domain(orm_account: models.AssetAccountOrm) -> AssetAccount:
        history = []
        for entry in orm_account.entries:
            conversion = None
            if entry.conversion_name is not None and entry.conversion_quantity is not None:
                conversion = Conversion(name=AssetId(entry.conversion_name), quantity=entry.conversion_quantity)
            history.append(
                Transaction(
                    timestamp=entry.timestamp,
                    action=TransactionType(entry.action),
                    asset=AssetId(entry.asset),
                    quantity=entry.quantity,
                    price=entry.price,
                    conversion_to=conversion,
                )
            )
        return AssetAccount(name=AssetId(orm_account.name), quantity=orm_account.quantity, history=history)
