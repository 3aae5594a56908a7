from __future__ import annotations

from decimal import Decimal

from sqlalchemy import BigInteger, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator


class DecimalAsString(TypeDecorator):
    impl = String
    cache_ok = True

    def process_bind_param(self, value: Decimal | None, dialect: object) -> str | None:
        if value is None:
            return None
        return str(value)

    def process_result_value(self, value: str | None, dialect: object) -> Decimal | None:
        if value is None:
            return None
        return Decimal(value)


class Base(DeclarativeBase):
    pass


class AssetAccountOrm(Base):
    __tablename__ = "asset_accounts"

    name: Mapped[str] = mapped_column(String, primary_key=True)
    quantity: Mapped[Decimal] = mapped_column(DecimalAsString, nullable=False)

    entries: Mapped[list["AccountEntryOrm"]] = relationship(
        cascade="all, delete-orphan",
        back_populates="account",
        order_by="AccountEntryOrm.position",
        lazy="selectin",
    )


class AccountEntryOrm(Base):
    """One transaction as recorded in one account's history."""

    __tablename__ = "account_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_name: Mapped[str] = mapped_column(String, ForeignKey("asset_accounts.name"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    action: Mapped[str] = mapped_column(String, nullable=False)
    asset: Mapped[str] = mapped_column(String, nullable=False)
    quantity: Mapped[Decimal] = mapped_column(DecimalAsString, nullable=False)
    price: Mapped[Decimal] = mapped_column(DecimalAsString, nullable=False)
    conversion_name: Mapped[str | None] = mapped_column(String, nullable=True)
    conversion_quantity: Mapped[Decimal | None] = mapped_column(DecimalAsString, nullable=True)

    account: Mapped[AssetAccountOrm] = relationship(back_populates="entries")
