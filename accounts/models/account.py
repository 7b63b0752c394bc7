"""Account ledger model."""
from __future__ import annotations

import datetime
import decimal
import enum

from sqlalchemy import DateTime, Enum, Integer, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column

from accounts.database import Base


class AccountType(str, enum.Enum):
    CURRENT = "CURRENT"
    SAVINGS = "SAVINGS"


class TransactionType(str, enum.Enum):
    CREDIT = "CREDIT"  # increases the balance
    DEBIT = "DEBIT"  # decreases the balance


class Account(Base):
    """A customer account holding a single running balance."""
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    userid: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    type: Mapped[AccountType] = mapped_column(
        Enum(AccountType, native_enum=False, length=20),
        nullable=False,
    )
    name: Mapped[str | None] = mapped_column(String(200))
    currency: Mapped[str | None] = mapped_column(String(3))
    creationdate: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    openbalance: Mapped[decimal.Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, server_default=text("0")
    )
    balance: Mapped[decimal.Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, server_default=text("0")
    )

    def __repr__(self) -> str:
        return f"<Account #{self.id} {self.userid!r} {self.type} balance={self.balance}>"
