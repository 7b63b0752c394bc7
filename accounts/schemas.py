"""Pydantic schemas for the account and transaction wire formats.

Timestamps travel in a fixed UTC format with millisecond precision and a
literal ``+0000`` offset (``2024-03-01T09:15:30.250+0000``).  Balances are
held as ``Decimal`` and written out as JSON numbers.
"""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator

from accounts.models.account import AccountType, TransactionType

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"

# Matches the NUMERIC(14, 2) balance columns
AMOUNT_MAX_DIGITS = 14
AMOUNT_DECIMAL_PLACES = 2


# ---------------------------------------------------------------------------
# Timestamp helpers
# ---------------------------------------------------------------------------


def format_timestamp(value: datetime) -> str:
    """Render *value* as ``yyyy-MM-dd'T'HH:mm:ss.SSS'+0000'`` in UTC.

    Naive datetimes are taken to already be in UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return f"{value.strftime('%Y-%m-%dT%H:%M:%S')}.{value.microsecond // 1000:03d}+0000"


def parse_timestamp(value: Any) -> Any:
    """Parse the fixed wire format; anything else is left for pydantic."""
    if isinstance(value, str):
        try:
            return datetime.strptime(value, TIMESTAMP_FORMAT)
        except ValueError:
            return value
    return value


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


class AccountCreate(BaseModel):
    userid: str | None = None
    type: AccountType
    name: str | None = None
    currency: str | None = Field(None, min_length=3, max_length=3)
    creationdate: datetime | None = None
    openbalance: Decimal | None = Field(
        None, ge=0, max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_DECIMAL_PLACES
    )
    balance: Decimal | None = Field(
        None, ge=0, max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_DECIMAL_PLACES
    )

    @field_validator("creationdate", mode="before")
    @classmethod
    def parse_creationdate(cls, v):
        return parse_timestamp(v)

    @model_validator(mode="after")
    def check_opening_balance(self):
        # No transactions have been applied yet, so both balances agree
        if self.openbalance is None:
            self.openbalance = self.balance
        elif self.balance is None:
            self.balance = self.openbalance
        elif self.balance != self.openbalance:
            raise ValueError("balance must equal openbalance when an account is created")
        return self


class AccountOut(BaseModel):
    id: int
    userid: str
    type: AccountType
    name: str | None = None
    currency: str | None = None
    creationdate: datetime
    openbalance: Decimal
    balance: Decimal

    class Config:
        from_attributes = True

    @field_serializer("creationdate")
    def serialize_creationdate(self, v: datetime) -> str:
        return format_timestamp(v)

    @field_serializer("openbalance", "balance")
    def serialize_amount(self, v: Decimal) -> float:
        return float(v)


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


class TransactionIn(BaseModel):
    account_id: int = Field(alias="accountId")
    amount: Decimal
    type: TransactionType
    currency: str | None = Field(None, min_length=3, max_length=3)
    date: datetime | None = None

    class Config:
        populate_by_name = True

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v):
        return parse_timestamp(v)
