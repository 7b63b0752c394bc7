"""Balance rules for credit and debit transactions."""
from __future__ import annotations

import logging
from decimal import Decimal

from accounts.exceptions import TransactionRejectedError
from accounts.models.account import Account, TransactionType
from accounts.schemas import AMOUNT_DECIMAL_PLACES, AMOUNT_MAX_DIGITS, TransactionIn

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENT = Decimal(1).scaleb(-AMOUNT_DECIMAL_PLACES)
# Largest value a NUMERIC(14, 2) column holds
MAX_AMOUNT = Decimal(10) ** (AMOUNT_MAX_DIGITS - AMOUNT_DECIMAL_PLACES) - CENT


def apply_transaction(account: Account, transaction: TransactionIn) -> Decimal:
    """Apply *transaction* to *account* and return the new balance.

    Credits must carry a non-negative amount.  Debits must carry a
    non-negative amount and must not take the balance below zero.  Amounts
    must be whole cents and neither the amount nor the resulting balance may
    exceed ``MAX_AMOUNT``, so the stored balance is exactly the computed one.
    On violation ``TransactionRejectedError`` is raised and the account is
    left untouched.
    """
    amount = transaction.amount
    current = account.balance if account.balance is not None else ZERO

    if amount < ZERO:
        raise TransactionRejectedError(account.id, "negative amount")
    if amount > MAX_AMOUNT:
        raise TransactionRejectedError(account.id, "amount too large")
    if amount != amount.quantize(CENT):
        raise TransactionRejectedError(account.id, "amount finer than one cent")

    if transaction.type == TransactionType.CREDIT:
        new_balance = current + amount
        if new_balance > MAX_AMOUNT:
            raise TransactionRejectedError(account.id, "balance limit exceeded")
    else:
        new_balance = current - amount
        if new_balance < ZERO:
            raise TransactionRejectedError(account.id, "insufficient funds")

    account.balance = new_balance
    logger.debug(
        "Account %s %s %s: %s -> %s",
        account.id, transaction.type.value, amount, current, new_balance,
    )
    return new_balance
