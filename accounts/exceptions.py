"""Domain exceptions raised by the account service layer."""

from __future__ import annotations


class AccountsError(Exception):
    """Base exception for account-service errors."""

    def __init__(self, message: str, error_code: str = "ACCOUNTS_ERROR"):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class AccountNotFoundError(AccountsError):
    """Raised when an account lookup by id finds nothing."""

    def __init__(self, account_id: int):
        self.account_id = account_id
        super().__init__(f"Account {account_id} not found", "ACCOUNT_NOT_FOUND")


class TransactionRejectedError(AccountsError):
    """Raised when a transaction breaks a ledger rule.

    The account balance is never modified when this is raised.
    """

    def __init__(self, account_id: int, reason: str):
        self.account_id = account_id
        self.reason = reason
        super().__init__(
            f"Transaction on account {account_id} rejected: {reason}",
            "TRANSACTION_REJECTED",
        )
