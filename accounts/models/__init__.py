from accounts.models.account import Account, AccountType, TransactionType

__all__ = [
    "Account",
    "AccountType",
    "TransactionType",
]
