"""Account service: the persistence capability the HTTP layer depends on.

Routes only ever talk to ``AccountService``.  ``SqlAccountService`` is the
SQLAlchemy-backed implementation wired in by ``get_account_service``; tests
swap it for a mock through FastAPI's dependency overrides.
"""
from __future__ import annotations

import abc
import logging

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from accounts.database import get_db
from accounts.exceptions import AccountNotFoundError
from accounts.models.account import Account, AccountType

logger = logging.getLogger(__name__)


class AccountService(abc.ABC):
    """Storage operations for accounts."""

    @abc.abstractmethod
    async def save_account(self, account: Account) -> int:
        """Insert or update *account* and return its id."""

    @abc.abstractmethod
    async def find_account(self, account_id: int, lock: bool = False) -> Account:
        """Return the account with *account_id*.

        With ``lock=True`` the row stays locked until the next
        ``save_account`` (or the end of the request), so a read-modify-write
        of the balance is atomic per account.

        Raises ``AccountNotFoundError`` when no such account exists.
        """

    @abc.abstractmethod
    async def find_accounts(self, userid: str) -> list[Account]:
        """Return every account owned by *userid*, ordered by id."""

    @abc.abstractmethod
    async def find_accounts_by_type(
        self, userid: str, account_type: AccountType
    ) -> list[Account]:
        """Return the accounts of *userid* with the given type, ordered by id."""


class SqlAccountService(AccountService):
    """``AccountService`` over an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save_account(self, account: Account) -> int:
        self.session.add(account)
        await self.session.commit()
        await self.session.refresh(account)
        logger.debug("Saved account %s for %s", account.id, account.userid)
        return account.id

    async def find_account(self, account_id: int, lock: bool = False) -> Account:
        stmt = select(Account).where(Account.id == account_id)
        if lock:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        account = result.scalar_one_or_none()
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    async def find_accounts(self, userid: str) -> list[Account]:
        stmt = select(Account).where(Account.userid == userid).order_by(Account.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_accounts_by_type(
        self, userid: str, account_type: AccountType
    ) -> list[Account]:
        stmt = (
            select(Account)
            .where(Account.userid == userid, Account.type == account_type)
            .order_by(Account.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


# ---------------------------------------------------------------------------
# FastAPI dependency
# ---------------------------------------------------------------------------


async def get_account_service(db: AsyncSession = Depends(get_db)) -> AccountService:
    return SqlAccountService(db)
