"""Account routes: create, fetch, list, and balance transactions."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import PlainTextResponse

from accounts.exceptions import AccountNotFoundError, TransactionRejectedError
from accounts.middleware.auth import require_operation
from accounts.models.account import Account, AccountType
from accounts.schemas import AccountCreate, AccountOut, TransactionIn
from accounts.services.account_service import AccountService, get_account_service
from accounts.services.ledger import apply_transaction

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/accounts", tags=["accounts"])

TRANSACTION_SUCCESS = "SUCCESS"
TRANSACTION_FAILED = "FAILED"

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def _new_account(body: AccountCreate, user: dict) -> Account:
    """Build an unsaved ``Account``, filling in creation defaults."""
    openbalance = body.openbalance if body.openbalance is not None else Decimal("0")
    return Account(
        userid=body.userid or user["sub"],
        type=body.type,
        name=body.name,
        currency=body.currency,
        creationdate=body.creationdate or datetime.now(timezone.utc),
        openbalance=openbalance,
        balance=body.balance if body.balance is not None else openbalance,
    )


# ---------------------------------------------------------------------------
# ACCOUNTS
# ---------------------------------------------------------------------------

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_account(
    body: AccountCreate,
    response: Response,
    user: dict = Depends(require_operation("accounts.create")),
    service: AccountService = Depends(get_account_service),
) -> int:
    account_id = await service.save_account(_new_account(body, user))
    response.headers["Location"] = f"/accounts/{account_id}"
    logger.info("Created %s account %s for %s", body.type.value, account_id, body.userid or user["sub"])
    return account_id


@router.get("", response_model=list[AccountOut], response_model_exclude_none=True)
async def list_accounts(
    name: str | None = Query(None),
    account_type: AccountType | None = Query(None, alias="type"),
    user: dict = Depends(require_operation("accounts.view")),
    service: AccountService = Depends(get_account_service),
):
    owner = name or user["sub"]
    if account_type is None:
        return await service.find_accounts(owner)
    return await service.find_accounts_by_type(owner, account_type)


@router.get("/{account_id}", response_model=AccountOut, response_model_exclude_none=True)
async def get_account(
    account_id: int,
    _user: dict = Depends(require_operation("accounts.view")),
    service: AccountService = Depends(get_account_service),
):
    try:
        return await service.find_account(account_id)
    except AccountNotFoundError:
        raise HTTPException(status_code=404, detail="Account not found")


# ---------------------------------------------------------------------------
# TRANSACTIONS
# ---------------------------------------------------------------------------

@router.post("/transaction", response_class=PlainTextResponse)
async def post_transaction(
    body: TransactionIn,
    _user: dict = Depends(require_operation("accounts.transaction")),
    service: AccountService = Depends(get_account_service),
):
    """Credit or debit an account.

    Answers ``SUCCESS`` (200) when the balance was updated and ``FAILED``
    (417) when a ledger rule rejected the transaction.
    """
    try:
        account = await service.find_account(body.account_id, lock=True)
    except AccountNotFoundError:
        raise HTTPException(status_code=404, detail="Account not found")

    try:
        apply_transaction(account, body)
    except TransactionRejectedError as e:
        logger.info(
            "Rejected %s of %s on account %s: %s",
            body.type.value, body.amount, body.account_id, e.reason,
        )
        return PlainTextResponse(
            TRANSACTION_FAILED,
            status_code=status.HTTP_417_EXPECTATION_FAILED,
            headers=NO_CACHE_HEADERS,
        )

    await service.save_account(account)
    logger.info(
        "Applied %s of %s on account %s, balance now %s",
        body.type.value, body.amount, body.account_id, account.balance,
    )
    return PlainTextResponse(TRANSACTION_SUCCESS, headers=NO_CACHE_HEADERS)
