"""
Test fixtures for the accounts service.

The ASGI app runs in-process behind an httpx ``ASGITransport``.  The
``AccountService`` dependency is replaced by an ``AsyncMock`` so the route
tests exercise routing, role checks, status mapping, and JSON shapes without
a database.  Bearer tokens are minted with the service's own signing key.
"""
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio

from accounts.main import app
from accounts.middleware.auth import create_access_token
from accounts.models.account import Account, AccountType
from accounts.rbac import ROLE_ACCOUNT, ROLE_TRADE, ROLE_USER
from accounts.services.account_service import AccountService, get_account_service

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------
BASE_URL = "http://test"

USER_ID = "user@user.com"
ACCOUNT_ID = 42
ACCOUNT_NAME = "Everyday current account"
ACCOUNT_DATE = datetime(2024, 3, 1, 9, 15, 30, 250000, tzinfo=timezone.utc)
EXPECTED_DATE = "2024-03-01T09:15:30.250+0000"
ACCOUNT_OPEN_BALANCE = Decimal("1000.50")
ACCOUNT_BALANCE = Decimal("750.25")

ALL_ROLES = [ROLE_USER, ROLE_ACCOUNT, ROLE_TRADE]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_account(**overrides) -> Account:
    """Return a fresh sample account (safe to mutate)."""
    fields = {
        "id": ACCOUNT_ID,
        "userid": USER_ID,
        "type": AccountType.CURRENT,
        "name": ACCOUNT_NAME,
        "currency": "USD",
        "creationdate": ACCOUNT_DATE,
        "openbalance": ACCOUNT_OPEN_BALANCE,
        "balance": ACCOUNT_BALANCE,
    }
    fields.update(overrides)
    return Account(**fields)


def account_payload(**overrides) -> dict:
    """JSON body for creating the sample account (no id)."""
    body = {
        "userid": USER_ID,
        "type": "CURRENT",
        "name": ACCOUNT_NAME,
        "currency": "USD",
        "creationdate": EXPECTED_DATE,
        "openbalance": float(ACCOUNT_OPEN_BALANCE),
    }
    body.update(overrides)
    return {k: v for k, v in body.items() if v is not None}


def transaction_payload(amount, tx_type: str, account_id: int = ACCOUNT_ID) -> dict:
    return {
        "accountId": account_id,
        "amount": amount,
        "type": tx_type,
        "currency": "USD",
    }


def auth_headers(token: str) -> dict:
    """Return auth header dict for a given token."""
    return {"Authorization": f"Bearer {token}"}


def make_token(sub: str = USER_ID, roles: list[str] | None = None, **claims) -> str:
    payload = {"sub": sub, "roles": ALL_ROLES if roles is None else roles}
    payload.update(claims)
    return create_access_token(payload)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def service():
    """Mocked account service injected in place of the SQL one."""
    return AsyncMock(spec=AccountService)


@pytest_asyncio.fixture
async def client(service):
    """Async HTTP client bound to the app with the mocked service."""
    app.dependency_overrides[get_account_service] = lambda: service
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def user_headers():
    """Auth headers carrying ROLE_USER, ROLE_ACCOUNT and ROLE_TRADE."""
    return auth_headers(make_token())


@pytest.fixture
def account_only_headers():
    """Auth headers without ROLE_TRADE."""
    return auth_headers(make_token(roles=[ROLE_USER, ROLE_ACCOUNT]))
