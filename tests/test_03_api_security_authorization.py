"""
Tests 301-330: API Security & Authorization

Bearer-token validation and role checks in front of the account routes.
"""
from jose import jwt

from accounts.config import settings
from accounts.middleware.auth import create_access_token
from accounts.rbac import ROLE_ACCOUNT, ROLE_USER, roles_from_claims

from conftest import (
    ACCOUNT_ID,
    USER_ID,
    account_payload,
    auth_headers,
    make_account,
    make_token,
    transaction_payload,
)


class TestAuthentication:

    async def test_301_missing_token_returns_401(self, client, service):
        r = await client.get(f"/accounts/{ACCOUNT_ID}")
        assert r.status_code == 401
        assert r.headers["www-authenticate"] == "Bearer"
        service.find_account.assert_not_awaited()

    async def test_302_garbage_token_returns_401(self, client):
        r = await client.get("/accounts", headers=auth_headers("not-a-jwt"))
        assert r.status_code == 401

    async def test_303_token_signed_with_other_secret_returns_401(self, client):
        token = jwt.encode(
            {"sub": USER_ID, "roles": [ROLE_ACCOUNT]},
            "some-other-secret",
            algorithm=settings.JWT_ALGORITHM,
        )
        r = await client.get("/accounts", headers=auth_headers(token))
        assert r.status_code == 401

    async def test_304_expired_token_returns_401(self, client):
        token = create_access_token({"sub": USER_ID, "roles": [ROLE_ACCOUNT]}, expires_minutes=-5)
        r = await client.get("/accounts", headers=auth_headers(token))
        assert r.status_code == 401

    async def test_305_token_without_subject_returns_401(self, client):
        token = create_access_token({"roles": [ROLE_ACCOUNT]})
        r = await client.get("/accounts", headers=auth_headers(token))
        assert r.status_code == 401

    async def test_306_non_bearer_scheme_returns_401(self, client):
        r = await client.get("/accounts", headers={"Authorization": "Basic dXNlcjpwYXNz"})
        assert r.status_code == 401

    async def test_307_transaction_requires_token(self, client, service):
        r = await client.post("/accounts/transaction", json=transaction_payload(10, "CREDIT"))
        assert r.status_code == 401
        service.find_account.assert_not_awaited()


class TestAuthorization:

    async def test_311_missing_account_role_forbidden(self, client, service):
        headers = auth_headers(make_token(roles=[ROLE_USER]))

        r = await client.get(f"/accounts/{ACCOUNT_ID}", headers=headers)

        assert r.status_code == 403
        assert "ROLE_ACCOUNT" in r.json()["detail"]
        service.find_account.assert_not_awaited()

    async def test_312_create_requires_account_role(self, client, service):
        headers = auth_headers(make_token(roles=[ROLE_USER]))

        r = await client.post("/accounts", headers=headers, json=account_payload())

        assert r.status_code == 403
        service.save_account.assert_not_awaited()

    async def test_313_transaction_requires_trade_role(self, client, service, account_only_headers):
        service.find_account.return_value = make_account()

        r = await client.post(
            "/accounts/transaction",
            headers=account_only_headers,
            json=transaction_payload(10, "CREDIT"),
        )

        assert r.status_code == 403
        assert "ROLE_TRADE" in r.json()["detail"]
        service.save_account.assert_not_awaited()

    async def test_314_reads_allowed_without_trade_role(self, client, service, account_only_headers):
        service.find_account.return_value = make_account()

        r = await client.get(f"/accounts/{ACCOUNT_ID}", headers=account_only_headers)

        assert r.status_code == 200

    async def test_315_comma_separated_roles_claim(self, client, service):
        service.find_accounts.return_value = []
        token = create_access_token({"sub": USER_ID, "roles": "ROLE_USER, ROLE_ACCOUNT"})

        r = await client.get("/accounts", headers=auth_headers(token))

        assert r.status_code == 200

    async def test_316_health_needs_no_token(self, client):
        r = await client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "healthy"


class TestRoleClaims:

    def test_321_roles_list(self):
        assert roles_from_claims({"roles": ["ROLE_USER", "ROLE_TRADE"]}) == {"ROLE_USER", "ROLE_TRADE"}

    def test_322_scope_claim_becomes_scope_roles(self):
        assert roles_from_claims({"scope": "openid accounts"}) == {"SCOPE_openid", "SCOPE_accounts"}

    def test_323_no_claims_no_roles(self):
        assert roles_from_claims({"sub": USER_ID}) == set()

    def test_324_token_round_trips_roles(self):
        token = create_access_token({"sub": USER_ID, "roles": {"ROLE_TRADE", "ROLE_USER"}})
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        assert payload["sub"] == USER_ID
        assert payload["roles"] == ["ROLE_TRADE", "ROLE_USER"]
        assert "exp" in payload
