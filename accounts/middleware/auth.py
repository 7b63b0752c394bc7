"""Bearer-token authentication and role checks for the accounts service.

Provides:
- JWT creation / validation (python-jose)
- ``get_current_user()`` dependency
- ``require_role()`` and ``require_operation()`` dependency factories

Tokens are issued elsewhere; this module only verifies them and exposes the
subject and granted roles to the route handlers.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from accounts.config import settings
from accounts.rbac import get_operation_roles, roles_from_claims

# ---------------------------------------------------------------------------
# JWT helpers
# ---------------------------------------------------------------------------


def create_access_token(data: dict[str, Any], expires_minutes: int | None = None) -> str:
    """Create a signed JWT from *data* (``sub``, ``roles``, ...) plus ``exp``."""
    to_encode = data.copy()
    minutes = settings.JWT_EXPIRY_MINUTES if expires_minutes is None else expires_minutes
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    to_encode.update({"exp": expire})

    if "roles" in to_encode and not isinstance(to_encode["roles"], (list, str)):
        to_encode["roles"] = sorted(to_encode["roles"])

    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify signature and expiry; raises ``JWTError`` on failure."""
    return jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
    )


# ---------------------------------------------------------------------------
# Bearer scheme
# ---------------------------------------------------------------------------

bearer_scheme = HTTPBearer(auto_error=False)

# ---------------------------------------------------------------------------
# Current-user dependency
# ---------------------------------------------------------------------------


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict[str, Any]:
    """Decode the bearer token and return ``{"sub": ..., "roles": {...}}``.

    Raises ``HTTPException(401)`` when the token is missing or invalid.

    Also stores the user dict on ``request.state.user`` so the request
    logging middleware can correlate requests to users.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError:
        raise credentials_exception

    subject: str | None = payload.get("sub")
    if not subject:
        raise credentials_exception

    user = {"sub": subject, "roles": roles_from_claims(payload)}
    request.state.user = user
    return user


# ---------------------------------------------------------------------------
# Role-checking dependency factories
# ---------------------------------------------------------------------------


def require_role(*roles: str):
    """Return a FastAPI dependency that ensures the authenticated user holds
    ALL of the specified *roles*.

    Usage::

        @router.post("/accounts/transaction")
        async def transaction(user=Depends(require_role("ROLE_TRADE"))):
            ...
    """
    required = set(roles)

    async def _check_role(
        current_user: dict[str, Any] = Depends(get_current_user),
    ) -> dict[str, Any]:
        missing = required - current_user["roles"]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing roles: {', '.join(sorted(missing))}.",
            )
        return current_user

    return _check_role


def require_operation(operation: str):
    """Role check for a named operation from ``accounts.rbac.OPERATION_ROLES``."""
    return require_role(*sorted(get_operation_roles(operation)))
