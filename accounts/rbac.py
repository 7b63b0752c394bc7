"""
Role registry for the accounts service.

Roles arrive as claims on the bearer token issued by the identity provider;
this module only names them and records which ones each operation needs.

Role string format: ROLE_{NAME} (token ``scope`` entries become SCOPE_{name})
"""
from __future__ import annotations

# ---------------------------------------------------------------------------
# Roles understood by this service
# ---------------------------------------------------------------------------

ROLE_USER = "ROLE_USER"
ROLE_ACCOUNT = "ROLE_ACCOUNT"
ROLE_TRADE = "ROLE_TRADE"

ALL_ROLES: list[str] = sorted([ROLE_USER, ROLE_ACCOUNT, ROLE_TRADE])


# ---------------------------------------------------------------------------
# Operation → required roles (all must be held)
# ---------------------------------------------------------------------------

OPERATION_ROLES: dict[str, set[str]] = {
    "accounts.view": {ROLE_ACCOUNT},
    "accounts.create": {ROLE_ACCOUNT},
    # Debits and credits are driven by the trade flow
    "accounts.transaction": {ROLE_ACCOUNT, ROLE_TRADE},
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def get_operation_roles(operation: str) -> set[str]:
    """Return the roles required for an operation, or empty set if unknown."""
    return OPERATION_ROLES.get(operation, set())


def roles_from_claims(claims: dict) -> set[str]:
    """Collect granted roles from a decoded token payload.

    ``roles`` may be a list or a comma separated string; a space separated
    ``scope`` claim contributes ``SCOPE_<name>`` entries.
    """
    granted: set[str] = set()

    roles = claims.get("roles") or []
    if isinstance(roles, str):
        roles = [r.strip() for r in roles.split(",")]
    granted.update(r for r in roles if r)

    scope = claims.get("scope")
    if isinstance(scope, str):
        granted.update(f"SCOPE_{s}" for s in scope.split() if s)

    return granted
