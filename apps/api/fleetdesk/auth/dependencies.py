from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, status

from fleetdesk.auth.jwt import JwtError, decode_jwt, jwt_http_exception
from fleetdesk.config import allowed_roles_list, settings

TEST_BYPASS_ACCOUNT_ID = "test-account"
TEST_BYPASS_ROLE = "USER"


@dataclass(frozen=True)
class AuthContext:
    account_id: str
    role: str
    source: str | None = None


def get_auth_context(authorization: str | None = Header(default=None)) -> AuthContext:
    if not authorization and settings.enable_test_auth_bypass:
        return AuthContext(account_id=TEST_BYPASS_ACCOUNT_ID, role=TEST_BYPASS_ROLE, source="test")

    if not authorization or not authorization.startswith("Bearer "):
        raise jwt_http_exception("Missing bearer token")

    token = authorization.removeprefix("Bearer ").strip()
    try:
        payload = decode_jwt(token, settings.jwt_secret)
    except JwtError as err:
        raise jwt_http_exception("Invalid JWT") from err

    role = payload.get("role")
    account_id = payload.get("sub")
    if role not in allowed_roles_list() or not isinstance(account_id, str) or not account_id:
        raise jwt_http_exception("Invalid JWT claims")

    return AuthContext(account_id=account_id, role=role, source=payload.get("source"))


def require_roles(*roles: str) -> Callable[[AuthContext], AuthContext]:
    def dependency(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if auth.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")
        return auth

    return dependency
