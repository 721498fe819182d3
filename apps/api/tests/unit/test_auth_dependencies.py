import pytest
from fastapi import HTTPException

from fleetdesk.auth.dependencies import (
    TEST_BYPASS_ACCOUNT_ID,
    TEST_BYPASS_ROLE,
    get_auth_context,
)
from fleetdesk.auth.jwt import decode_jwt, issue_account_token, issue_jwt
from fleetdesk.config import settings


def _bearer(token: str) -> str:
    return f"Bearer {token}"


def test_get_auth_context_requires_bearer_when_bypass_disabled():
    original = settings.enable_test_auth_bypass
    settings.enable_test_auth_bypass = False
    try:
        with pytest.raises(HTTPException) as exc_info:
            get_auth_context(None)
        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Missing bearer token"
    finally:
        settings.enable_test_auth_bypass = original


def test_get_auth_context_allows_bypass_when_explicitly_enabled():
    original = settings.enable_test_auth_bypass
    settings.enable_test_auth_bypass = True
    try:
        auth = get_auth_context(None)
        assert auth.account_id == TEST_BYPASS_ACCOUNT_ID
        assert auth.role == TEST_BYPASS_ROLE
        assert auth.source == "test"
    finally:
        settings.enable_test_auth_bypass = original


def test_get_auth_context_reads_account_and_role_claims():
    token = issue_account_token("account-a", "DISPATCHER", settings.jwt_secret)

    auth = get_auth_context(_bearer(token))

    assert auth.account_id == "account-a"
    assert auth.role == "DISPATCHER"


def test_get_auth_context_rejects_wrong_signature():
    token = issue_account_token("account-a", "ADMIN", "some-other-secret")

    with pytest.raises(HTTPException) as exc_info:
        get_auth_context(_bearer(token))

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Invalid JWT"


def test_get_auth_context_rejects_expired_token():
    token = issue_account_token("account-a", "ADMIN", settings.jwt_secret, expires_in_s=-10)

    with pytest.raises(HTTPException) as exc_info:
        get_auth_context(_bearer(token))

    assert exc_info.value.detail == "Invalid JWT"


def test_account_tokens_use_configured_lifetime(monkeypatch):
    monkeypatch.setattr(settings, "jwt_expires_in_s", 120)

    claims = decode_jwt(
        issue_account_token("account-a", "DISPATCHER", settings.jwt_secret), settings.jwt_secret
    )

    assert claims["exp"] - claims["iat"] == 120


@pytest.mark.parametrize(
    "claims",
    [
        {"sub": "account-a", "role": "PILOT"},
        {"sub": "", "role": "ADMIN"},
        {"role": "ADMIN"},
    ],
)
def test_get_auth_context_rejects_bad_claims(claims):
    token = issue_jwt(claims, settings.jwt_secret)

    with pytest.raises(HTTPException) as exc_info:
        get_auth_context(_bearer(token))

    assert exc_info.value.detail == "Invalid JWT claims"


def test_get_auth_context_rejects_non_bearer_scheme():
    with pytest.raises(HTTPException) as exc_info:
        get_auth_context("Basic dXNlcjpwYXNz")

    assert exc_info.value.detail == "Missing bearer token"
