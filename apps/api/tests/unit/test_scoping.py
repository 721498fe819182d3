import logging

import pytest
from fastapi import HTTPException
from sqlalchemy import select

from fleetdesk.auth.dependencies import AuthContext
from fleetdesk.auth.scoping import OwnershipPolicy, get_ownership_policy
from fleetdesk.config import settings
from fleetdesk.models.customer import Customer


@pytest.mark.parametrize("role", ["USER", "DISPATCHER", "MANAGER", "ADMIN"])
def test_default_policy_exempts_no_role(role):
    assert get_ownership_policy().can_see_all_data(role) is False


def test_admin_cannot_touch_another_accounts_row():
    policy = OwnershipPolicy(violation_mode="forbidden")
    admin = AuthContext(account_id="account-b", role="ADMIN")

    with pytest.raises(HTTPException) as exc:
        policy.ensure_owner(admin, "account-a", "Order")

    assert exc.value.status_code == 403
    assert exc.value.detail == "Access denied"


def test_not_found_mode_hides_foreign_rows():
    policy = OwnershipPolicy(violation_mode="not_found")
    caller = AuthContext(account_id="account-b", role="USER")

    with pytest.raises(HTTPException) as exc:
        policy.ensure_owner(caller, "account-a", "Vehicle")

    assert exc.value.status_code == 404
    assert exc.value.detail == "Vehicle not found"


def test_owner_passes_and_missing_owner_fails():
    policy = OwnershipPolicy()
    caller = AuthContext(account_id="account-a", role="USER")

    policy.ensure_owner(caller, "account-a", "Customer")
    assert policy.owns(caller, None) is False


def test_explicit_exemption_is_honoured():
    policy = OwnershipPolicy(exempt_roles={"AUDITOR"})
    auditor = AuthContext(account_id="auditor-1", role="AUDITOR")

    policy.ensure_owner(auditor, "account-a", "Order")
    statement = select(Customer)
    assert policy.scope(statement, Customer.created_by_id, auditor) is statement


def test_scope_adds_owner_filter(seed, db_session):
    seed.customer("account-a", name="Mine")
    seed.customer("account-b", name="Theirs")
    caller = AuthContext(account_id="account-a", role="ADMIN")

    statement = OwnershipPolicy().scope(select(Customer), Customer.created_by_id, caller)
    names = [customer.name for customer in db_session.scalars(statement)]

    assert names == ["Mine"]


def test_violation_mode_falls_back_to_settings():
    original = settings.scope_violation_mode
    settings.scope_violation_mode = "not_found"
    try:
        assert OwnershipPolicy().hides_foreign_rows is True
    finally:
        settings.scope_violation_mode = original


def test_violation_is_logged(caplog):
    caller = AuthContext(account_id="account-b", role="USER")

    with caplog.at_level(logging.INFO, logger="fleetdesk.dispatch"):
        with pytest.raises(HTTPException):
            OwnershipPolicy(violation_mode="forbidden").ensure_owner(caller, "account-a", "Order")

    assert "scope_violation" in caplog.text
