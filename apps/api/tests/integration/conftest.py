import pytest

from fleetdesk.auth.jwt import issue_account_token
from fleetdesk.config import settings


@pytest.fixture
def auth_headers():
    def _headers(role: str, sub: str) -> dict[str, str]:
        token = issue_account_token(sub, role, settings.jwt_secret)
        return {"Authorization": f"Bearer {token}"}

    return {
        "account_a": _headers("DISPATCHER", "account-a"),
        "account_b": _headers("DISPATCHER", "account-b"),
        "admin_b": _headers("ADMIN", "account-b"),
    }


@pytest.fixture
def fleet_a(seed):
    """One account's dispatchable triple: a pending order, a free truck and an active driver."""
    customer = seed.customer("account-a", name="Acme Freight")
    driver = seed.employee("account-a", first_name="Jane", last_name="Doe")
    vehicle = seed.vehicle("account-a", make="Ford", model="Transit", license_plate="ABC-123")
    order = seed.order(customer)
    return {"customer": customer, "driver": driver, "vehicle": vehicle, "order": order}
