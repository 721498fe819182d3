import os
import threading
from datetime import datetime, timezone

os.environ.setdefault("FLEETDESK_DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("FLEETDESK_TESTING", "true")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

import fleetdesk.models  # noqa: E402,F401
from fleetdesk.auth.dependencies import AuthContext  # noqa: E402
from fleetdesk.auth.scoping import OwnershipPolicy  # noqa: E402
from fleetdesk.config import settings  # noqa: E402
from fleetdesk.db.base import Base  # noqa: E402
from fleetdesk.db.session import engine as app_engine  # noqa: E402
from fleetdesk.db.session import get_db  # noqa: E402
from fleetdesk.main import app  # noqa: E402
from fleetdesk.models import (  # noqa: E402
    Customer,
    Employee,
    EmployeeStatus,
    Order,
    OrderStatus,
    Unit,
    Vehicle,
    VehicleStatus,
)
from fleetdesk.observability import metrics_store  # noqa: E402

ACCOUNT_A = "account-a"
ACCOUNT_B = "account-b"


class Seeder:
    """Inserts rows straight through the ORM, bypassing the services."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self._counter = 0

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    def _save(self, row):
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def customer(self, owner: str = ACCOUNT_A, **overrides) -> Customer:
        n = self._next()
        fields = {"name": f"Customer {n}", "email": f"customer{n}@example.com"}
        return self._save(Customer(**{**fields, **overrides}, created_by_id=owner))

    def employee(self, owner: str = ACCOUNT_A, **overrides) -> Employee:
        n = self._next()
        fields = {
            "employee_id": f"EMP-{n}",
            "first_name": "Dana",
            "last_name": f"Driver{n}",
            "email": f"driver{n}@example.com",
            "position": "Truck Driver",
            "hire_date": datetime(2024, 1, 1, tzinfo=timezone.utc),
            "status": EmployeeStatus.ACTIVE,
        }
        return self._save(Employee(**{**fields, **overrides}, created_by_id=owner))

    def vehicle(self, owner: str = ACCOUNT_A, with_unit: bool = True, **overrides) -> Vehicle:
        n = self._next()
        fields = {
            "make": "Volvo",
            "model": "VNL",
            "year": 2022,
            "license_plate": f"PLT-{n}",
            "status": VehicleStatus.AVAILABLE,
            "documents": [],
        }
        vehicle = self._save(Vehicle(**{**fields, **overrides}, created_by_id=owner))
        if with_unit:
            self._save(
                Unit(vehicle_id=vehicle.id, unit_number=vehicle.license_plate, name=f"Unit {n}")
            )
            self.db.refresh(vehicle)
        return vehicle

    def order(self, customer: Customer, **overrides) -> Order:
        n = self._next()
        fields = {
            "order_number": str(n),
            "status": OrderStatus.PENDING,
            "pickup_address": f"{n} Pickup St",
            "delivery_address": f"{n} Delivery Ave",
            "pickup_date": datetime(2026, 1, 5, 8, 0, tzinfo=timezone.utc),
            "documents": [],
        }
        return self._save(Order(**{**fields, **overrides}, customer_id=customer.id))


@pytest.fixture(scope="session", autouse=True)
def setup_test_schema():
    Base.metadata.drop_all(bind=app_engine)
    Base.metadata.create_all(bind=app_engine)
    yield
    Base.metadata.drop_all(bind=app_engine)


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=app_engine)
    Base.metadata.create_all(bind=app_engine)
    yield


@pytest.fixture(autouse=True)
def reset_metrics_store():
    metrics_store.reset()
    yield


@pytest.fixture
def db_session():
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=app_engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(db_session):
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=app_engine)
    db_session_lock = threading.Lock()

    def override_get_db():
        if db_session_lock.acquire(blocking=False):
            try:
                yield db_session
            finally:
                db_session_lock.release()
            return

        db = testing_session_local()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def seed(db_session) -> Seeder:
    return Seeder(db_session)


@pytest.fixture
def auth() -> AuthContext:
    return AuthContext(account_id=ACCOUNT_A, role="DISPATCHER")


@pytest.fixture
def other_auth() -> AuthContext:
    return AuthContext(account_id=ACCOUNT_B, role="ADMIN")


@pytest.fixture
def policy() -> OwnershipPolicy:
    return OwnershipPolicy(violation_mode="forbidden")


@pytest.fixture
def hiding_policy() -> OwnershipPolicy:
    return OwnershipPolicy(violation_mode="not_found")


@pytest.fixture(scope="session", autouse=True)
def enable_test_auth_bypass():
    original = settings.enable_test_auth_bypass
    settings.enable_test_auth_bypass = True
    yield
    settings.enable_test_auth_bypass = original


@pytest.fixture(scope="session", autouse=True)
def enable_testing_mode():
    original = settings.testing
    settings.testing = True
    yield
    settings.testing = original
