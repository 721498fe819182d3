import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from fleetdesk.auth.dependencies import AuthContext
from fleetdesk.auth.scoping import OwnershipPolicy
from fleetdesk.errors import bad_request, conflict
from fleetdesk.models.customer import Customer
from fleetdesk.models.order import Order
from fleetdesk.observability import log_event
from fleetdesk.schemas.customer import CustomerCreate, CustomerUpdate
from fleetdesk.services.lookups import get_owned_customer


def _order_count(db: Session, customer_id: uuid.UUID) -> int:
    return db.scalar(select(func.count(Order.id)).where(Order.customer_id == customer_id)) or 0


def list_customers(
    auth: AuthContext,
    db: Session,
    policy: OwnershipPolicy,
    *,
    page: int,
    limit: int,
    search: str | None = None,
) -> tuple[list[tuple[Customer, int]], int]:
    query = policy.scope(select(Customer), Customer.created_by_id, auth)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(
            or_(
                Customer.name.ilike(pattern),
                Customer.email.ilike(pattern),
                Customer.phone.ilike(pattern),
            )
        )

    total = db.scalar(select(func.count()).select_from(query.subquery())) or 0
    customers = db.scalars(
        query.order_by(Customer.created_at.desc()).offset((page - 1) * limit).limit(limit)
    )
    return [(customer, _order_count(db, customer.id)) for customer in customers], total


def get_customer(
    auth: AuthContext, db: Session, policy: OwnershipPolicy, customer_id: uuid.UUID
) -> Customer:
    return get_owned_customer(db, auth, policy, customer_id)


def create_customer(auth: AuthContext, db: Session, payload: CustomerCreate) -> Customer:
    customer = Customer(**payload.model_dump(), created_by_id=auth.account_id)
    db.add(customer)
    db.commit()
    db.refresh(customer)
    log_event("customer_created", account_id=auth.account_id)
    return customer


def update_customer(
    auth: AuthContext,
    db: Session,
    policy: OwnershipPolicy,
    customer_id: uuid.UUID,
    payload: CustomerUpdate,
) -> Customer:
    customer = get_owned_customer(db, auth, policy, customer_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if field == "name" and not value:
            raise bad_request("name cannot be empty")
        setattr(customer, field, value)
    db.commit()
    db.refresh(customer)
    return customer


def delete_customer(
    auth: AuthContext, db: Session, policy: OwnershipPolicy, customer_id: uuid.UUID
) -> None:
    customer = get_owned_customer(db, auth, policy, customer_id)
    if _order_count(db, customer.id):
        raise conflict("Cannot delete customer with existing orders")
    db.delete(customer)
    db.commit()
    log_event("customer_deleted", account_id=auth.account_id)
