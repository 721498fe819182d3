import uuid
from typing import Any

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fleetdesk.auth.dependencies import AuthContext
from fleetdesk.auth.scoping import OwnershipPolicy
from fleetdesk.errors import bad_request, conflict, not_found
from fleetdesk.models._common import now_utc
from fleetdesk.models.customer import Customer
from fleetdesk.models.order import DriverKind, DriverRef, Order, OrderPriority, OrderStatus
from fleetdesk.models.tracking_event import TrackingEvent
from fleetdesk.models.vehicle import VehicleStatus
from fleetdesk.observability import log_event
from fleetdesk.schemas.order import DriverRefSchema, OrderCreate, OrderUpdate
from fleetdesk.services.documents import remove_document, serialize_documents
from fleetdesk.services.lookups import (
    find_vehicle,
    get_owned_customer,
    get_owned_employee,
    get_owned_order,
    get_owned_vehicle,
)
from fleetdesk.services.order_numbers import allocate_order_number
from fleetdesk.services.state_machine import can_delete, check_transition
from fleetdesk.services.tracking_service import append_tracking_event

STATUS_CHANGED_NOTE = "Status changed to {status}"
ORDER_CREATED_NOTE = "Order created and assigned"
_REQUIRED_FIELDS = ("customer_id", "pickup_address", "delivery_address", "pickup_date", "priority")


def _parse_filter(raw: str | None, enum_type, label: str) -> list:
    if not raw:
        return []
    values = []
    for part in raw.split(","):
        part = part.strip().upper()
        if not part:
            continue
        try:
            values.append(enum_type(part))
        except ValueError as exc:
            raise bad_request(f"Invalid {label} filter: {part}") from exc
    return values


def _check_vehicle(
    db: Session, auth: AuthContext, policy: OwnershipPolicy, vehicle_id: uuid.UUID
) -> None:
    vehicle = get_owned_vehicle(db, auth, policy, vehicle_id)
    if vehicle.status != VehicleStatus.AVAILABLE:
        raise conflict("Vehicle is not available")


def _resolve_driver(
    db: Session, auth: AuthContext, policy: OwnershipPolicy, driver: DriverRefSchema
) -> DriverRef:
    if driver.kind == DriverKind.EMPLOYEE:
        try:
            employee_id = uuid.UUID(driver.id)
        except ValueError as exc:
            raise not_found("Driver") from exc
        get_owned_employee(db, auth, policy, employee_id, entity="Driver")
        return DriverRef(kind=DriverKind.EMPLOYEE, id=str(employee_id))
    # User accounts live in the identity provider, so the id is stored as given.
    return DriverRef(kind=DriverKind.USER, id=driver.id)


def list_orders(
    auth: AuthContext,
    db: Session,
    policy: OwnershipPolicy,
    *,
    page: int,
    limit: int,
    search: str | None = None,
    order_number: str | None = None,
    status_filter: str | None = None,
    priority_filter: str | None = None,
    customer_id: uuid.UUID | None = None,
    vehicle_id: uuid.UUID | None = None,
) -> tuple[list[Order], int]:
    query = policy.scope(select(Order).join(Order.customer), Customer.created_by_id, auth)

    statuses = _parse_filter(status_filter, OrderStatus, "status")
    if statuses:
        query = query.where(Order.status.in_(statuses))
    priorities = _parse_filter(priority_filter, OrderPriority, "priority")
    if priorities:
        query = query.where(Order.priority.in_(priorities))
    if order_number:
        query = query.where(Order.order_number.ilike(f"%{order_number.strip()}%"))
    if customer_id:
        query = query.where(Order.customer_id == customer_id)
    if vehicle_id:
        query = query.where(Order.vehicle_id == vehicle_id)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(
            or_(
                Order.order_number.ilike(pattern),
                Order.pickup_address.ilike(pattern),
                Order.delivery_address.ilike(pattern),
                Order.description.ilike(pattern),
                Customer.name.ilike(pattern),
            )
        )

    total = db.scalar(select(func.count()).select_from(query.subquery())) or 0
    items = db.scalars(
        query.order_by(Order.created_at.desc()).offset((page - 1) * limit).limit(limit)
    )
    return list(items), total


def get_order(
    auth: AuthContext, db: Session, policy: OwnershipPolicy, order_id: uuid.UUID
) -> Order:
    return get_owned_order(db, auth, policy, order_id)


def create_order(
    auth: AuthContext, db: Session, policy: OwnershipPolicy, payload: OrderCreate
) -> Order:
    get_owned_customer(db, auth, policy, payload.customer_id)
    if payload.vehicle_id is not None:
        _check_vehicle(db, auth, policy, payload.vehicle_id)
    if payload.employee_id is not None:
        get_owned_employee(db, auth, policy, payload.employee_id)
    driver = _resolve_driver(db, auth, policy, payload.driver) if payload.driver else None

    order = Order(
        order_number=allocate_order_number(db),
        customer_id=payload.customer_id,
        vehicle_id=payload.vehicle_id,
        employee_id=payload.employee_id,
        priority=payload.priority,
        # Orders entered through the back office skip PENDING.
        status=OrderStatus.ASSIGNED,
        customer_load_number=payload.customer_load_number,
        pickup_address=payload.pickup_address,
        delivery_address=payload.delivery_address,
        pickup_date=payload.pickup_date,
        delivery_date=payload.delivery_date,
        description=payload.description,
        miles=payload.miles,
        pieces=payload.pieces,
        weight=payload.weight,
        load_pay=payload.load_pay,
        driver_pay=payload.driver_pay,
        notes=payload.notes,
        documents=serialize_documents(payload.documents),
    )
    order.driver = driver
    db.add(order)
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        raise conflict("Order number already exists") from exc

    append_tracking_event(
        db,
        order.id,
        OrderStatus.ASSIGNED,
        location=order.pickup_address,
        notes=ORDER_CREATED_NOTE,
    )
    db.commit()
    db.refresh(order)
    log_event("order_created", account_id=auth.account_id, order_id=str(order.id))
    return order


def update_order(
    auth: AuthContext,
    db: Session,
    policy: OwnershipPolicy,
    order_id: uuid.UUID,
    payload: OrderUpdate,
) -> Order:
    order = get_owned_order(db, auth, policy, order_id, for_update=True)
    changes = payload.model_dump(exclude_unset=True)
    for field in _REQUIRED_FIELDS:
        if field in changes and changes[field] is None:
            raise bad_request(f"{field} cannot be empty")

    if "customer_id" in changes and changes["customer_id"] != order.customer_id:
        get_owned_customer(db, auth, policy, changes["customer_id"])
    if changes.get("vehicle_id") is not None and changes["vehicle_id"] != order.vehicle_id:
        _check_vehicle(db, auth, policy, changes["vehicle_id"])
    if changes.get("employee_id") is not None and changes["employee_id"] != order.employee_id:
        get_owned_employee(db, auth, policy, changes["employee_id"])
    if "driver" in changes:
        order.driver = _resolve_driver(db, auth, policy, payload.driver) if payload.driver else None

    document_notes = changes.pop("document_notes", None)
    new_documents = changes.pop("documents", None)
    changes.pop("driver", None)
    for field, value in changes.items():
        setattr(order, field, value)

    if document_notes is not None or new_documents is not None:
        documents = [dict(entry) for entry in order.documents or []]
        for edit in payload.document_notes or []:
            if edit.index >= len(documents):
                raise bad_request("Invalid document index")
            documents[edit.index]["notes"] = edit.notes
        documents.extend(serialize_documents(payload.documents or []))
        order.documents = documents

    order.updated_at = now_utc()
    db.commit()
    db.refresh(order)
    log_event("order_updated", account_id=auth.account_id, order_id=str(order.id))
    return order


def change_order_status(
    auth: AuthContext,
    db: Session,
    policy: OwnershipPolicy,
    order_id: uuid.UUID,
    next_status: OrderStatus,
    *,
    notes: str | None = None,
    location: Any = None,
    default_note: str = STATUS_CHANGED_NOTE,
) -> Order:
    """Move an order to ``next_status`` and record it in the tracking log.

    Delivering an order releases its vehicle back to AVAILABLE whatever state the
    vehicle was in. All writes share one transaction.
    """
    order = get_owned_order(db, auth, policy, order_id, for_update=True)
    check_transition(order.status, next_status, order_id=str(order.id))

    previous_status = order.status
    order.status = next_status
    order.updated_at = now_utc()
    append_tracking_event(
        db,
        order.id,
        next_status,
        location=location,
        notes=notes or default_note.format(status=next_status.value),
    )

    if next_status == OrderStatus.DELIVERED and order.vehicle_id is not None:
        vehicle = find_vehicle(db, order.vehicle_id, for_update=True)
        vehicle.status = VehicleStatus.AVAILABLE

    db.commit()
    db.refresh(order)
    log_event(
        f"order_status_changed from={previous_status.value} to={next_status.value}",
        account_id=auth.account_id,
        order_id=str(order.id),
    )
    return order


def delete_order(
    auth: AuthContext, db: Session, policy: OwnershipPolicy, order_id: uuid.UUID
) -> None:
    order = get_owned_order(db, auth, policy, order_id, for_update=True)
    if not can_delete(order.status):
        raise conflict("Only pending or assigned orders can be deleted")

    db.execute(delete(TrackingEvent).where(TrackingEvent.order_id == order.id))
    db.expire(order, ["tracking_events"])
    db.delete(order)
    db.commit()
    log_event("order_deleted", account_id=auth.account_id, order_id=str(order_id))


def delete_order_document(
    auth: AuthContext,
    db: Session,
    policy: OwnershipPolicy,
    order_id: uuid.UUID,
    index: int,
) -> Order:
    order = get_owned_order(db, auth, policy, order_id, for_update=True)
    order.documents = remove_document(order.documents, index)
    db.commit()
    db.refresh(order)
    return order
