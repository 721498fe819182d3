import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from fleetdesk.auth.dependencies import AuthContext
from fleetdesk.auth.scoping import OwnershipPolicy
from fleetdesk.errors import conflict
from fleetdesk.models.customer import Customer
from fleetdesk.models.employee import Employee, EmployeeStatus
from fleetdesk.models.order import DriverKind, DriverRef, Order, OrderStatus
from fleetdesk.models.vehicle import Vehicle, VehicleStatus
from fleetdesk.observability import log_event, observe_timing
from fleetdesk.services.lookups import find_employee, find_order, find_vehicle, order_owner
from fleetdesk.services.orders_service import change_order_status
from fleetdesk.services.state_machine import ACTIVE_STATUSES
from fleetdesk.services.tracking_service import append_tracking_event

DISPATCH_STATUS_NOTE = "Order status updated to {status}"
PENDING_ORDERS_LIMIT = 10
RECENT_DISPATCHES_LIMIT = 20
_RECENT_DISPATCH_STATUSES = (OrderStatus.ASSIGNED, OrderStatus.IN_TRANSIT, OrderStatus.DELIVERED)


@dataclass
class DispatchDashboard:
    pending_orders: list[Order]
    active_orders: list[Order]
    available_vehicles: list[Vehicle]
    available_drivers: list[Employee]
    recent_dispatches: list[Order]

    @property
    def stats(self) -> dict[str, int]:
        return {
            "pending_count": len(self.pending_orders),
            "active_count": len(self.active_orders),
            "available_vehicles_count": len(self.available_vehicles),
            "available_drivers_count": len(self.available_drivers),
        }


def _guard(
    policy: OwnershipPolicy,
    auth: AuthContext,
    owner_id: str | None,
    entity: str,
    *,
    in_required_state: bool,
    state_message: str,
) -> None:
    # When foreign rows are hidden, ownership is part of existence and is checked
    # before the state so a wrong-state answer never leaks another account's row.
    if policy.hides_foreign_rows:
        policy.ensure_owner(auth, owner_id, entity)
    if not in_required_state:
        raise conflict(state_message)
    policy.ensure_owner(auth, owner_id, entity)


def _scoped_orders(auth: AuthContext, policy: OwnershipPolicy):
    return policy.scope(select(Order).join(Order.customer), Customer.created_by_id, auth)


def _available_vehicles_query(auth: AuthContext, policy: OwnershipPolicy):
    return policy.scope(
        select(Vehicle).where(
            Vehicle.status == VehicleStatus.AVAILABLE,
            Vehicle.driver_id.is_not(None),
        ),
        Vehicle.created_by_id,
        auth,
    ).order_by(Vehicle.updated_at.desc())


def _available_drivers_query(auth: AuthContext, policy: OwnershipPolicy):
    return policy.scope(
        select(Employee).where(
            Employee.status == EmployeeStatus.ACTIVE,
            Employee.position.ilike("%driver%"),
        ),
        Employee.created_by_id,
        auth,
    ).order_by(Employee.first_name.asc())


def assign_order(
    auth: AuthContext,
    db: Session,
    policy: OwnershipPolicy,
    order_id: uuid.UUID,
    vehicle_id: uuid.UUID,
    driver_id: uuid.UUID,
) -> Order:
    """Assign a PENDING order to a vehicle and an ACTIVE driver.

    Checks run order, vehicle, driver; for each one existence, then state, then
    ownership. Nothing is written until every check has passed, and the vehicle
    driver change, the order update and the tracking event commit together.
    """
    with observe_timing("dispatch_assign_seconds"):
        order = find_order(db, order_id, for_update=True)
        _guard(
            policy,
            auth,
            order_owner(order),
            "Order",
            in_required_state=order.status == OrderStatus.PENDING,
            state_message="Order is not in pending status",
        )

        vehicle = find_vehicle(db, vehicle_id, for_update=True)
        _guard(
            policy,
            auth,
            vehicle.created_by_id,
            "Vehicle",
            in_required_state=vehicle.status == VehicleStatus.AVAILABLE,
            state_message="Vehicle is not available",
        )

        driver = find_employee(db, driver_id, entity="Driver", for_update=True)
        _guard(
            policy,
            auth,
            driver.created_by_id,
            "Driver",
            in_required_state=driver.status == EmployeeStatus.ACTIVE,
            state_message="Driver is not active",
        )

        if vehicle.driver_id != driver.id:
            vehicle.driver_id = driver.id

        order.status = OrderStatus.ASSIGNED
        order.vehicle_id = vehicle.id
        order.driver = DriverRef(kind=DriverKind.EMPLOYEE, id=str(driver.id))
        append_tracking_event(
            db,
            order.id,
            OrderStatus.ASSIGNED,
            location=order.pickup_address,
            notes=(
                f"Order assigned to vehicle {vehicle.display_name} "
                f"with driver {driver.first_name} {driver.last_name}"
            ),
        )
        db.commit()

    db.refresh(order)
    log_event(
        "order_assigned",
        account_id=auth.account_id,
        order_id=str(order.id),
        vehicle_id=str(vehicle_id),
        employee_id=str(driver_id),
    )
    return order


def update_dispatch_status(
    auth: AuthContext,
    db: Session,
    policy: OwnershipPolicy,
    order_id: uuid.UUID,
    next_status: OrderStatus,
    *,
    notes: str | None = None,
    location: Any = None,
) -> Order:
    with observe_timing("dispatch_status_update_seconds"):
        return change_order_status(
            auth,
            db,
            policy,
            order_id,
            next_status,
            notes=notes,
            location=location,
            default_note=DISPATCH_STATUS_NOTE,
        )


def get_dashboard(auth: AuthContext, db: Session, policy: OwnershipPolicy) -> DispatchDashboard:
    orders = _scoped_orders(auth, policy)
    pending = db.scalars(
        orders.where(Order.status == OrderStatus.PENDING)
        .order_by(Order.created_at.desc())
        .limit(PENDING_ORDERS_LIMIT)
    )
    active = db.scalars(
        orders.where(Order.status.in_(ACTIVE_STATUSES)).order_by(Order.updated_at.desc())
    )
    recent = db.scalars(
        orders.where(Order.status.in_(_RECENT_DISPATCH_STATUSES))
        .order_by(Order.updated_at.desc())
        .limit(RECENT_DISPATCHES_LIMIT)
    )
    return DispatchDashboard(
        pending_orders=list(pending),
        active_orders=list(active),
        available_vehicles=list(db.scalars(_available_vehicles_query(auth, policy))),
        available_drivers=list(db.scalars(_available_drivers_query(auth, policy))),
        recent_dispatches=list(recent),
    )


def track_order(
    auth: AuthContext, db: Session, policy: OwnershipPolicy, order_id: uuid.UUID
) -> Order:
    """Return the order; its ``tracking_events`` relationship is oldest first."""
    order = find_order(db, order_id)
    policy.ensure_owner(auth, order_owner(order), "Order")
    return order


def list_available_vehicles(
    auth: AuthContext, db: Session, policy: OwnershipPolicy
) -> list[Vehicle]:
    return list(db.scalars(_available_vehicles_query(auth, policy)))


def list_available_drivers(
    auth: AuthContext, db: Session, policy: OwnershipPolicy
) -> list[Employee]:
    return list(db.scalars(_available_drivers_query(auth, policy)))
