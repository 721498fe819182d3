"""Load single rows by id and apply the ownership guard.

Orders are owned through their customer and units through their vehicle.
``for_update`` takes a row lock where the database supports it.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from fleetdesk.auth.dependencies import AuthContext
from fleetdesk.auth.scoping import OwnershipPolicy
from fleetdesk.errors import not_found
from fleetdesk.models.customer import Customer
from fleetdesk.models.employee import Employee
from fleetdesk.models.order import Order
from fleetdesk.models.unit import Unit
from fleetdesk.models.vehicle import Vehicle


def _fetch(db: Session, model, row_id: uuid.UUID, for_update: bool):
    statement = select(model).where(model.id == row_id)
    if for_update:
        statement = statement.with_for_update()
    return db.scalar(statement)


def find_order(db: Session, order_id: uuid.UUID, *, for_update: bool = False) -> Order:
    order = _fetch(db, Order, order_id, for_update)
    if order is None:
        raise not_found("Order")
    return order


def find_vehicle(db: Session, vehicle_id: uuid.UUID, *, for_update: bool = False) -> Vehicle:
    vehicle = _fetch(db, Vehicle, vehicle_id, for_update)
    if vehicle is None:
        raise not_found("Vehicle")
    return vehicle


def find_employee(
    db: Session, employee_id: uuid.UUID, *, entity: str = "Employee", for_update: bool = False
) -> Employee:
    employee = _fetch(db, Employee, employee_id, for_update)
    if employee is None:
        raise not_found(entity)
    return employee


def order_owner(order: Order) -> str | None:
    return order.customer.created_by_id if order.customer else None


def unit_owner(unit: Unit) -> str | None:
    return unit.vehicle.created_by_id if unit.vehicle else None


def get_owned_customer(
    db: Session, auth: AuthContext, policy: OwnershipPolicy, customer_id: uuid.UUID
) -> Customer:
    customer = db.get(Customer, customer_id)
    if customer is None:
        raise not_found("Customer")
    policy.ensure_owner(auth, customer.created_by_id, "Customer")
    return customer


def get_owned_vehicle(
    db: Session,
    auth: AuthContext,
    policy: OwnershipPolicy,
    vehicle_id: uuid.UUID,
    *,
    for_update: bool = False,
) -> Vehicle:
    vehicle = find_vehicle(db, vehicle_id, for_update=for_update)
    policy.ensure_owner(auth, vehicle.created_by_id, "Vehicle")
    return vehicle


def get_owned_employee(
    db: Session,
    auth: AuthContext,
    policy: OwnershipPolicy,
    employee_id: uuid.UUID,
    *,
    entity: str = "Employee",
    for_update: bool = False,
) -> Employee:
    employee = find_employee(db, employee_id, entity=entity, for_update=for_update)
    policy.ensure_owner(auth, employee.created_by_id, entity)
    return employee


def get_owned_order(
    db: Session,
    auth: AuthContext,
    policy: OwnershipPolicy,
    order_id: uuid.UUID,
    *,
    for_update: bool = False,
) -> Order:
    order = find_order(db, order_id, for_update=for_update)
    policy.ensure_owner(auth, order_owner(order), "Order")
    return order


def get_owned_unit(
    db: Session, auth: AuthContext, policy: OwnershipPolicy, unit_id: uuid.UUID
) -> Unit:
    unit = db.get(Unit, unit_id)
    if unit is None:
        raise not_found("Unit")
    policy.ensure_owner(auth, unit_owner(unit), "Unit")
    return unit
