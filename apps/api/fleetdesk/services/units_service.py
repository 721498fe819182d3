import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from fleetdesk.auth.dependencies import AuthContext
from fleetdesk.auth.scoping import OwnershipPolicy
from fleetdesk.errors import bad_request, conflict
from fleetdesk.models.employee import Employee
from fleetdesk.models.unit import Unit, UnitAvailability
from fleetdesk.models.vehicle import Vehicle
from fleetdesk.observability import log_event
from fleetdesk.schemas.unit import UnitCreate, UnitUpdate
from fleetdesk.services.lookups import get_owned_unit, get_owned_vehicle

_REQUIRED_FIELDS = frozenset({"unit_number", "name", "availability", "is_active"})


def list_units(
    auth: AuthContext,
    db: Session,
    policy: OwnershipPolicy,
    *,
    page: int,
    limit: int,
    search: str | None = None,
    availability: str | None = None,
) -> tuple[list[Unit], int]:
    query = policy.scope(
        select(Unit)
        .join(Unit.vehicle)
        .outerjoin(Vehicle.driver)
        .where(Unit.is_active.is_(True)),
        Vehicle.created_by_id,
        auth,
    )
    if availability:
        try:
            query = query.where(Unit.availability == UnitAvailability(availability.strip().upper()))
        except ValueError as exc:
            raise bad_request(f"Invalid availability filter: {availability}") from exc
    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(
            or_(
                Unit.unit_number.ilike(pattern),
                Unit.name.ilike(pattern),
                Employee.first_name.ilike(pattern),
                Employee.last_name.ilike(pattern),
            )
        )

    total = db.scalar(select(func.count()).select_from(query.subquery())) or 0
    items = db.scalars(
        query.order_by(Unit.unit_number.asc()).offset((page - 1) * limit).limit(limit)
    )
    return list(items), total


def get_unit(
    auth: AuthContext, db: Session, policy: OwnershipPolicy, unit_id: uuid.UUID
) -> Unit:
    return get_owned_unit(db, auth, policy, unit_id)


def create_unit(
    auth: AuthContext, db: Session, policy: OwnershipPolicy, payload: UnitCreate
) -> Unit:
    vehicle = get_owned_vehicle(db, auth, policy, payload.vehicle_id)
    if db.scalar(select(Unit.id).where(Unit.vehicle_id == vehicle.id)) is not None:
        raise conflict("Unit already exists for this vehicle")

    unit = Unit(**payload.model_dump())
    db.add(unit)
    db.commit()
    db.refresh(unit)
    log_event("unit_created", account_id=auth.account_id, vehicle_id=str(vehicle.id))
    return unit


def update_unit(
    auth: AuthContext,
    db: Session,
    policy: OwnershipPolicy,
    unit_id: uuid.UUID,
    payload: UnitUpdate,
) -> Unit:
    unit = get_owned_unit(db, auth, policy, unit_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field in _REQUIRED_FIELDS:
            raise bad_request(f"{field} cannot be empty")
        setattr(unit, field, value)
    db.commit()
    db.refresh(unit)
    return unit


def deactivate_unit(
    auth: AuthContext, db: Session, policy: OwnershipPolicy, unit_id: uuid.UUID
) -> Unit:
    unit = get_owned_unit(db, auth, policy, unit_id)
    unit.is_active = False
    db.commit()
    db.refresh(unit)
    log_event("unit_deactivated", account_id=auth.account_id, vehicle_id=str(unit.vehicle_id))
    return unit
