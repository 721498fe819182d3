import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from fleetdesk.auth.dependencies import AuthContext
from fleetdesk.auth.scoping import OwnershipPolicy
from fleetdesk.errors import bad_request, conflict
from fleetdesk.models.order import Order
from fleetdesk.models.unit import Unit
from fleetdesk.models.vehicle import Vehicle, VehicleStatus
from fleetdesk.observability import log_event
from fleetdesk.schemas.vehicle import VehicleCreate, VehicleUpdate
from fleetdesk.services.documents import remove_document, serialize_documents
from fleetdesk.services.lookups import get_owned_employee, get_owned_vehicle

_REQUIRED_FIELDS = frozenset({"make", "model", "year", "license_plate", "status"})


def _ensure_unique_identifiers(
    db: Session,
    *,
    license_plate: str | None,
    vin: str | None,
    exclude_id: uuid.UUID | None = None,
) -> None:
    def taken(column, value) -> bool:
        query = select(Vehicle.id).where(column == value)
        if exclude_id is not None:
            query = query.where(Vehicle.id != exclude_id)
        return db.scalar(query) is not None

    if license_plate and taken(Vehicle.license_plate, license_plate):
        raise conflict("License plate already exists")
    if vin and taken(Vehicle.vin, vin):
        raise conflict("VIN already exists")


def _check_driver(
    db: Session,
    auth: AuthContext,
    policy: OwnershipPolicy,
    driver_id: uuid.UUID,
    exclude_vehicle_id: uuid.UUID | None = None,
) -> None:
    get_owned_employee(db, auth, policy, driver_id, entity="Driver")
    query = select(Vehicle.id).where(
        Vehicle.driver_id == driver_id,
        Vehicle.status != VehicleStatus.OUT_OF_SERVICE,
    )
    if exclude_vehicle_id is not None:
        query = query.where(Vehicle.id != exclude_vehicle_id)
    if db.scalar(query) is not None:
        raise conflict("Driver is already assigned to another vehicle")


def unit_name_for(vehicle: Vehicle) -> str:
    if vehicle.driver_name and vehicle.driver_name.strip():
        return vehicle.driver_name.strip()
    if vehicle.unit_number:
        return vehicle.unit_number
    return f"Unit {vehicle.license_plate}"


def _sync_unit(db: Session, vehicle: Vehicle) -> Unit:
    unit = vehicle.unit
    if unit is None:
        unit = Unit(vehicle_id=vehicle.id)
        db.add(unit)
        vehicle.unit = unit
    unit.unit_number = vehicle.unit_number or vehicle.license_plate
    unit.name = unit_name_for(vehicle)
    unit.dimensions = vehicle.dimensions
    unit.payload = vehicle.payload
    return unit


def list_vehicles(
    auth: AuthContext,
    db: Session,
    policy: OwnershipPolicy,
    *,
    page: int,
    limit: int,
    search: str | None = None,
    status_filter: str | None = None,
) -> tuple[list[Vehicle], int]:
    query = policy.scope(select(Vehicle), Vehicle.created_by_id, auth)
    if status_filter:
        try:
            query = query.where(Vehicle.status == VehicleStatus(status_filter.strip().upper()))
        except ValueError as exc:
            raise bad_request(f"Invalid status filter: {status_filter}") from exc
    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(
            or_(
                Vehicle.make.ilike(pattern),
                Vehicle.model.ilike(pattern),
                Vehicle.license_plate.ilike(pattern),
                Vehicle.vin.ilike(pattern),
                Vehicle.unit_number.ilike(pattern),
                Vehicle.driver_name.ilike(pattern),
            )
        )

    total = db.scalar(select(func.count()).select_from(query.subquery())) or 0
    items = db.scalars(
        query.order_by(Vehicle.created_at.desc()).offset((page - 1) * limit).limit(limit)
    )
    return list(items), total


def get_vehicle(
    auth: AuthContext, db: Session, policy: OwnershipPolicy, vehicle_id: uuid.UUID
) -> Vehicle:
    return get_owned_vehicle(db, auth, policy, vehicle_id)


def create_vehicle(
    auth: AuthContext, db: Session, policy: OwnershipPolicy, payload: VehicleCreate
) -> Vehicle:
    _ensure_unique_identifiers(db, license_plate=payload.license_plate, vin=payload.vin)
    if payload.driver_id is not None:
        _check_driver(db, auth, policy, payload.driver_id)

    fields = payload.model_dump(exclude={"documents"})
    vehicle = Vehicle(
        **fields,
        documents=serialize_documents(payload.documents),
        created_by_id=auth.account_id,
    )
    db.add(vehicle)
    db.flush()
    _sync_unit(db, vehicle)

    db.commit()
    db.refresh(vehicle)
    log_event("vehicle_created", account_id=auth.account_id, vehicle_id=str(vehicle.id))
    return vehicle


def update_vehicle(
    auth: AuthContext,
    db: Session,
    policy: OwnershipPolicy,
    vehicle_id: uuid.UUID,
    payload: VehicleUpdate,
) -> Vehicle:
    vehicle = get_owned_vehicle(db, auth, policy, vehicle_id, for_update=True)
    changes = payload.model_dump(exclude_unset=True, exclude={"documents"})

    _ensure_unique_identifiers(
        db,
        license_plate=changes.get("license_plate"),
        vin=changes.get("vin"),
        exclude_id=vehicle.id,
    )
    new_driver = changes.get("driver_id")
    if new_driver is not None and new_driver != vehicle.driver_id:
        _check_driver(db, auth, policy, new_driver, exclude_vehicle_id=vehicle.id)

    for field, value in changes.items():
        if value is None and field in _REQUIRED_FIELDS:
            raise bad_request(f"{field} cannot be empty")
        setattr(vehicle, field, value)
    if payload.documents:
        vehicle.documents = list(vehicle.documents or []) + serialize_documents(payload.documents)

    _sync_unit(db, vehicle)
    db.commit()
    db.refresh(vehicle)
    log_event("vehicle_updated", account_id=auth.account_id, vehicle_id=str(vehicle.id))
    return vehicle


def set_vehicle_status(
    auth: AuthContext,
    db: Session,
    policy: OwnershipPolicy,
    vehicle_id: uuid.UUID,
    status: VehicleStatus,
) -> Vehicle:
    vehicle = get_owned_vehicle(db, auth, policy, vehicle_id, for_update=True)
    vehicle.status = status
    db.commit()
    db.refresh(vehicle)
    log_event(
        f"vehicle_status_changed to={status.value}",
        account_id=auth.account_id,
        vehicle_id=str(vehicle.id),
    )
    return vehicle


def delete_vehicle(
    auth: AuthContext, db: Session, policy: OwnershipPolicy, vehicle_id: uuid.UUID
) -> None:
    vehicle = get_owned_vehicle(db, auth, policy, vehicle_id, for_update=True)
    in_use = db.scalar(select(func.count(Order.id)).where(Order.vehicle_id == vehicle.id))
    if in_use:
        raise conflict("Cannot delete vehicle with existing orders")
    db.delete(vehicle)
    db.commit()
    log_event("vehicle_deleted", account_id=auth.account_id, vehicle_id=str(vehicle_id))


def delete_vehicle_document(
    auth: AuthContext,
    db: Session,
    policy: OwnershipPolicy,
    vehicle_id: uuid.UUID,
    index: int,
) -> Vehicle:
    vehicle = get_owned_vehicle(db, auth, policy, vehicle_id, for_update=True)
    vehicle.documents = remove_document(vehicle.documents, index)
    db.commit()
    db.refresh(vehicle)
    return vehicle
