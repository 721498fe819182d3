import uuid

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from fleetdesk.auth.dependencies import AuthContext
from fleetdesk.auth.scoping import OwnershipPolicy
from fleetdesk.errors import bad_request, conflict
from fleetdesk.models.employee import Employee, EmployeeStatus
from fleetdesk.models.order import DriverKind, Order
from fleetdesk.models.vehicle import Vehicle
from fleetdesk.observability import log_event
from fleetdesk.schemas.employee import EmployeeCreate, EmployeeUpdate
from fleetdesk.services.lookups import get_owned_employee

_REQUIRED_FIELDS = frozenset(
    {"employee_id", "first_name", "last_name", "email", "position", "hire_date", "status"}
)


def _ensure_unique(
    db: Session,
    account_id: str,
    *,
    employee_id: str | None = None,
    email: str | None = None,
    exclude_id: uuid.UUID | None = None,
) -> None:
    def taken(column, value) -> bool:
        query = select(Employee.id).where(column == value, Employee.created_by_id == account_id)
        if exclude_id is not None:
            query = query.where(Employee.id != exclude_id)
        return db.scalar(query) is not None

    if employee_id is not None and taken(Employee.employee_id, employee_id):
        raise conflict("Employee ID already exists")
    if email is not None and taken(Employee.email, email):
        raise conflict("Email already exists")


def list_employees(
    auth: AuthContext,
    db: Session,
    policy: OwnershipPolicy,
    *,
    page: int,
    limit: int,
    search: str | None = None,
    status_filter: str | None = None,
    department: str | None = None,
) -> tuple[list[Employee], int]:
    query = policy.scope(select(Employee), Employee.created_by_id, auth)
    if status_filter:
        try:
            query = query.where(Employee.status == EmployeeStatus(status_filter.strip().upper()))
        except ValueError as exc:
            raise bad_request(f"Invalid status filter: {status_filter}") from exc
    if department:
        query = query.where(Employee.department == department)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(
            or_(
                Employee.first_name.ilike(pattern),
                Employee.last_name.ilike(pattern),
                Employee.email.ilike(pattern),
                Employee.employee_id.ilike(pattern),
                Employee.position.ilike(pattern),
            )
        )

    total = db.scalar(select(func.count()).select_from(query.subquery())) or 0
    items = db.scalars(
        query.order_by(Employee.created_at.desc()).offset((page - 1) * limit).limit(limit)
    )
    return list(items), total


def get_employee(
    auth: AuthContext, db: Session, policy: OwnershipPolicy, employee_id: uuid.UUID
) -> Employee:
    return get_owned_employee(db, auth, policy, employee_id)


def create_employee(auth: AuthContext, db: Session, payload: EmployeeCreate) -> Employee:
    _ensure_unique(db, auth.account_id, employee_id=payload.employee_id, email=payload.email)
    employee = Employee(**payload.model_dump(), created_by_id=auth.account_id)
    db.add(employee)
    db.commit()
    db.refresh(employee)
    log_event("employee_created", account_id=auth.account_id, employee_id=str(employee.id))
    return employee


def update_employee(
    auth: AuthContext,
    db: Session,
    policy: OwnershipPolicy,
    employee_id: uuid.UUID,
    payload: EmployeeUpdate,
) -> Employee:
    employee = get_owned_employee(db, auth, policy, employee_id)
    changes = payload.model_dump(exclude_unset=True)
    _ensure_unique(
        db,
        employee.created_by_id,
        employee_id=changes.get("employee_id"),
        email=changes.get("email"),
        exclude_id=employee.id,
    )
    for field, value in changes.items():
        if value is None and field in _REQUIRED_FIELDS:
            raise bad_request(f"{field} cannot be empty")
        setattr(employee, field, value)
    db.commit()
    db.refresh(employee)
    return employee


def set_employee_status(
    auth: AuthContext,
    db: Session,
    policy: OwnershipPolicy,
    employee_id: uuid.UUID,
    status: EmployeeStatus,
) -> Employee:
    employee = get_owned_employee(db, auth, policy, employee_id)
    employee.status = status
    db.commit()
    db.refresh(employee)
    log_event(
        f"employee_status_changed to={status.value}",
        account_id=auth.account_id,
        employee_id=str(employee.id),
    )
    return employee


def delete_employee(
    auth: AuthContext, db: Session, policy: OwnershipPolicy, employee_id: uuid.UUID
) -> None:
    employee = get_owned_employee(db, auth, policy, employee_id)

    db.execute(
        update(Vehicle).where(Vehicle.driver_id == employee.id).values(driver_id=None)
    )
    db.execute(
        update(Order)
        .where(Order.driver_kind == DriverKind.EMPLOYEE, Order.driver_ref_id == str(employee.id))
        .values(driver_kind=None, driver_ref_id=None)
    )
    db.execute(update(Order).where(Order.employee_id == employee.id).values(employee_id=None))
    db.expire(employee, ["vehicles"])
    db.delete(employee)
    db.commit()
    log_event("employee_deleted", account_id=auth.account_id, employee_id=str(employee_id))
