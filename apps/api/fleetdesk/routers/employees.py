import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fleetdesk.auth.dependencies import AuthContext, get_auth_context
from fleetdesk.auth.scoping import OwnershipPolicy, get_ownership_policy
from fleetdesk.db.session import get_db
from fleetdesk.schemas.common import Envelope, MessageEnvelope, PageEnvelope, Pagination
from fleetdesk.schemas.employee import (
    EmployeeCreate,
    EmployeeResponse,
    EmployeeStatusUpdate,
    EmployeeUpdate,
)
from fleetdesk.services.employees_service import (
    create_employee,
    delete_employee,
    get_employee,
    list_employees,
    set_employee_status,
    update_employee,
)

router = APIRouter(prefix="/api/employees", tags=["employees"])


@router.get("", response_model=PageEnvelope[EmployeeResponse], summary="List employees")
def list_employees_endpoint(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    search: str | None = Query(default=None),
    status: str | None = Query(default=None),
    department: str | None = Query(default=None),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> PageEnvelope[EmployeeResponse]:
    items, total = list_employees(
        auth,
        db,
        policy,
        page=page,
        limit=limit,
        search=search,
        status_filter=status,
        department=department,
    )
    return PageEnvelope[EmployeeResponse](
        data=[EmployeeResponse.model_validate(employee) for employee in items],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/{employee_id}", response_model=Envelope[EmployeeResponse], summary="Get employee")
def get_employee_endpoint(
    employee_id: uuid.UUID,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[EmployeeResponse]:
    employee = get_employee(auth, db, policy, employee_id)
    return Envelope[EmployeeResponse](data=EmployeeResponse.model_validate(employee))


@router.post(
    "", response_model=Envelope[EmployeeResponse], status_code=201, summary="Create employee"
)
def create_employee_endpoint(
    payload: EmployeeCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
) -> Envelope[EmployeeResponse]:
    employee = create_employee(auth, db, payload)
    return Envelope[EmployeeResponse](
        data=EmployeeResponse.model_validate(employee), message="Employee created successfully"
    )


@router.put("/{employee_id}", response_model=Envelope[EmployeeResponse], summary="Update employee")
def update_employee_endpoint(
    employee_id: uuid.UUID,
    payload: EmployeeUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[EmployeeResponse]:
    employee = update_employee(auth, db, policy, employee_id, payload)
    return Envelope[EmployeeResponse](
        data=EmployeeResponse.model_validate(employee), message="Employee updated successfully"
    )


@router.patch(
    "/{employee_id}/status",
    response_model=Envelope[EmployeeResponse],
    summary="Update employee status",
)
def update_employee_status_endpoint(
    employee_id: uuid.UUID,
    payload: EmployeeStatusUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[EmployeeResponse]:
    employee = set_employee_status(auth, db, policy, employee_id, payload.status)
    return Envelope[EmployeeResponse](data=EmployeeResponse.model_validate(employee))


@router.delete("/{employee_id}", response_model=MessageEnvelope, summary="Delete employee")
def delete_employee_endpoint(
    employee_id: uuid.UUID,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> MessageEnvelope:
    delete_employee(auth, db, policy, employee_id)
    return MessageEnvelope(message="Employee deleted successfully")
