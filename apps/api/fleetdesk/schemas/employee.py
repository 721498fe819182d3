import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from fleetdesk.models.employee import EmployeeStatus
from fleetdesk.schemas.common import ResponseModel


class EmployeeCreate(BaseModel):
    employee_id: str = Field(min_length=1, max_length=64)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=50)
    position: str = Field(min_length=1, max_length=100)
    department: str | None = Field(default=None, max_length=100)
    hire_date: datetime
    salary: float | None = Field(default=None, ge=0)
    address: str | None = Field(default=None, max_length=500)
    emergency_contact: str | None = Field(default=None, max_length=255)
    status: EmployeeStatus = EmployeeStatus.ACTIVE


class EmployeeUpdate(BaseModel):
    employee_id: str | None = Field(default=None, min_length=1, max_length=64)
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    position: str | None = Field(default=None, min_length=1, max_length=100)
    department: str | None = Field(default=None, max_length=100)
    hire_date: datetime | None = None
    salary: float | None = Field(default=None, ge=0)
    address: str | None = Field(default=None, max_length=500)
    emergency_contact: str | None = Field(default=None, max_length=255)
    status: EmployeeStatus | None = None


class EmployeeStatusUpdate(BaseModel):
    status: EmployeeStatus


class EmployeeResponse(ResponseModel):
    id: uuid.UUID
    employee_id: str
    first_name: str
    last_name: str
    email: str
    phone: str | None
    position: str
    department: str | None
    hire_date: datetime
    salary: float | None
    address: str | None
    emergency_contact: str | None
    status: EmployeeStatus
    created_at: datetime
    updated_at: datetime
