import math
import uuid
from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fleetdesk.config import allowed_document_extensions, settings
from fleetdesk.models.employee import EmployeeStatus
from fleetdesk.models.order import OrderPriority, OrderStatus
from fleetdesk.models.unit import UnitAvailability
from fleetdesk.models.vehicle import VehicleStatus

T = TypeVar("T")


class ResponseModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class Pagination(ResponseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        pages = math.ceil(total / limit) if limit else 0
        return cls(page=page, limit=limit, total=total, pages=pages)


class Envelope(ResponseModel, Generic[T]):
    success: bool = True
    data: T
    message: str | None = None


class PageEnvelope(ResponseModel, Generic[T]):
    success: bool = True
    data: list[T]
    pagination: Pagination
    message: str | None = None


class MessageEnvelope(ResponseModel):
    success: bool = True
    message: str


class DocumentIn(BaseModel):
    """Metadata for a document already stored by the upload service."""

    name: str = Field(min_length=1, max_length=255)
    path: str = Field(min_length=1, max_length=1024)
    size: int | None = Field(default=None, ge=0)
    upload_date: datetime | None = None
    notes: str | None = None

    @field_validator("name")
    @classmethod
    def check_extension(cls, value: str) -> str:
        value = value.strip()
        suffix = "." + value.rsplit(".", 1)[-1].lower() if "." in value else ""
        if suffix not in allowed_document_extensions():
            allowed = ", ".join(sorted(allowed_document_extensions()))
            raise ValueError(f"Unsupported document type, allowed: {allowed}")
        return value

    @field_validator("size")
    @classmethod
    def check_size(cls, value: int | None) -> int | None:
        if value is not None and value > settings.upload_max_bytes:
            raise ValueError(f"Document exceeds the {settings.upload_max_bytes} byte limit")
        return value


class DocumentNoteUpdate(BaseModel):
    index: int = Field(ge=0)
    notes: str | None = None


class DocumentOut(ResponseModel):
    name: str
    path: str
    size: int | None = None
    upload_date: datetime | None = None
    notes: str | None = None


class CustomerSummary(ResponseModel):
    id: uuid.UUID
    name: str
    email: str | None
    phone: str | None
    address: str | None


class EmployeeSummary(ResponseModel):
    id: uuid.UUID
    employee_id: str
    first_name: str
    last_name: str
    email: str
    phone: str | None
    position: str
    status: EmployeeStatus


class VehicleSummary(ResponseModel):
    id: uuid.UUID
    make: str
    model: str
    license_plate: str
    status: VehicleStatus
    unit_number: str | None
    driver: EmployeeSummary | None = None


class UnitSummary(ResponseModel):
    id: uuid.UUID
    unit_number: str
    name: str
    availability: UnitAvailability
    is_active: bool


class OrderSummary(ResponseModel):
    id: uuid.UUID
    order_number: str
    status: OrderStatus
    priority: OrderPriority
    pickup_address: str
    delivery_address: str
    pickup_date: datetime
    delivery_date: datetime | None
    created_at: datetime
    updated_at: datetime
