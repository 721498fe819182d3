import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from fleetdesk.models.order import DriverKind, OrderPriority, OrderStatus
from fleetdesk.schemas.common import (
    CustomerSummary,
    DocumentIn,
    DocumentNoteUpdate,
    DocumentOut,
    EmployeeSummary,
    ResponseModel,
    VehicleSummary,
)
from fleetdesk.schemas.tracking import TrackingEventResponse, TrackingLocation


class DriverRefSchema(ResponseModel):
    kind: DriverKind
    id: str = Field(min_length=1, max_length=128)


class OrderCreate(BaseModel):
    customer_id: uuid.UUID
    vehicle_id: uuid.UUID | None = None
    driver: DriverRefSchema | None = None
    employee_id: uuid.UUID | None = None
    priority: OrderPriority = OrderPriority.NORMAL
    customer_load_number: str | None = Field(default=None, max_length=64)
    pickup_address: str = Field(min_length=1, max_length=500)
    delivery_address: str = Field(min_length=1, max_length=500)
    pickup_date: datetime
    delivery_date: datetime | None = None
    description: str | None = None
    miles: float | None = Field(default=None, ge=0)
    pieces: int | None = Field(default=None, ge=0)
    weight: float | None = Field(default=None, ge=0)
    load_pay: float | None = Field(default=None, ge=0)
    driver_pay: float | None = Field(default=None, ge=0)
    notes: str | None = None
    documents: list[DocumentIn] = Field(default_factory=list)

    @field_validator("pickup_address", "delivery_address")
    @classmethod
    def strip_address(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Address is required")
        return value


class OrderUpdate(BaseModel):
    customer_id: uuid.UUID | None = None
    vehicle_id: uuid.UUID | None = None
    driver: DriverRefSchema | None = None
    employee_id: uuid.UUID | None = None
    priority: OrderPriority | None = None
    customer_load_number: str | None = Field(default=None, max_length=64)
    pickup_address: str | None = Field(default=None, min_length=1, max_length=500)
    delivery_address: str | None = Field(default=None, min_length=1, max_length=500)
    pickup_date: datetime | None = None
    delivery_date: datetime | None = None
    description: str | None = None
    miles: float | None = Field(default=None, ge=0)
    pieces: int | None = Field(default=None, ge=0)
    weight: float | None = Field(default=None, ge=0)
    load_pay: float | None = Field(default=None, ge=0)
    driver_pay: float | None = Field(default=None, ge=0)
    notes: str | None = None
    document_notes: list[DocumentNoteUpdate] | None = None
    documents: list[DocumentIn] | None = None


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    notes: str | None = None
    location: TrackingLocation | str | None = None


class OrderResponse(ResponseModel):
    id: uuid.UUID
    order_number: str
    status: OrderStatus
    priority: OrderPriority
    customer_id: uuid.UUID
    vehicle_id: uuid.UUID | None
    driver: DriverRefSchema | None = None
    employee_id: uuid.UUID | None
    customer_load_number: str | None
    pickup_address: str
    delivery_address: str
    pickup_date: datetime
    delivery_date: datetime | None
    description: str | None
    miles: float | None
    pieces: int | None
    weight: float | None
    load_pay: float | None
    driver_pay: float | None
    notes: str | None
    documents: list[DocumentOut]
    customer: CustomerSummary
    vehicle: VehicleSummary | None = None
    employee: EmployeeSummary | None = None
    created_at: datetime
    updated_at: datetime


class OrderDetailResponse(OrderResponse):
    tracking_events: list[TrackingEventResponse] = []


class ActiveOrderResponse(OrderResponse):
    latest_tracking_event: TrackingEventResponse | None = None
