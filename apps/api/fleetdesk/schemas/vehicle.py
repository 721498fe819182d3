import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from fleetdesk.models.vehicle import VehicleStatus
from fleetdesk.schemas.common import (
    DocumentIn,
    DocumentOut,
    EmployeeSummary,
    OrderSummary,
    ResponseModel,
    UnitSummary,
)


class VehicleCreate(BaseModel):
    make: str = Field(min_length=1, max_length=100)
    model: str = Field(min_length=1, max_length=100)
    year: int = Field(ge=1900, le=2100)
    license_plate: str = Field(min_length=1, max_length=32)
    vin: str | None = Field(default=None, max_length=32)
    color: str | None = Field(default=None, max_length=50)
    capacity: float | None = Field(default=None, ge=0)
    status: VehicleStatus = VehicleStatus.AVAILABLE
    driver_id: uuid.UUID | None = None
    unit_number: str | None = Field(default=None, max_length=64)
    driver_name: str | None = Field(default=None, max_length=255)
    dimensions: str | None = Field(default=None, max_length=255)
    payload: str | None = Field(default=None, max_length=255)
    registration_exp_date: date | None = None
    insurance_exp_date: date | None = None
    documents: list[DocumentIn] = Field(default_factory=list)

    @field_validator("license_plate", "vin", "unit_number", "driver_name")
    @classmethod
    def strip_strings(cls, value: str | None) -> str | None:
        if value is None:
            return value
        # Blank optional identifiers are stored as NULL so the VIN unique index ignores them.
        return value.strip() or None


class VehicleUpdate(BaseModel):
    make: str | None = Field(default=None, min_length=1, max_length=100)
    model: str | None = Field(default=None, min_length=1, max_length=100)
    year: int | None = Field(default=None, ge=1900, le=2100)
    license_plate: str | None = Field(default=None, min_length=1, max_length=32)
    vin: str | None = Field(default=None, max_length=32)
    color: str | None = Field(default=None, max_length=50)
    capacity: float | None = Field(default=None, ge=0)
    status: VehicleStatus | None = None
    driver_id: uuid.UUID | None = None
    unit_number: str | None = Field(default=None, max_length=64)
    driver_name: str | None = Field(default=None, max_length=255)
    dimensions: str | None = Field(default=None, max_length=255)
    payload: str | None = Field(default=None, max_length=255)
    registration_exp_date: date | None = None
    insurance_exp_date: date | None = None
    documents: list[DocumentIn] | None = None

    @field_validator("license_plate", "vin", "unit_number", "driver_name")
    @classmethod
    def strip_strings(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return value.strip() or None


class VehicleStatusUpdate(BaseModel):
    status: VehicleStatus


class VehicleResponse(ResponseModel):
    id: uuid.UUID
    make: str
    model: str
    year: int
    license_plate: str
    vin: str | None
    color: str | None
    capacity: float | None
    status: VehicleStatus
    driver_id: uuid.UUID | None
    unit_number: str | None
    driver_name: str | None
    dimensions: str | None
    payload: str | None
    registration_exp_date: date | None
    insurance_exp_date: date | None
    documents: list[DocumentOut]
    driver: EmployeeSummary | None = None
    unit: UnitSummary | None = None
    created_at: datetime
    updated_at: datetime


class VehicleDetailResponse(VehicleResponse):
    orders: list[OrderSummary] = []


class AvailableVehicleResponse(VehicleResponse):
    active_orders: list[OrderSummary] = []
