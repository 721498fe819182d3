import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from fleetdesk.models.unit import UnitAvailability
from fleetdesk.schemas.common import ResponseModel, VehicleSummary


class UnitCreate(BaseModel):
    vehicle_id: uuid.UUID
    unit_number: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=255)
    availability: UnitAvailability = UnitAvailability.AVAILABLE
    location: str | None = Field(default=None, max_length=255)
    zip_code: str | None = Field(default=None, max_length=20)
    available_time: str | None = Field(default=None, max_length=100)
    notes: str | None = None
    dimensions: str | None = Field(default=None, max_length=255)
    payload: str | None = Field(default=None, max_length=255)


class UnitUpdate(BaseModel):
    unit_number: str | None = Field(default=None, min_length=1, max_length=64)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    availability: UnitAvailability | None = None
    location: str | None = Field(default=None, max_length=255)
    zip_code: str | None = Field(default=None, max_length=20)
    available_time: str | None = Field(default=None, max_length=100)
    notes: str | None = None
    dimensions: str | None = Field(default=None, max_length=255)
    payload: str | None = Field(default=None, max_length=255)
    is_active: bool | None = None


class UnitResponse(ResponseModel):
    id: uuid.UUID
    vehicle_id: uuid.UUID
    unit_number: str
    name: str
    availability: UnitAvailability
    location: str | None
    zip_code: str | None
    available_time: str | None
    notes: str | None
    dimensions: str | None
    payload: str | None
    is_active: bool
    vehicle: VehicleSummary
    created_at: datetime
    updated_at: datetime
