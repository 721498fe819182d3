import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from fleetdesk.schemas.common import ResponseModel


class TrackingLocation(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    address: str | None = None


class TrackingEventResponse(ResponseModel):
    id: uuid.UUID
    order_id: uuid.UUID
    status: str
    # Free-text address or a TrackingLocation payload.
    location: Any = None
    notes: str | None
    timestamp: datetime
