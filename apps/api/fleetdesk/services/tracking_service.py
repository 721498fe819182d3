import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session

from fleetdesk.auth.dependencies import AuthContext
from fleetdesk.auth.scoping import OwnershipPolicy
from fleetdesk.models._common import now_utc
from fleetdesk.models.order import OrderStatus
from fleetdesk.models.tracking_event import TrackingEvent
from fleetdesk.services.lookups import get_owned_order


def append_tracking_event(
    db: Session,
    order_id: uuid.UUID,
    status: OrderStatus | str,
    *,
    location: Any = None,
    notes: str | None = None,
    timestamp: datetime | None = None,
) -> TrackingEvent:
    """Add an audit row in the caller's transaction. The caller commits."""
    if isinstance(location, BaseModel):
        location = location.model_dump(exclude_none=True)
    event = TrackingEvent(
        order_id=order_id,
        status=status.value if isinstance(status, OrderStatus) else status,
        location=location,
        notes=notes,
        timestamp=timestamp or now_utc(),
    )
    db.add(event)
    return event


def list_order_tracking(
    auth: AuthContext,
    db: Session,
    order_id: uuid.UUID,
    policy: OwnershipPolicy,
) -> list[TrackingEvent]:
    get_owned_order(db, auth, policy, order_id)
    events = db.scalars(
        select(TrackingEvent)
        .where(TrackingEvent.order_id == order_id)
        .order_by(TrackingEvent.timestamp.desc())
    )
    return list(events)
