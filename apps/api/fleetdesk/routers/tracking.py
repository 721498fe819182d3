import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fleetdesk.auth.dependencies import AuthContext, get_auth_context
from fleetdesk.auth.scoping import OwnershipPolicy, get_ownership_policy
from fleetdesk.db.session import get_db
from fleetdesk.schemas.common import Envelope
from fleetdesk.schemas.tracking import TrackingEventResponse
from fleetdesk.services.tracking_service import list_order_tracking

router = APIRouter(prefix="/api/tracking", tags=["tracking"])


@router.get(
    "/order/{order_id}",
    response_model=Envelope[list[TrackingEventResponse]],
    summary="Tracking events for an order, newest first",
)
def order_tracking_endpoint(
    order_id: uuid.UUID,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[list[TrackingEventResponse]]:
    events = list_order_tracking(auth, db, order_id, policy)
    return Envelope[list[TrackingEventResponse]](
        data=[TrackingEventResponse.model_validate(event) for event in events]
    )
