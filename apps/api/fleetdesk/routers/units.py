import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fleetdesk.auth.dependencies import AuthContext, get_auth_context
from fleetdesk.auth.scoping import OwnershipPolicy, get_ownership_policy
from fleetdesk.db.session import get_db
from fleetdesk.schemas.common import Envelope, MessageEnvelope, PageEnvelope, Pagination
from fleetdesk.schemas.unit import UnitCreate, UnitResponse, UnitUpdate
from fleetdesk.services.units_service import (
    create_unit,
    deactivate_unit,
    get_unit,
    list_units,
    update_unit,
)

router = APIRouter(prefix="/api/units", tags=["units"])


@router.get("", response_model=PageEnvelope[UnitResponse], summary="List active units")
def list_units_endpoint(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=200),
    search: str | None = Query(default=None),
    availability: str | None = Query(default=None),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> PageEnvelope[UnitResponse]:
    items, total = list_units(
        auth, db, policy, page=page, limit=limit, search=search, availability=availability
    )
    return PageEnvelope[UnitResponse](
        data=[UnitResponse.model_validate(unit) for unit in items],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/{unit_id}", response_model=Envelope[UnitResponse], summary="Get unit")
def get_unit_endpoint(
    unit_id: uuid.UUID,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[UnitResponse]:
    return Envelope[UnitResponse](
        data=UnitResponse.model_validate(get_unit(auth, db, policy, unit_id))
    )


@router.post("", response_model=Envelope[UnitResponse], status_code=201, summary="Create unit")
def create_unit_endpoint(
    payload: UnitCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[UnitResponse]:
    unit = create_unit(auth, db, policy, payload)
    return Envelope[UnitResponse](
        data=UnitResponse.model_validate(unit), message="Unit created successfully"
    )


@router.put("/{unit_id}", response_model=Envelope[UnitResponse], summary="Update unit")
def update_unit_endpoint(
    unit_id: uuid.UUID,
    payload: UnitUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[UnitResponse]:
    unit = update_unit(auth, db, policy, unit_id, payload)
    return Envelope[UnitResponse](
        data=UnitResponse.model_validate(unit), message="Unit updated successfully"
    )


@router.delete("/{unit_id}", response_model=MessageEnvelope, summary="Deactivate unit")
def delete_unit_endpoint(
    unit_id: uuid.UUID,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> MessageEnvelope:
    deactivate_unit(auth, db, policy, unit_id)
    return MessageEnvelope(message="Unit deleted successfully")
