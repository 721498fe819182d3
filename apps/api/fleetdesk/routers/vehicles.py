import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fleetdesk.auth.dependencies import AuthContext, get_auth_context
from fleetdesk.auth.scoping import OwnershipPolicy, get_ownership_policy
from fleetdesk.db.session import get_db
from fleetdesk.schemas.common import Envelope, MessageEnvelope, PageEnvelope, Pagination
from fleetdesk.schemas.vehicle import (
    VehicleCreate,
    VehicleDetailResponse,
    VehicleResponse,
    VehicleStatusUpdate,
    VehicleUpdate,
)
from fleetdesk.services.vehicles_service import (
    create_vehicle,
    delete_vehicle,
    delete_vehicle_document,
    get_vehicle,
    list_vehicles,
    set_vehicle_status,
    update_vehicle,
)

router = APIRouter(prefix="/api/vehicles", tags=["vehicles"])


@router.get("", response_model=PageEnvelope[VehicleResponse], summary="List vehicles")
def list_vehicles_endpoint(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    search: str | None = Query(default=None),
    status: str | None = Query(default=None),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> PageEnvelope[VehicleResponse]:
    items, total = list_vehicles(
        auth, db, policy, page=page, limit=limit, search=search, status_filter=status
    )
    return PageEnvelope[VehicleResponse](
        data=[VehicleResponse.model_validate(vehicle) for vehicle in items],
        pagination=Pagination.build(page, limit, total),
    )


@router.get(
    "/{vehicle_id}", response_model=Envelope[VehicleDetailResponse], summary="Get vehicle"
)
def get_vehicle_endpoint(
    vehicle_id: uuid.UUID,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[VehicleDetailResponse]:
    vehicle = get_vehicle(auth, db, policy, vehicle_id)
    return Envelope[VehicleDetailResponse](data=VehicleDetailResponse.model_validate(vehicle))


@router.post(
    "", response_model=Envelope[VehicleResponse], status_code=201, summary="Create vehicle"
)
def create_vehicle_endpoint(
    payload: VehicleCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[VehicleResponse]:
    vehicle = create_vehicle(auth, db, policy, payload)
    return Envelope[VehicleResponse](
        data=VehicleResponse.model_validate(vehicle), message="Vehicle created successfully"
    )


@router.put("/{vehicle_id}", response_model=Envelope[VehicleResponse], summary="Update vehicle")
def update_vehicle_endpoint(
    vehicle_id: uuid.UUID,
    payload: VehicleUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[VehicleResponse]:
    vehicle = update_vehicle(auth, db, policy, vehicle_id, payload)
    return Envelope[VehicleResponse](
        data=VehicleResponse.model_validate(vehicle), message="Vehicle updated successfully"
    )


@router.patch(
    "/{vehicle_id}/status",
    response_model=Envelope[VehicleResponse],
    summary="Update vehicle status",
)
def update_vehicle_status_endpoint(
    vehicle_id: uuid.UUID,
    payload: VehicleStatusUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[VehicleResponse]:
    vehicle = set_vehicle_status(auth, db, policy, vehicle_id, payload.status)
    return Envelope[VehicleResponse](data=VehicleResponse.model_validate(vehicle))


@router.delete("/{vehicle_id}", response_model=MessageEnvelope, summary="Delete vehicle")
def delete_vehicle_endpoint(
    vehicle_id: uuid.UUID,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> MessageEnvelope:
    delete_vehicle(auth, db, policy, vehicle_id)
    return MessageEnvelope(message="Vehicle deleted successfully")


@router.delete(
    "/{vehicle_id}/documents/{index}",
    response_model=Envelope[VehicleResponse],
    summary="Remove a vehicle document",
)
def delete_vehicle_document_endpoint(
    vehicle_id: uuid.UUID,
    index: int,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[VehicleResponse]:
    vehicle = delete_vehicle_document(auth, db, policy, vehicle_id, index)
    return Envelope[VehicleResponse](
        data=VehicleResponse.model_validate(vehicle), message="Document deleted successfully"
    )
