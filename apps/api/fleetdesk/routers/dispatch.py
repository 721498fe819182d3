import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fleetdesk.auth.dependencies import AuthContext, get_auth_context
from fleetdesk.auth.scoping import OwnershipPolicy, get_ownership_policy
from fleetdesk.db.session import get_db
from fleetdesk.observability import metrics_store
from fleetdesk.schemas.common import Envelope
from fleetdesk.schemas.dispatch import AssignOrderRequest, DashboardResponse, DashboardStats
from fleetdesk.schemas.employee import EmployeeResponse
from fleetdesk.schemas.order import (
    ActiveOrderResponse,
    OrderDetailResponse,
    OrderResponse,
    OrderStatusUpdate,
)
from fleetdesk.schemas.vehicle import AvailableVehicleResponse, VehicleResponse
from fleetdesk.services.dispatch_service import (
    assign_order,
    get_dashboard,
    list_available_drivers,
    list_available_vehicles,
    track_order,
    update_dispatch_status,
)

router = APIRouter(prefix="/api/dispatch", tags=["dispatch"])


@router.get(
    "/dashboard",
    response_model=Envelope[DashboardResponse],
    summary="Dispatch dashboard snapshot",
)
def dashboard_endpoint(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[DashboardResponse]:
    dashboard = get_dashboard(auth, db, policy)
    return Envelope[DashboardResponse](
        data=DashboardResponse(
            pending_orders=[OrderResponse.model_validate(o) for o in dashboard.pending_orders],
            active_orders=[ActiveOrderResponse.model_validate(o) for o in dashboard.active_orders],
            available_vehicles=[
                VehicleResponse.model_validate(v) for v in dashboard.available_vehicles
            ],
            available_drivers=[
                EmployeeResponse.model_validate(e) for e in dashboard.available_drivers
            ],
            recent_dispatches=[
                ActiveOrderResponse.model_validate(o) for o in dashboard.recent_dispatches
            ],
            stats=DashboardStats(**dashboard.stats),
        )
    )


@router.post("/assign", response_model=Envelope[OrderResponse], summary="Assign order")
def assign_order_endpoint(
    payload: AssignOrderRequest,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[OrderResponse]:
    order = assign_order(auth, db, policy, payload.order_id, payload.vehicle_id, payload.driver_id)
    metrics_store.increment("dispatch_assign_total")
    return Envelope[OrderResponse](
        data=OrderResponse.model_validate(order), message="Order assigned successfully"
    )


@router.patch(
    "/{order_id}/status",
    response_model=Envelope[OrderResponse],
    summary="Update dispatch status",
)
def update_status_endpoint(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[OrderResponse]:
    order = update_dispatch_status(
        auth,
        db,
        policy,
        order_id,
        payload.status,
        notes=payload.notes,
        location=payload.location,
    )
    metrics_store.increment("dispatch_status_update_total")
    return Envelope[OrderResponse](
        data=OrderResponse.model_validate(order), message="Order status updated successfully"
    )


@router.get(
    "/track/{order_id}",
    response_model=Envelope[OrderDetailResponse],
    summary="Order with tracking history",
)
def track_order_endpoint(
    order_id: uuid.UUID,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[OrderDetailResponse]:
    return Envelope[OrderDetailResponse](
        data=OrderDetailResponse.model_validate(track_order(auth, db, policy, order_id))
    )


@router.get(
    "/vehicles/available",
    response_model=Envelope[list[AvailableVehicleResponse]],
    summary="Available vehicles",
)
def available_vehicles_endpoint(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[list[AvailableVehicleResponse]]:
    vehicles = list_available_vehicles(auth, db, policy)
    return Envelope[list[AvailableVehicleResponse]](
        data=[AvailableVehicleResponse.model_validate(vehicle) for vehicle in vehicles]
    )


@router.get(
    "/drivers/available",
    response_model=Envelope[list[EmployeeResponse]],
    summary="Available drivers",
)
def available_drivers_endpoint(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[list[EmployeeResponse]]:
    drivers = list_available_drivers(auth, db, policy)
    return Envelope[list[EmployeeResponse]](
        data=[EmployeeResponse.model_validate(driver) for driver in drivers]
    )
