import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fleetdesk.auth.dependencies import AuthContext, get_auth_context
from fleetdesk.auth.scoping import OwnershipPolicy, get_ownership_policy
from fleetdesk.db.session import get_db
from fleetdesk.schemas.common import Envelope, MessageEnvelope, PageEnvelope, Pagination
from fleetdesk.schemas.order import (
    OrderCreate,
    OrderDetailResponse,
    OrderResponse,
    OrderStatusUpdate,
    OrderUpdate,
)
from fleetdesk.schemas.tracking import TrackingEventResponse
from fleetdesk.services.orders_service import (
    change_order_status,
    create_order,
    delete_order,
    delete_order_document,
    get_order,
    list_orders,
    update_order,
)

router = APIRouter(prefix="/api/orders", tags=["orders"])


def _detail(order) -> OrderDetailResponse:
    detail = OrderDetailResponse.model_validate(order)
    events = [TrackingEventResponse.model_validate(event) for event in order.tracking_events]
    # Newest first on the order screens.
    return detail.model_copy(update={"tracking_events": list(reversed(events))})


@router.get("", response_model=PageEnvelope[OrderResponse], summary="List orders")
def list_orders_endpoint(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    search: str | None = Query(default=None),
    order_number: str | None = Query(default=None),
    status: str | None = Query(default=None, description="Comma-separated statuses"),
    priority: str | None = Query(default=None, description="Comma-separated priorities"),
    customer_id: uuid.UUID | None = Query(default=None),
    vehicle_id: uuid.UUID | None = Query(default=None),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> PageEnvelope[OrderResponse]:
    items, total = list_orders(
        auth,
        db,
        policy,
        page=page,
        limit=limit,
        search=search,
        order_number=order_number,
        status_filter=status,
        priority_filter=priority,
        customer_id=customer_id,
        vehicle_id=vehicle_id,
    )
    return PageEnvelope[OrderResponse](
        data=[OrderResponse.model_validate(order) for order in items],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/{order_id}", response_model=Envelope[OrderDetailResponse], summary="Get order")
def get_order_endpoint(
    order_id: uuid.UUID,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[OrderDetailResponse]:
    return Envelope[OrderDetailResponse](data=_detail(get_order(auth, db, policy, order_id)))


@router.post(
    "",
    response_model=Envelope[OrderDetailResponse],
    status_code=201,
    summary="Create order",
)
def create_order_endpoint(
    payload: OrderCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[OrderDetailResponse]:
    order = create_order(auth, db, policy, payload)
    return Envelope[OrderDetailResponse](
        data=_detail(order), message="Order created successfully"
    )


@router.put("/{order_id}", response_model=Envelope[OrderDetailResponse], summary="Update order")
def update_order_endpoint(
    order_id: uuid.UUID,
    payload: OrderUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[OrderDetailResponse]:
    order = update_order(auth, db, policy, order_id, payload)
    return Envelope[OrderDetailResponse](
        data=_detail(order), message="Order updated successfully"
    )


@router.patch(
    "/{order_id}/status",
    response_model=Envelope[OrderResponse],
    summary="Update order status",
)
def update_order_status_endpoint(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[OrderResponse]:
    order = change_order_status(
        auth,
        db,
        policy,
        order_id,
        payload.status,
        notes=payload.notes,
        location=payload.location,
    )
    return Envelope[OrderResponse](
        data=OrderResponse.model_validate(order), message="Order status updated successfully"
    )


@router.delete("/{order_id}", response_model=MessageEnvelope, summary="Delete order")
def delete_order_endpoint(
    order_id: uuid.UUID,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> MessageEnvelope:
    delete_order(auth, db, policy, order_id)
    return MessageEnvelope(message="Order deleted successfully")


@router.delete(
    "/{order_id}/documents/{index}",
    response_model=Envelope[OrderResponse],
    summary="Remove an order document",
)
def delete_order_document_endpoint(
    order_id: uuid.UUID,
    index: int,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[OrderResponse]:
    order = delete_order_document(auth, db, policy, order_id, index)
    return Envelope[OrderResponse](
        data=OrderResponse.model_validate(order), message="Document deleted successfully"
    )
