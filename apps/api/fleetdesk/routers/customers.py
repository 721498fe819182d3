import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fleetdesk.auth.dependencies import AuthContext, get_auth_context
from fleetdesk.auth.scoping import OwnershipPolicy, get_ownership_policy
from fleetdesk.db.session import get_db
from fleetdesk.schemas.common import Envelope, MessageEnvelope, PageEnvelope, Pagination
from fleetdesk.schemas.customer import (
    CustomerCreate,
    CustomerListItem,
    CustomerResponse,
    CustomerUpdate,
)
from fleetdesk.services.customers_service import (
    create_customer,
    delete_customer,
    get_customer,
    list_customers,
    update_customer,
)

router = APIRouter(prefix="/api/customers", tags=["customers"])


@router.get("", response_model=PageEnvelope[CustomerListItem], summary="List customers")
def list_customers_endpoint(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    search: str | None = Query(default=None),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> PageEnvelope[CustomerListItem]:
    rows, total = list_customers(auth, db, policy, page=page, limit=limit, search=search)
    return PageEnvelope[CustomerListItem](
        data=[
            CustomerListItem(
                **CustomerResponse.model_validate(customer).model_dump(), order_count=count
            )
            for customer, count in rows
        ],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/{customer_id}", response_model=Envelope[CustomerResponse], summary="Get customer")
def get_customer_endpoint(
    customer_id: uuid.UUID,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[CustomerResponse]:
    customer = get_customer(auth, db, policy, customer_id)
    return Envelope[CustomerResponse](data=CustomerResponse.model_validate(customer))


@router.post(
    "", response_model=Envelope[CustomerResponse], status_code=201, summary="Create customer"
)
def create_customer_endpoint(
    payload: CustomerCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
) -> Envelope[CustomerResponse]:
    customer = create_customer(auth, db, payload)
    return Envelope[CustomerResponse](
        data=CustomerResponse.model_validate(customer), message="Customer created successfully"
    )


@router.put("/{customer_id}", response_model=Envelope[CustomerResponse], summary="Update customer")
def update_customer_endpoint(
    customer_id: uuid.UUID,
    payload: CustomerUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> Envelope[CustomerResponse]:
    customer = update_customer(auth, db, policy, customer_id, payload)
    return Envelope[CustomerResponse](
        data=CustomerResponse.model_validate(customer), message="Customer updated successfully"
    )


@router.delete("/{customer_id}", response_model=MessageEnvelope, summary="Delete customer")
def delete_customer_endpoint(
    customer_id: uuid.UUID,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    policy: OwnershipPolicy = Depends(get_ownership_policy),
) -> MessageEnvelope:
    delete_customer(auth, db, policy, customer_id)
    return MessageEnvelope(message="Customer deleted successfully")
