import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from fleetdesk.schemas.customer import CustomerCreate, CustomerUpdate
from fleetdesk.services.customers_service import (
    create_customer,
    delete_customer,
    get_customer,
    list_customers,
    update_customer,
)


def test_create_customer_is_owned_by_caller(auth, db_session):
    customer = create_customer(auth, db_session, CustomerCreate(name="  Blue Ridge Co  "))

    assert customer.name == "Blue Ridge Co"
    assert customer.created_by_id == "account-a"


def test_customer_email_is_validated():
    with pytest.raises(ValidationError):
        CustomerCreate(name="Blue Ridge Co", email="not-an-email")


def test_list_customers_includes_order_counts(auth, policy, db_session, seed):
    busy = seed.customer(name="Busy Corp")
    seed.customer(name="Quiet LLC")
    seed.customer("account-b", name="Busy Elsewhere")
    seed.order(busy)
    seed.order(busy)

    rows, total = list_customers(auth, db_session, policy, page=1, limit=10)
    counts = {customer.name: count for customer, count in rows}

    assert total == 2
    assert counts == {"Busy Corp": 2, "Quiet LLC": 0}


def test_list_customers_search(auth, policy, db_session, seed):
    seed.customer(name="Harbor Logistics", phone="555-0101")
    seed.customer(name="Inland Supply")

    rows, total = list_customers(auth, db_session, policy, page=1, limit=10, search="0101")

    assert total == 1
    assert rows[0][0].name == "Harbor Logistics"


def test_update_customer(auth, policy, db_session, seed):
    customer = seed.customer(city="Austin")

    updated = update_customer(auth, db_session, policy, customer.id, CustomerUpdate(city="Dallas"))

    assert updated.city == "Dallas"


def test_update_customer_refuses_empty_name(auth, policy, db_session, seed):
    customer = seed.customer()

    with pytest.raises(HTTPException) as exc:
        update_customer(auth, db_session, policy, customer.id, CustomerUpdate(name=None))

    assert exc.value.status_code == 400


def test_delete_customer_with_orders_is_refused(auth, policy, db_session, seed):
    customer = seed.customer()
    seed.order(customer)

    with pytest.raises(HTTPException) as exc:
        delete_customer(auth, db_session, policy, customer.id)

    assert exc.value.status_code == 400
    assert exc.value.detail == "Cannot delete customer with existing orders"


def test_delete_customer(auth, policy, db_session, seed):
    customer = seed.customer()
    customer_id = customer.id

    delete_customer(auth, db_session, policy, customer_id)

    with pytest.raises(HTTPException) as exc:
        get_customer(auth, db_session, policy, customer_id)
    assert exc.value.status_code == 404


def test_foreign_customer_is_forbidden(other_auth, policy, db_session, seed):
    customer = seed.customer()

    with pytest.raises(HTTPException) as exc:
        get_customer(other_auth, db_session, policy, customer.id)

    assert exc.value.status_code == 403
    assert exc.value.detail == "Access denied"
