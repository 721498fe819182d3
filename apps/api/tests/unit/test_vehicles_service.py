import pytest
from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy import select

from fleetdesk.models import OrderStatus, Unit, VehicleStatus
from fleetdesk.schemas.common import DocumentIn
from fleetdesk.schemas.vehicle import VehicleCreate, VehicleUpdate
from fleetdesk.services.vehicles_service import (
    create_vehicle,
    delete_vehicle,
    delete_vehicle_document,
    list_vehicles,
    set_vehicle_status,
    unit_name_for,
    update_vehicle,
)


def _payload(**overrides) -> VehicleCreate:
    fields = {"make": "Freightliner", "model": "Cascadia", "year": 2023, "license_plate": "TRK-100"}
    return VehicleCreate(**{**fields, **overrides})


def test_create_vehicle_creates_matching_unit(auth, policy, db_session):
    vehicle = create_vehicle(
        auth, db_session, policy, _payload(unit_number="U-7", driver_name="  Sam Hill  ")
    )

    assert vehicle.created_by_id == "account-a"
    assert vehicle.unit is not None
    assert vehicle.unit.unit_number == "U-7"
    assert vehicle.unit.name == "Sam Hill"


def test_unit_name_falls_back_to_plate(auth, policy, db_session):
    vehicle = create_vehicle(auth, db_session, policy, _payload())

    assert vehicle.unit.unit_number == "TRK-100"
    assert vehicle.unit.name == "Unit TRK-100"
    assert unit_name_for(vehicle) == "Unit TRK-100"


def test_blank_vin_is_stored_as_null():
    assert _payload(vin="   ").vin is None


def test_vehicle_year_is_bounded():
    with pytest.raises(ValidationError):
        _payload(year=1800)


def test_duplicate_plate_and_vin_are_rejected(auth, policy, db_session):
    create_vehicle(auth, db_session, policy, _payload(vin="1FUJGLDR12LM12345"))

    with pytest.raises(HTTPException) as plate:
        create_vehicle(auth, db_session, policy, _payload())
    with pytest.raises(HTTPException) as vin:
        create_vehicle(
            auth, db_session, policy, _payload(license_plate="TRK-200", vin="1FUJGLDR12LM12345")
        )

    assert plate.value.status_code == 400
    assert plate.value.detail == "License plate already exists"
    assert vin.value.detail == "VIN already exists"


def test_driver_cannot_hold_two_vehicles(auth, policy, db_session, seed):
    driver = seed.employee()
    seed.vehicle(driver_id=driver.id)

    with pytest.raises(HTTPException) as exc:
        create_vehicle(auth, db_session, policy, _payload(driver_id=driver.id))

    assert exc.value.detail == "Driver is already assigned to another vehicle"


def test_driver_of_out_of_service_vehicle_can_move(auth, policy, db_session, seed):
    driver = seed.employee()
    seed.vehicle(driver_id=driver.id, status=VehicleStatus.OUT_OF_SERVICE)

    vehicle = create_vehicle(auth, db_session, policy, _payload(driver_id=driver.id))

    assert vehicle.driver_id == driver.id


def test_update_vehicle_resyncs_unit_and_appends_documents(auth, policy, db_session, seed):
    vehicle = seed.vehicle(documents=[{"name": "reg.pdf", "path": "/files/reg.pdf"}])

    updated = update_vehicle(
        auth,
        db_session,
        policy,
        vehicle.id,
        VehicleUpdate(
            unit_number="U-42",
            documents=[DocumentIn(name="ins.pdf", path="/files/ins.pdf")],
        ),
    )

    assert updated.unit.unit_number == "U-42"
    assert [doc["name"] for doc in updated.documents] == ["reg.pdf", "ins.pdf"]


def test_update_vehicle_refuses_clearing_required_fields(auth, policy, db_session, seed):
    vehicle = seed.vehicle()

    with pytest.raises(HTTPException) as exc:
        update_vehicle(auth, db_session, policy, vehicle.id, VehicleUpdate(make=None))

    assert exc.value.status_code == 400


def test_set_vehicle_status(auth, policy, db_session, seed):
    vehicle = seed.vehicle()

    updated = set_vehicle_status(auth, db_session, policy, vehicle.id, VehicleStatus.MAINTENANCE)

    assert updated.status == VehicleStatus.MAINTENANCE


def test_list_vehicles_search_and_scope(auth, policy, db_session, seed):
    seed.vehicle(make="Kenworth", model="T680")
    seed.vehicle(make="Peterbilt", model="579")
    seed.vehicle("account-b", make="Kenworth", model="W900")

    items, total = list_vehicles(auth, db_session, policy, page=1, limit=10, search="kenworth")

    assert total == 1
    assert items[0].model == "T680"


def test_delete_vehicle_with_orders_is_refused(auth, policy, db_session, seed):
    vehicle = seed.vehicle()
    seed.order(seed.customer(), vehicle_id=vehicle.id, status=OrderStatus.DELIVERED)

    with pytest.raises(HTTPException) as exc:
        delete_vehicle(auth, db_session, policy, vehicle.id)

    assert exc.value.detail == "Cannot delete vehicle with existing orders"


def test_delete_vehicle_removes_its_unit(auth, policy, db_session, seed):
    vehicle = seed.vehicle()
    vehicle_id = vehicle.id

    delete_vehicle(auth, db_session, policy, vehicle_id)

    assert db_session.scalar(select(Unit).where(Unit.vehicle_id == vehicle_id)) is None


def test_delete_vehicle_document(auth, policy, db_session, seed):
    vehicle = seed.vehicle(documents=[{"name": "reg.pdf", "path": "/files/reg.pdf"}])

    updated = delete_vehicle_document(auth, db_session, policy, vehicle.id, 0)

    assert updated.documents == []


def test_foreign_vehicle_update_is_forbidden(other_auth, policy, db_session, seed):
    vehicle = seed.vehicle()

    with pytest.raises(HTTPException) as exc:
        set_vehicle_status(other_auth, db_session, policy, vehicle.id, VehicleStatus.IN_USE)

    assert exc.value.status_code == 403
