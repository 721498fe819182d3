import pytest
from fastapi import HTTPException

from fleetdesk.models import UnitAvailability
from fleetdesk.schemas.unit import UnitCreate, UnitUpdate
from fleetdesk.services.units_service import (
    create_unit,
    deactivate_unit,
    get_unit,
    list_units,
    update_unit,
)


def test_create_unit_rejects_second_unit_for_vehicle(auth, policy, db_session, seed):
    vehicle = seed.vehicle()

    with pytest.raises(HTTPException) as exc:
        create_unit(
            auth,
            db_session,
            policy,
            UnitCreate(vehicle_id=vehicle.id, unit_number="U-1", name="Spare"),
        )

    assert exc.value.status_code == 400
    assert exc.value.detail == "Unit already exists for this vehicle"


def test_create_unit_for_bare_vehicle(auth, policy, db_session, seed):
    vehicle = seed.vehicle(with_unit=False)

    unit = create_unit(
        auth,
        db_session,
        policy,
        UnitCreate(vehicle_id=vehicle.id, unit_number="U-1", name="Night shift"),
    )

    assert unit.vehicle_id == vehicle.id
    assert unit.availability == UnitAvailability.AVAILABLE
    assert unit.is_active is True


def test_deactivated_units_drop_out_of_listing(auth, policy, db_session, seed):
    kept = seed.vehicle().unit
    retired = seed.vehicle().unit

    deactivate_unit(auth, db_session, policy, retired.id)
    items, total = list_units(auth, db_session, policy, page=1, limit=10)

    assert total == 1
    assert [unit.id for unit in items] == [kept.id]
    assert get_unit(auth, db_session, policy, retired.id).is_active is False


def test_list_units_search_matches_driver_name(auth, policy, db_session, seed):
    driver = seed.employee(first_name="Marisol")
    seed.vehicle(driver_id=driver.id)
    seed.vehicle()

    items, total = list_units(auth, db_session, policy, page=1, limit=10, search="mari")

    assert total == 1
    assert items[0].vehicle.driver_id == driver.id


def test_list_units_filters_availability_and_scope(auth, policy, db_session, seed):
    busy = seed.vehicle().unit
    busy.availability = UnitAvailability.BUSY
    db_session.commit()
    seed.vehicle()
    seed.vehicle("account-b")

    _, total = list_units(auth, db_session, policy, page=1, limit=10)
    assert total == 2

    items, total = list_units(auth, db_session, policy, page=1, limit=10, availability="busy")
    assert total == 1
    assert items[0].id == busy.id


def test_update_unit(auth, policy, db_session, seed):
    unit = seed.vehicle().unit

    updated = update_unit(
        auth, db_session, policy, unit.id, UnitUpdate(location="Reno, NV", zip_code="89501")
    )

    assert updated.location == "Reno, NV"
    assert updated.zip_code == "89501"


def test_foreign_unit_is_forbidden(other_auth, policy, db_session, seed):
    unit = seed.vehicle().unit

    with pytest.raises(HTTPException) as exc:
        deactivate_unit(other_auth, db_session, policy, unit.id)

    assert exc.value.status_code == 403
