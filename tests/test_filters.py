from types import SimpleNamespace

from fleetops.core.filters import filter_rows, matches_search, matches_status
from fleetops.models.vehicle import VehicleStatus, FuelType

ROWS = [
    SimpleNamespace(license_plate="MH12AB1234", vehicle_owner="Sharma", fuel_type=FuelType.DIESEL, status=VehicleStatus.ACTIVE),
    SimpleNamespace(license_plate="GJ01CD5678", vehicle_owner="Patel", fuel_type=FuelType.CNG, status=VehicleStatus.MAINTENANCE),
    SimpleNamespace(license_plate="KA05EF9012", vehicle_owner="sharma bros", fuel_type=FuelType.BIO_DIESEL, status=VehicleStatus.INACTIVE),
]
FIELDS = ("license_plate", "vehicle_owner", "fuel_type")


def test_search_is_case_insensitive_substring():
    result = filter_rows(ROWS, search="SHARMA", fields=FIELDS)
    assert [row.license_plate for row in result] == ["MH12AB1234", "KA05EF9012"]


def test_search_matches_enum_values():
    result = filter_rows(ROWS, search="bio", fields=FIELDS)
    assert [row.license_plate for row in result] == ["KA05EF9012"]


def test_search_intersects_with_status():
    result = filter_rows(ROWS, search="diesel", fields=FIELDS, status="active")
    assert [row.license_plate for row in result] == ["MH12AB1234"]


def test_blank_search_and_all_status_keep_everything():
    assert filter_rows(ROWS, search="  ", fields=FIELDS, status="all") == ROWS
    assert filter_rows(ROWS) == ROWS


def test_callable_fields():
    row = SimpleNamespace(description="Toll", vehicle=SimpleNamespace(license_plate="MH12AB1234"))
    plate = lambda r: r.vehicle.license_plate if r.vehicle else None
    assert matches_search(row, "ab12", ("description", plate))
    assert not matches_search(SimpleNamespace(description="Toll", vehicle=None), "ab12", ("description", plate))


def test_matches_status_on_other_field():
    row = SimpleNamespace(type="fuel")
    assert matches_status(row, "fuel", "type")
    assert not matches_status(row, "tolls", "type")
