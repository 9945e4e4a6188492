from datetime import date, timedelta
from types import SimpleNamespace

from fleetops.core.expiry import is_expired, is_expiry_near, vehicle_document_alerts

TODAY = date(2026, 3, 15)


def test_expiry_windows():
    assert is_expired(TODAY - timedelta(days=1), TODAY)
    assert not is_expired(TODAY, TODAY)
    assert is_expiry_near(TODAY, TODAY)
    assert is_expiry_near(TODAY + timedelta(days=30), TODAY, 30)
    assert not is_expiry_near(TODAY + timedelta(days=31), TODAY, 30)
    assert not is_expiry_near(None, TODAY)


def test_vehicle_document_alerts():
    vehicle = SimpleNamespace(
        id="v1",
        license_plate="MH12AB1234",
        permit_expiry=TODAY + timedelta(days=10),
        national_permit_expiry=TODAY + timedelta(days=300),
        pucc_expiry=TODAY - timedelta(days=2),
        insurance_expiry=None,
    )
    alerts = vehicle_document_alerts(vehicle, TODAY, days=30)

    assert [alert["document"] for alert in alerts] == ["Permit", "Pollution Certificate"]
    assert alerts[0]["days_remaining"] == 10 and not alerts[0]["expired"]
    assert alerts[1]["days_remaining"] == -2 and alerts[1]["expired"]
