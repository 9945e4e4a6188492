from datetime import date
from typing import Any, Dict, List, Optional

# attribute -> label shown to the user
VEHICLE_DOCUMENTS = {
    "permit_expiry": "Permit",
    "national_permit_expiry": "National Permit",
    "pucc_expiry": "Pollution Certificate",
    "insurance_expiry": "Insurance",
}


def days_until(expiry: date, today: date) -> int:
    return (expiry - today).days


def is_expired(expiry: Optional[date], today: date) -> bool:
    return expiry is not None and days_until(expiry, today) < 0


def is_expiry_near(expiry: Optional[date], today: date, days: int = 30) -> bool:
    return expiry is not None and 0 <= days_until(expiry, today) <= days


def vehicle_document_alerts(vehicle: Any, today: date, days: int = 30) -> List[Dict[str, Any]]:
    """Documents of one vehicle that are expired or expire within `days`"""
    alerts = []
    for field, label in VEHICLE_DOCUMENTS.items():
        expiry = getattr(vehicle, field, None)
        if expiry is None:
            continue
        if is_expired(expiry, today) or is_expiry_near(expiry, today, days):
            alerts.append({
                "vehicle_id": vehicle.id,
                "license_plate": vehicle.license_plate,
                "document": label,
                "expiry_date": expiry,
                "days_remaining": days_until(expiry, today),
                "expired": is_expired(expiry, today),
            })
    return alerts
