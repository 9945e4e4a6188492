from datetime import date

from conftest import create_vehicle, create_driver
from fleetops.core.reports import last_months, next_month, previous_month


def test_month_helpers():
    assert next_month(date(2026, 12, 20)) == date(2027, 1, 1)
    assert previous_month(date(2026, 1, 5)) == date(2025, 12, 1)
    assert last_months(date(2026, 2, 14), 3) == [
        (date(2025, 12, 1), date(2026, 1, 1)),
        (date(2026, 1, 1), date(2026, 2, 1)),
        (date(2026, 2, 1), date(2026, 3, 1)),
    ]


async def test_empty_dashboard(client, auth_headers):
    response = await client.get("/api/v1/dashboard", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {
        "total_vehicles": 0,
        "active_drivers": 0,
        "active_trips": 0,
        "monthly_inbound_revenue": 0.0,
        "monthly_outbound_revenue": 0.0,
        "monthly_revenue": 0.0,
        "monthly_expenses": 0.0,
    }


async def test_dashboard_counts(client, auth_headers):
    await create_vehicle(client, auth_headers)
    await create_vehicle(client, auth_headers, license_plate="GJ01CD5678")
    await create_driver(client, auth_headers)
    await create_driver(client, auth_headers, license_number="DL-002", status="inactive")
    await client.post(
        "/api/v1/expenses",
        json={"type": "fuel", "amount": 800, "description": "Diesel", "date": date.today().isoformat()},
        headers=auth_headers,
    )
    await client.post(
        "/api/v1/expenses",
        json={"type": "fuel", "amount": 300, "description": "Old bill", "date": "2000-01-01"},
        headers=auth_headers,
    )

    body = (await client.get("/api/v1/dashboard", headers=auth_headers)).json()
    assert body["total_vehicles"] == 2
    assert body["active_drivers"] == 1
    assert body["monthly_expenses"] == 800.0


async def test_reports(client, auth_headers):
    vehicle = await create_vehicle(client, auth_headers)
    trip = (await client.post("/api/v1/trips/wizard", json={"vehicle_id": vehicle["id"]}, headers=auth_headers)).json()
    await client.put(
        f"/api/v1/trips/{trip['id']}/wizard/inbound",
        json={
            "source": "Mumbai",
            "destination": "Pune",
            "items": [{"customer_name": "Acme", "total_quantity": 10, "fare_per_piece": 50}],
        },
        headers=auth_headers,
    )
    today = date.today().isoformat()
    for expense_type, amount in (("fuel", 150), ("tolls", 50)):
        await client.post(
            "/api/v1/expenses",
            json={"type": expense_type, "amount": amount, "description": expense_type, "date": today},
            headers=auth_headers,
        )

    response = await client.get("/api/v1/reports", params={"months": 3}, headers=auth_headers)
    assert response.status_code == 200
    body = response.json()

    assert body["months"] == 3
    assert len(body["monthly"]) == 3
    current = body["monthly"][-1]
    assert current["month"] == date.today().strftime("%Y-%m")
    assert (current["revenue"], current["expenses"], current["profit"]) == (500.0, 200.0, 300.0)
    assert body["net_profit"] == 300.0

    assert body["expense_breakdown"] == [
        {"type": "fuel", "amount": 150.0, "percentage": 75.0},
        {"type": "tolls", "amount": 50.0, "percentage": 25.0},
    ]
    assert body["vehicle_performance"] == [
        {"vehicle_id": vehicle["id"], "license_plate": "MH12AB1234", "trips": 1, "revenue": 500.0},
    ]


async def test_reports_months_bounds(client, auth_headers):
    response = await client.get("/api/v1/reports", params={"months": 0}, headers=auth_headers)
    assert response.status_code == 422
