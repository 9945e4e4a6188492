from datetime import date

from sqlalchemy import select, func

from conftest import register_and_login, create_vehicle, create_driver
from fleetops.core.trip_service import TripService
from fleetops.models.trip import Trip, InboundTrip, InboundTripItem, OutboundTrip, OutboundTripItem


async def start_trip(client, headers, **overrides):
    vehicle = await create_vehicle(client, headers)
    payload = {"vehicle_id": vehicle["id"]}
    payload.update(overrides)
    response = await client.post("/api/v1/trips/wizard", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def item(customer="Acme", quantity=1, rate=0, weight=0, **extra):
    row = {"customer_name": customer, "total_quantity": quantity, "fare_per_piece": rate, "total_weight": weight}
    row.update(extra)
    return row


async def test_basic_step_creates_trip(client, auth_headers):
    driver = await create_driver(client, auth_headers)
    trip = await start_trip(client, auth_headers, local_driver_id=driver["id"])

    assert trip["trip_number"].startswith("TR-")
    assert trip["status"] == "active"
    assert trip["vehicle_plate"] == "MH12AB1234"
    assert trip["local_driver_name"] == "Ramesh Kumar"
    assert trip["completed_steps"] == ["basic"]
    assert trip["inbound_trips"] == [] and trip["outbound_trips"] == []


async def test_basic_step_requires_vehicle(client, auth_headers):
    response = await client.post("/api/v1/trips/wizard", json={"local_driver_id": None}, headers=auth_headers)
    assert response.status_code == 422

    response = await client.post("/api/v1/trips/wizard", json={"vehicle_id": "missing"}, headers=auth_headers)
    assert response.status_code == 404


async def test_basic_step_rejects_another_users_vehicle(client, auth_headers):
    vehicle = await create_vehicle(client, auth_headers)
    other_headers = await register_and_login(client, email="other@example.com")

    response = await client.post("/api/v1/trips/wizard", json={"vehicle_id": vehicle["id"]}, headers=other_headers)
    assert response.status_code == 404


async def test_update_basic_step(client, auth_headers):
    trip = await start_trip(client, auth_headers, trip_number="TR-000001")
    driver = await create_driver(client, auth_headers)

    response = await client.put(
        f"/api/v1/trips/{trip['id']}/wizard/basic",
        json={"vehicle_id": trip["vehicle_id"], "route_driver_id": driver["id"], "local_driver_id": ""},
        headers=auth_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["trip_number"] == "TR-000001"
    assert body["route_driver_name"] == "Ramesh Kumar"
    assert body["local_driver_id"] is None


async def test_full_trip_scenario_updates_dashboard(client, auth_headers):
    before = (await client.get("/api/v1/dashboard", headers=auth_headers)).json()
    trip = await start_trip(client, auth_headers)

    response = await client.put(
        f"/api/v1/trips/{trip['id']}/wizard/inbound",
        json={"source": "Mumbai", "destination": "Pune", "items": [item(quantity=10, rate=50, weight=120)]},
        headers=auth_headers,
    )
    assert response.status_code == 200, response.text
    body = response.json()
    inbound = body["inbound_trips"][0]
    assert inbound["total_fare"] == 500.0
    assert inbound["total_weight"] == 120.0
    assert inbound["date"] == date.today().isoformat()
    assert inbound["items"][0]["total_price"] == 500.0

    response = await client.put(
        f"/api/v1/trips/{trip['id']}/wizard/outbound",
        json={"items": [item(customer="", receiver_name="Globex", quantity=4, rate=25, weight=30)]},
        headers=auth_headers,
    )
    assert response.status_code == 200, response.text
    body = response.json()
    outbound = body["outbound_trips"][0]
    assert outbound["total_fare"] == 100.0
    assert (outbound["source"], outbound["destination"]) == ("Pune", "Mumbai")
    assert body["inbound_total"] == 500.0
    assert body["outbound_total"] == 100.0
    assert body["grand_total"] == 600.0
    assert body["total_weight"] == 150.0
    assert body["completed_steps"] == ["basic", "inbound", "outbound"]

    after = (await client.get("/api/v1/dashboard", headers=auth_headers)).json()
    assert after["monthly_revenue"] == before["monthly_revenue"] + 600
    assert after["monthly_inbound_revenue"] == 500.0
    assert after["monthly_outbound_revenue"] == 100.0
    assert after["active_trips"] == before["active_trips"] + 1


async def test_blank_rows_are_dropped_and_serials_follow_position(client, auth_headers):
    trip = await start_trip(client, auth_headers)
    items = [
        item(customer="Acme", quantity=2, rate=10),
        item(customer="  ", quantity=99, rate=99),
        {"receiver_name": "Globex", "total_quantity": 3, "fare_per_piece": 5},
    ]
    response = await client.put(
        f"/api/v1/trips/{trip['id']}/wizard/inbound",
        json={"date": "2026-01-10", "source": "A", "destination": "B", "items": items},
        headers=auth_headers,
    )
    assert response.status_code == 200
    inbound = response.json()["inbound_trips"][0]
    assert [row["sr_no"] for row in inbound["items"]] == [1, 3]
    assert inbound["total_fare"] == 35.0
    assert inbound["date"] == "2026-01-10"


async def test_resubmitting_a_leg_replaces_its_items(client, auth_headers):
    trip = await start_trip(client, auth_headers)
    url = f"/api/v1/trips/{trip['id']}/wizard/inbound"

    await client.put(
        url,
        json={"source": "A", "destination": "B", "items": [item(quantity=1, rate=100), item(quantity=2, rate=100)]},
        headers=auth_headers,
    )
    response = await client.put(
        url,
        json={"source": "A", "destination": "C", "items": [item(quantity=5, rate=10)]},
        headers=auth_headers,
    )
    body = response.json()
    assert len(body["inbound_trips"]) == 1
    inbound = body["inbound_trips"][0]
    assert inbound["destination"] == "C"
    assert len(inbound["items"]) == 1
    assert inbound["total_fare"] == 50.0


async def test_inbound_route_is_required(client, auth_headers):
    trip = await start_trip(client, auth_headers)
    response = await client.put(
        f"/api/v1/trips/{trip['id']}/wizard/inbound",
        json={"source": "", "destination": "B", "items": []},
        headers=auth_headers,
    )
    assert response.status_code == 422


async def test_outbound_without_any_route_is_rejected(client, auth_headers):
    trip = await start_trip(client, auth_headers)
    response = await client.put(
        f"/api/v1/trips/{trip['id']}/wizard/outbound",
        json={"items": [item(quantity=1, rate=1)]},
        headers=auth_headers,
    )
    assert response.status_code == 400


async def test_leg_step_before_basic_conflicts(client, auth_headers, db_session):
    trip = await start_trip(client, auth_headers)
    stored = await db_session.get(Trip, trip["id"])
    stored.completed_steps = []
    await db_session.commit()

    response = await client.put(
        f"/api/v1/trips/{trip['id']}/wizard/inbound",
        json={"source": "A", "destination": "B", "items": []},
        headers=auth_headers,
    )
    assert response.status_code == 409


async def test_wizard_state_and_outbound_defaults(client, auth_headers):
    trip = await start_trip(client, auth_headers)
    url = f"/api/v1/trips/{trip['id']}/wizard"

    state = (await client.get(url, headers=auth_headers)).json()
    assert state["current_step"] == "inbound"
    assert state["navigable_steps"] == ["basic", "inbound", "outbound"]
    assert state["outbound_defaults"] == {"source": "", "destination": ""}

    await client.put(
        f"{url}/inbound",
        json={"source": "Mumbai", "destination": "Pune", "items": []},
        headers=auth_headers,
    )
    state = (await client.get(url, headers=auth_headers)).json()
    assert state["current_step"] == "outbound"
    assert state["outbound_defaults"] == {"source": "Pune", "destination": "Mumbai"}


async def test_outbound_resubmit_keeps_saved_route(client, auth_headers):
    trip = await start_trip(client, auth_headers)
    url = f"/api/v1/trips/{trip['id']}/wizard"
    await client.put(
        f"{url}/inbound",
        json={"source": "Pune", "destination": "Mumbai", "items": []},
        headers=auth_headers,
    )
    response = await client.put(
        f"{url}/outbound",
        json={"source": "Thane", "destination": "Nashik", "items": [item(quantity=1, rate=10)]},
        headers=auth_headers,
    )
    assert response.status_code == 200, response.text

    state = (await client.get(url, headers=auth_headers)).json()
    assert state["outbound_defaults"] == {"source": "Thane", "destination": "Nashik"}

    response = await client.put(
        f"{url}/outbound",
        json={"items": [item(quantity=2, rate=10)]},
        headers=auth_headers,
    )
    assert response.status_code == 200, response.text
    outbound = response.json()["outbound_trips"][0]
    assert (outbound["source"], outbound["destination"]) == ("Thane", "Nashik")
    assert outbound["total_fare"] == 20.0


async def test_preview_computes_without_saving(client, auth_headers):
    response = await client.post(
        "/api/v1/trips/wizard/preview",
        json={"items": [item(quantity=10, rate=50, weight=12.5), item(customer="", quantity=4, rate=25)]},
        headers=auth_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert [row["total_price"] for row in body["items"]] == [500.0, 100.0]
    assert body["total_fare"] == 500.0
    assert body["total_weight"] == 12.5


async def test_add_and_delete_items_recompute_totals(client, auth_headers):
    trip = await start_trip(client, auth_headers)
    response = await client.put(
        f"/api/v1/trips/{trip['id']}/wizard/inbound",
        json={"source": "A", "destination": "B", "items": [item(quantity=10, rate=50, weight=100)]},
        headers=auth_headers,
    )
    inbound = response.json()["inbound_trips"][0]
    items_url = f"/api/v1/trips/{trip['id']}/inbound/{inbound['id']}/items"

    response = await client.post(items_url, json=item(customer="Initech", quantity=3, rate=20, weight=15), headers=auth_headers)
    assert response.status_code == 201, response.text
    leg = response.json()
    assert leg["total_fare"] == 560.0
    assert leg["total_weight"] == 115.0
    assert [row["sr_no"] for row in leg["items"]] == [1, 2]

    first_item = leg["items"][0]["id"]
    response = await client.delete(f"{items_url}/{first_item}", headers=auth_headers)
    assert response.status_code == 200
    leg = response.json()
    assert leg["total_fare"] == 60.0
    assert leg["total_weight"] == 15.0

    response = await client.delete(f"{items_url}/{first_item}", headers=auth_headers)
    assert response.status_code == 404


async def test_add_blank_item_rejected(client, auth_headers):
    trip = await start_trip(client, auth_headers)
    response = await client.put(
        f"/api/v1/trips/{trip['id']}/wizard/inbound",
        json={"source": "A", "destination": "B", "items": []},
        headers=auth_headers,
    )
    inbound = response.json()["inbound_trips"][0]
    response = await client.post(
        f"/api/v1/trips/{trip['id']}/inbound/{inbound['id']}/items",
        json=item(customer=""),
        headers=auth_headers,
    )
    assert response.status_code == 400


async def test_items_reference_goods_types(client, auth_headers):
    goods = (await client.post("/api/v1/goods-types", json={"name": "Cartons"}, headers=auth_headers)).json()
    trip = await start_trip(client, auth_headers)

    response = await client.put(
        f"/api/v1/trips/{trip['id']}/wizard/inbound",
        json={"source": "A", "destination": "B", "items": [item(goods_type_id=goods["id"]), item(goods_type_id="")]},
        headers=auth_headers,
    )
    rows = response.json()["inbound_trips"][0]["items"]
    assert rows[0]["goods_type_name"] == "Cartons"
    assert rows[1]["goods_type_id"] is None

    response = await client.put(
        f"/api/v1/trips/{trip['id']}/wizard/inbound",
        json={"source": "A", "destination": "B", "items": [item(goods_type_id="missing")]},
        headers=auth_headers,
    )
    assert response.status_code == 404


async def test_trip_list_search_and_status(client, auth_headers):
    first = await start_trip(client, auth_headers, trip_number="TR-111111")
    vehicle = await create_vehicle(client, auth_headers, license_plate="GJ01CD5678")
    second = (await client.post(
        "/api/v1/trips/wizard",
        json={"vehicle_id": vehicle["id"], "trip_number": "TR-222222"},
        headers=auth_headers,
    )).json()
    await client.put(f"/api/v1/trips/{second['id']}/status", json={"status": "completed"}, headers=auth_headers)

    response = await client.get("/api/v1/trips", params={"search": "gj01"}, headers=auth_headers)
    assert [t["trip_number"] for t in response.json()] == ["TR-222222"]

    response = await client.get("/api/v1/trips", params={"status": "active"}, headers=auth_headers)
    assert [t["id"] for t in response.json()] == [first["id"]]

    response = await client.get("/api/v1/trips", params={"search": "111"}, headers=auth_headers)
    rows = response.json()
    assert rows[0]["inbound_total"] == 0.0 and rows[0]["outbound_total"] == 0.0


async def test_trip_list_search_by_driver_and_route(client, auth_headers):
    driver = await create_driver(client, auth_headers)
    with_driver = await start_trip(client, auth_headers, trip_number="TR-333333", route_driver_id=driver["id"])
    vehicle = await create_vehicle(client, auth_headers, license_plate="KA05EF9012")
    with_route = (await client.post(
        "/api/v1/trips/wizard",
        json={"vehicle_id": vehicle["id"], "trip_number": "TR-444444"},
        headers=auth_headers,
    )).json()
    await client.put(
        f"/api/v1/trips/{with_route['id']}/wizard/inbound",
        json={"source": "Pune", "destination": "Mumbai", "items": []},
        headers=auth_headers,
    )

    response = await client.get("/api/v1/trips", params={"search": "ramesh kumar"}, headers=auth_headers)
    assert [t["id"] for t in response.json()] == [with_driver["id"]]

    response = await client.get("/api/v1/trips", params={"search": "pune"}, headers=auth_headers)
    assert [t["id"] for t in response.json()] == [with_route["id"]]


async def test_delete_trip_removes_legs_and_items(client, auth_headers, db_session):
    trip = await start_trip(client, auth_headers)
    await client.put(
        f"/api/v1/trips/{trip['id']}/wizard/inbound",
        json={"source": "A", "destination": "B", "items": [item(quantity=1, rate=1), item(quantity=2, rate=2)]},
        headers=auth_headers,
    )
    await client.put(
        f"/api/v1/trips/{trip['id']}/wizard/outbound",
        json={"items": [item(quantity=3, rate=3)]},
        headers=auth_headers,
    )

    response = await client.delete(f"/api/v1/trips/{trip['id']}", headers=auth_headers)
    assert response.status_code == 200
    response = await client.get(f"/api/v1/trips/{trip['id']}", headers=auth_headers)
    assert response.status_code == 404

    for model in (Trip, InboundTrip, InboundTripItem, OutboundTrip, OutboundTripItem):
        count = (await db_session.execute(select(func.count()).select_from(model))).scalar()
        assert count == 0, model.__tablename__


async def test_item_failure_keeps_saved_leg_row(client, auth_headers, db_session, monkeypatch):
    trip = await start_trip(client, auth_headers)

    async def fail_replace_items(self, direction, sub_trip, items):
        raise RuntimeError("connection lost")

    monkeypatch.setattr(TripService, "replace_items", fail_replace_items)
    response = await client.put(
        f"/api/v1/trips/{trip['id']}/wizard/inbound",
        json={"source": "Pune", "destination": "Mumbai", "items": [item(quantity=1, rate=1)]},
        headers=auth_headers,
    )
    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to save inbound trip"

    count = (await db_session.execute(
        select(func.count()).select_from(InboundTrip).where(InboundTrip.trip_id == trip["id"])
    )).scalar()
    assert count == 1
    stored = await db_session.get(Trip, trip["id"])
    assert stored.completed_steps == ["basic"]
