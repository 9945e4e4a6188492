from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from fleetops.database import get_db
from fleetops.models.user import User
from fleetops.models.trip import Trip, TripDirection
from fleetops.middleware.auth import get_current_active_user
from fleetops.schemas.trip import (
    TripItemIn,
    TripItemResponse,
    TripBasicRequest,
    InboundStepRequest,
    OutboundStepRequest,
    TripStatusUpdate,
    ItemsPreviewRequest,
    ItemPreviewRow,
    ItemsPreviewResponse,
    SubTripResponse,
    RouteDefaults,
    WizardStateResponse,
    TripSummaryResponse,
    TripDetailResponse,
)
from fleetops.core.filters import filter_rows
from fleetops.core.totals import to_decimal, line_total, route_totals, is_valid_item
from fleetops.core.wizard import TripWizard, WizardStepError
from fleetops.core.trip_service import TripService
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def _vehicle_plate(trip: Trip) -> Optional[str]:
    return trip.vehicle.license_plate if trip.vehicle else None


def _driver_names(trip: Trip) -> str:
    drivers = (trip.local_driver, trip.route_driver)
    return " | ".join(driver.full_name for driver in drivers if driver)


def _route_places(trip: Trip) -> str:
    legs = list(trip.inbound_trips) + list(trip.outbound_trips)
    return " | ".join(place for leg in legs for place in (leg.source, leg.destination))


TRIP_SEARCH_FIELDS = ("trip_number", _vehicle_plate, _driver_names, _route_places)


def _fare_sum(sub_trips) -> float:
    return float(sum((to_decimal(sub_trip.total_fare) for sub_trip in sub_trips), to_decimal(0)))


def to_item_response(item) -> TripItemResponse:
    return TripItemResponse(
        id=item.id,
        sr_no=item.sr_no,
        customer_name=item.customer_name,
        receiver_name=item.receiver_name,
        goods_type_id=item.goods_type_id,
        goods_type_name=item.goods_type.name if item.goods_type else None,
        total_weight=float(item.total_weight or 0),
        total_quantity=item.total_quantity or 0,
        fare_per_piece=float(item.fare_per_piece or 0),
        total_price=float(item.total_price or 0),
    )


def to_sub_trip_response(sub_trip) -> SubTripResponse:
    return SubTripResponse(
        id=sub_trip.id,
        trip_id=sub_trip.trip_id,
        date=sub_trip.date,
        source=sub_trip.source,
        destination=sub_trip.destination,
        total_weight=float(sub_trip.total_weight or 0),
        total_fare=float(sub_trip.total_fare or 0),
        items=[to_item_response(item) for item in sub_trip.items],
    )


def to_summary(trip: Trip) -> TripSummaryResponse:
    return TripSummaryResponse(
        id=trip.id,
        trip_number=trip.trip_number,
        status=trip.status,
        vehicle_id=trip.vehicle_id,
        vehicle_plate=_vehicle_plate(trip),
        local_driver_id=trip.local_driver_id,
        route_driver_id=trip.route_driver_id,
        completed_steps=list(trip.completed_steps or []),
        inbound_total=_fare_sum(trip.inbound_trips),
        outbound_total=_fare_sum(trip.outbound_trips),
        created_at=trip.created_at,
    )


def to_detail(trip: Trip) -> TripDetailResponse:
    summary = to_summary(trip)
    sub_trips = list(trip.inbound_trips) + list(trip.outbound_trips)
    total_weight = sum((to_decimal(sub_trip.total_weight) for sub_trip in sub_trips), to_decimal(0))
    return TripDetailResponse(
        **summary.model_dump(),
        local_driver_name=trip.local_driver.full_name if trip.local_driver else None,
        route_driver_name=trip.route_driver.full_name if trip.route_driver else None,
        grand_total=summary.inbound_total + summary.outbound_total,
        total_weight=float(total_weight),
        inbound_trips=[to_sub_trip_response(sub_trip) for sub_trip in trip.inbound_trips],
        outbound_trips=[to_sub_trip_response(sub_trip) for sub_trip in trip.outbound_trips],
    )


def to_wizard_state(service: TripService, trip: Trip) -> WizardStateResponse:
    wizard = TripWizard(trip.completed_steps)
    source, destination = service.outbound_defaults(trip)
    return WizardStateResponse(
        trip_id=trip.id,
        current_step=wizard.current_step.value,
        completed_steps=wizard.to_list(),
        navigable_steps=[step.value for step in wizard.navigable_steps],
        outbound_defaults=RouteDefaults(source=source, destination=destination),
    )


def step_failed(action: str, error: Exception) -> HTTPException:
    """Map a failure inside a wizard/item operation to an HTTP error"""
    if isinstance(error, WizardStepError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    if isinstance(error, ValueError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    logger.error(f"Failed to {action}: {error}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}"
    )


# Trip list / detail

@router.get("", response_model=List[TripSummaryResponse])
async def list_trips(
    search: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """List trips filtered by trip number / vehicle plate and status"""
    trips = await TripService(db, current_user).list_trips()
    trips = filter_rows(trips, search=search, fields=TRIP_SEARCH_FIELDS, status=status_filter)
    return [to_summary(trip) for trip in trips]


@router.post("/wizard", response_model=TripDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    basic: TripBasicRequest,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Wizard step 1: create the trip with its vehicle and drivers"""
    service = TripService(db, current_user)
    try:
        trip = await service.create_basic(basic)
    except HTTPException:
        raise
    except Exception as e:
        raise step_failed("create trip", e)
    return to_detail(trip)


@router.post("/wizard/preview", response_model=ItemsPreviewResponse)
async def preview_items(
    preview: ItemsPreviewRequest,
    current_user: User = Depends(get_current_active_user),
):
    """Row and route totals for an unsaved item list"""
    rows = [
        ItemPreviewRow(
            sr_no=item.sr_no or position,
            total_quantity=item.total_quantity,
            fare_per_piece=float(item.fare_per_piece),
            total_price=float(line_total(item.total_quantity, item.fare_per_piece)),
        )
        for position, item in enumerate(preview.items, start=1)
    ]
    totals = route_totals(
        item for item in preview.items if is_valid_item(item.customer_name, item.receiver_name)
    )
    return ItemsPreviewResponse(
        items=rows,
        total_weight=float(totals.total_weight),
        total_fare=float(totals.total_fare),
    )


@router.get("/{trip_id}", response_model=TripDetailResponse)
async def get_trip(
    trip_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Trip detail with vehicle, drivers, legs, items and totals"""
    trip = await TripService(db, current_user).get_trip(trip_id)
    return to_detail(trip)


@router.put("/{trip_id}/status", response_model=TripDetailResponse)
async def update_trip_status(
    trip_id: str,
    status_update: TripStatusUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Mark a trip active, completed or cancelled"""
    service = TripService(db, current_user)
    trip = await service.get_trip(trip_id)
    trip = await service.set_status(trip, status_update.status)
    return to_detail(trip)


@router.delete("/{trip_id}")
async def delete_trip(
    trip_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete a trip together with its legs and their items"""
    service = TripService(db, current_user)
    trip = await service.get_trip(trip_id)
    try:
        await service.delete_trip(trip)
    except Exception as e:
        raise step_failed("delete trip", e)
    return {"message": "Trip deleted successfully"}


# Wizard

@router.get("/{trip_id}/wizard", response_model=WizardStateResponse)
async def get_wizard_state(
    trip_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Current step, completed steps and the outbound route pre-fill"""
    service = TripService(db, current_user)
    trip = await service.get_trip(trip_id)
    return to_wizard_state(service, trip)


@router.put("/{trip_id}/wizard/basic", response_model=TripDetailResponse)
async def update_basic_step(
    trip_id: str,
    basic: TripBasicRequest,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Wizard step 1: update vehicle, drivers and status"""
    service = TripService(db, current_user)
    trip = await service.get_trip(trip_id)
    try:
        trip = await service.update_basic(trip, basic)
    except HTTPException:
        raise
    except Exception as e:
        raise step_failed("update trip details", e)
    return to_detail(trip)


@router.put("/{trip_id}/wizard/inbound", response_model=TripDetailResponse)
async def save_inbound_step(
    trip_id: str,
    step: InboundStepRequest,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Wizard step 2: inbound route and items"""
    service = TripService(db, current_user)
    trip = await service.get_trip(trip_id)
    try:
        await service.save_leg(
            trip, TripDirection.INBOUND, step.date, step.source, step.destination, step.items
        )
    except HTTPException:
        raise
    except Exception as e:
        raise step_failed("save inbound trip", e)
    return to_detail(await service.get_trip(trip_id))


@router.put("/{trip_id}/wizard/outbound", response_model=TripDetailResponse)
async def save_outbound_step(
    trip_id: str,
    step: OutboundStepRequest,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Wizard step 3: outbound route (defaults to inbound reversed) and items"""
    service = TripService(db, current_user)
    trip = await service.get_trip(trip_id)
    try:
        await service.save_leg(
            trip, TripDirection.OUTBOUND, step.date, step.source, step.destination, step.items
        )
    except HTTPException:
        raise
    except Exception as e:
        raise step_failed("save outbound trip", e)
    return to_detail(await service.get_trip(trip_id))


# Items

@router.post(
    "/{trip_id}/{direction}/{sub_trip_id}/items",
    response_model=SubTripResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_trip_item(
    trip_id: str,
    direction: TripDirection,
    sub_trip_id: str,
    item: TripItemIn,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Add one item to a leg and recompute the leg totals"""
    service = TripService(db, current_user)
    trip = await service.get_trip(trip_id)
    sub_trip = await service.get_sub_trip(trip, direction, sub_trip_id)
    try:
        await service.add_item(direction, sub_trip, item)
    except HTTPException:
        raise
    except Exception as e:
        raise step_failed(f"add {direction.value} item", e)
    return _leg_response(await service.get_trip(trip_id), direction, sub_trip_id)


@router.delete("/{trip_id}/{direction}/{sub_trip_id}/items/{item_id}", response_model=SubTripResponse)
async def delete_trip_item(
    trip_id: str,
    direction: TripDirection,
    sub_trip_id: str,
    item_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Remove one item from a leg and recompute the leg totals"""
    service = TripService(db, current_user)
    trip = await service.get_trip(trip_id)
    sub_trip = await service.get_sub_trip(trip, direction, sub_trip_id)
    try:
        await service.delete_item(direction, sub_trip, item_id)
    except HTTPException:
        raise
    except Exception as e:
        raise step_failed(f"delete {direction.value} item", e)
    return _leg_response(await service.get_trip(trip_id), direction, sub_trip_id)


def _leg_response(trip: Trip, direction: TripDirection, sub_trip_id: str) -> SubTripResponse:
    legs = trip.inbound_trips if direction == TripDirection.INBOUND else trip.outbound_trips
    for leg in legs:
        if leg.id == sub_trip_id:
            return to_sub_trip_response(leg)
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{direction.value.capitalize()} trip not found"
    )
