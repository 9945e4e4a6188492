"""
Trip persistence: wizard steps, sub-trip items and aggregate totals

Each wizard step is a short sequence of commits (sub-trip row, items,
wizard progress). A failure part way through leaves the earlier commits
in place; the caller reports the failure and the user resubmits.
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple
from fastapi import HTTPException, status
from sqlalchemy import select, delete, func, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fleetops.models.user import User
from fleetops.models.vehicle import Vehicle
from fleetops.models.driver import Driver
from fleetops.models.goods_type import GoodsType
from fleetops.models.trip import (
    Trip,
    TripStatus,
    TripDirection,
    InboundTrip,
    InboundTripItem,
    OutboundTrip,
    OutboundTripItem,
    SUB_TRIP_MODELS,
)
from fleetops.schemas.trip import TripBasicRequest, TripItemIn
from fleetops.core.totals import is_valid_item, line_total
from fleetops.core.wizard import TripWizard, WizardStep, generate_trip_number, prefill_outbound_route
import logging

logger = logging.getLogger(__name__)

DIRECTION_STEPS = {
    TripDirection.INBOUND: WizardStep.INBOUND,
    TripDirection.OUTBOUND: WizardStep.OUTBOUND,
}


def trip_load_options():
    """Eager loads for a full trip view; async sessions cannot lazy load"""
    return [
        selectinload(Trip.vehicle),
        selectinload(Trip.local_driver),
        selectinload(Trip.route_driver),
        selectinload(Trip.inbound_trips)
        .selectinload(InboundTrip.items)
        .selectinload(InboundTripItem.goods_type),
        selectinload(Trip.outbound_trips)
        .selectinload(OutboundTrip.items)
        .selectinload(OutboundTripItem.goods_type),
    ]


class TripService:
    """Trip operations scoped to one signed-in user"""

    def __init__(self, db: AsyncSession, user: User):
        self.db = db
        self.user = user

    # Lookups

    async def get_trip(self, trip_id: str) -> Trip:
        result = await self.db.execute(
            select(Trip)
            .where(and_(Trip.id == trip_id, Trip.user_id == self.user.id))
            .options(*trip_load_options())
            .execution_options(populate_existing=True)
        )
        trip = result.scalar_one_or_none()
        if not trip:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Trip not found"
            )
        return trip

    async def list_trips(self) -> List[Trip]:
        result = await self.db.execute(
            select(Trip)
            .where(Trip.user_id == self.user.id)
            .options(
                selectinload(Trip.vehicle),
                selectinload(Trip.local_driver),
                selectinload(Trip.route_driver),
                selectinload(Trip.inbound_trips),
                selectinload(Trip.outbound_trips),
            )
            .order_by(Trip.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_sub_trip(self, trip: Trip, direction: TripDirection, sub_trip_id: str):
        sub_model, _, _ = SUB_TRIP_MODELS[direction]
        result = await self.db.execute(
            select(sub_model).where(and_(sub_model.id == sub_trip_id, sub_model.trip_id == trip.id))
        )
        sub_trip = result.scalar_one_or_none()
        if not sub_trip:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{direction.value.capitalize()} trip not found"
            )
        return sub_trip

    async def _ensure_owned(self, model, record_id: Optional[str], label: str):
        if not record_id:
            return
        result = await self.db.execute(
            select(model.id).where(and_(model.id == record_id, model.user_id == self.user.id))
        )
        if result.first() is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{label} not found"
            )

    async def _ensure_basic_references(self, data: TripBasicRequest):
        await self._ensure_owned(Vehicle, data.vehicle_id, "Vehicle")
        await self._ensure_owned(Driver, data.local_driver_id, "Local driver")
        await self._ensure_owned(Driver, data.route_driver_id, "Route driver")

    async def _ensure_goods_types(self, items: List[TripItemIn]):
        for goods_type_id in {item.goods_type_id for item in items if item.goods_type_id}:
            await self._ensure_owned(GoodsType, goods_type_id, "Goods type")

    # Step 1: basic details

    async def create_basic(self, data: TripBasicRequest) -> Trip:
        await self._ensure_basic_references(data)

        wizard = TripWizard()
        wizard.complete(WizardStep.BASIC)

        trip = Trip(
            user_id=self.user.id,
            trip_number=data.trip_number or generate_trip_number(),
            vehicle_id=data.vehicle_id,
            local_driver_id=data.local_driver_id,
            route_driver_id=data.route_driver_id,
            status=data.status,
            completed_steps=wizard.to_list(),
        )
        self.db.add(trip)
        await self.db.commit()

        logger.info(f"Created trip {trip.id} ({trip.trip_number}) for user {self.user.id}")
        return await self.get_trip(trip.id)

    async def update_basic(self, trip: Trip, data: TripBasicRequest) -> Trip:
        await self._ensure_basic_references(data)

        wizard = TripWizard(trip.completed_steps)
        wizard.complete(WizardStep.BASIC)

        if data.trip_number:
            trip.trip_number = data.trip_number
        trip.vehicle_id = data.vehicle_id
        trip.local_driver_id = data.local_driver_id
        trip.route_driver_id = data.route_driver_id
        trip.status = data.status
        trip.completed_steps = wizard.to_list()
        await self.db.commit()

        return await self.get_trip(trip.id)

    async def set_status(self, trip: Trip, new_status: TripStatus) -> Trip:
        trip.status = new_status
        await self.db.commit()
        return await self.get_trip(trip.id)

    # Steps 2 and 3: inbound / outbound legs

    def outbound_defaults(self, trip: Trip) -> Tuple[str, str]:
        """Outbound route pre-fill: the saved outbound route, else the inbound leg reversed"""
        inbound = trip.inbound_trips[0] if trip.inbound_trips else None
        existing = trip.outbound_trips[0] if trip.outbound_trips else None
        return prefill_outbound_route(
            inbound.source if inbound else None,
            inbound.destination if inbound else None,
            existing.source if existing else None,
            existing.destination if existing else None,
        )

    async def save_leg(
        self,
        trip: Trip,
        direction: TripDirection,
        leg_date: Optional[date],
        source: Optional[str],
        destination: Optional[str],
        items: List[TripItemIn],
    ):
        """
        Create or update the trip's sub-trip for one direction, replace its
        items with the valid submitted rows and recompute its totals.
        """
        wizard = TripWizard(trip.completed_steps)
        step = wizard.enter(DIRECTION_STEPS[direction])

        if direction == TripDirection.OUTBOUND:
            # Omitted fields keep the saved outbound route, else the inbound leg reversed
            default_source, default_destination = self.outbound_defaults(trip)
            source = source or default_source
            destination = destination or default_destination
        if not source or not destination:
            raise ValueError("Source and destination are required")

        await self._ensure_goods_types(items)

        sub_model, _, _ = SUB_TRIP_MODELS[direction]
        existing = trip.inbound_trips if direction == TripDirection.INBOUND else trip.outbound_trips
        sub_trip = existing[0] if existing else None

        # 1. sub-trip row
        if sub_trip is None:
            sub_trip = sub_model(
                trip_id=trip.id,
                date=leg_date or date.today(),
                source=source,
                destination=destination,
                total_weight=Decimal("0"),
                total_fare=Decimal("0"),
            )
            self.db.add(sub_trip)
        else:
            sub_trip.date = leg_date or sub_trip.date
            sub_trip.source = source
            sub_trip.destination = destination
        await self.db.commit()

        # 2. items and totals
        await self.replace_items(direction, sub_trip, items)
        await self.db.commit()

        # 3. wizard progress
        wizard.complete(step)
        trip.completed_steps = wizard.to_list()
        await self.db.commit()

        logger.info(
            f"Saved {direction.value} leg {sub_trip.id} of trip {trip.id}: "
            f"weight={sub_trip.total_weight} fare={sub_trip.total_fare}"
        )
        return sub_trip

    # Items

    def _build_item(self, direction: TripDirection, sub_trip_id: str, item: TripItemIn, sr_no: int):
        _, item_model, fk = SUB_TRIP_MODELS[direction]
        return item_model(
            **{fk: sub_trip_id},
            sr_no=sr_no,
            customer_name=item.customer_name.strip(),
            receiver_name=item.receiver_name.strip(),
            goods_type_id=item.goods_type_id,
            total_weight=item.total_weight,
            total_quantity=item.total_quantity,
            fare_per_piece=item.fare_per_piece,
            total_price=line_total(item.total_quantity, item.fare_per_piece),
        )

    async def replace_items(self, direction: TripDirection, sub_trip, items: List[TripItemIn]) -> int:
        """Swap the sub-trip's items for the valid submitted rows"""
        _, item_model, fk = SUB_TRIP_MODELS[direction]

        await self.db.execute(
            delete(item_model)
            .where(getattr(item_model, fk) == sub_trip.id)
            .execution_options(synchronize_session=False)
        )

        # Serial numbers follow the submitted row positions, blanks included
        new_items = [
            self._build_item(direction, sub_trip.id, item, item.sr_no or position)
            for position, item in enumerate(items, start=1)
            if is_valid_item(item.customer_name, item.receiver_name)
        ]
        self.db.add_all(new_items)
        await self.recompute_totals(direction, sub_trip)
        return len(new_items)

    async def add_item(self, direction: TripDirection, sub_trip, item: TripItemIn):
        if not is_valid_item(item.customer_name, item.receiver_name):
            raise ValueError("Customer or receiver name is required")
        await self._ensure_goods_types([item])

        _, item_model, fk = SUB_TRIP_MODELS[direction]
        sr_no = item.sr_no
        if sr_no is None:
            result = await self.db.execute(
                select(func.coalesce(func.max(item_model.sr_no), 0))
                .where(getattr(item_model, fk) == sub_trip.id)
            )
            sr_no = result.scalar() + 1

        new_item = self._build_item(direction, sub_trip.id, item, sr_no)
        self.db.add(new_item)
        await self.recompute_totals(direction, sub_trip)
        await self.db.commit()
        return new_item

    async def delete_item(self, direction: TripDirection, sub_trip, item_id: str):
        _, item_model, fk = SUB_TRIP_MODELS[direction]
        item_filter = and_(item_model.id == item_id, getattr(item_model, fk) == sub_trip.id)
        result = await self.db.execute(select(item_model.id).where(item_filter))
        if result.first() is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Trip item not found"
            )

        await self.db.execute(
            delete(item_model).where(item_filter).execution_options(synchronize_session=False)
        )
        await self.recompute_totals(direction, sub_trip)
        await self.db.commit()

    async def recompute_totals(self, direction: TripDirection, sub_trip):
        """Set sub-trip weight/fare to the sums over its stored items"""
        _, item_model, fk = SUB_TRIP_MODELS[direction]
        await self.db.flush()

        result = await self.db.execute(
            select(
                func.coalesce(func.sum(item_model.total_weight), 0),
                func.coalesce(func.sum(item_model.total_price), 0),
            ).where(getattr(item_model, fk) == sub_trip.id)
        )
        total_weight, total_fare = result.one()
        sub_trip.total_weight = Decimal(str(total_weight))
        sub_trip.total_fare = Decimal(str(total_fare))
        await self.db.flush()

    # Deletion

    async def delete_trip(self, trip: Trip):
        """Delete the trip with its sub-trips and their items"""
        inbound_ids = select(InboundTrip.id).where(InboundTrip.trip_id == trip.id)
        outbound_ids = select(OutboundTrip.id).where(OutboundTrip.trip_id == trip.id)

        statements = [
            delete(InboundTripItem).where(InboundTripItem.inbound_trip_id.in_(inbound_ids)),
            delete(OutboundTripItem).where(OutboundTripItem.outbound_trip_id.in_(outbound_ids)),
            delete(InboundTrip).where(InboundTrip.trip_id == trip.id),
            delete(OutboundTrip).where(OutboundTrip.trip_id == trip.id),
            delete(Trip).where(Trip.id == trip.id),
        ]
        for statement in statements:
            await self.db.execute(statement.execution_options(synchronize_session=False))
        await self.db.commit()

        logger.info(f"Deleted trip {trip.id} with its inbound and outbound legs")
