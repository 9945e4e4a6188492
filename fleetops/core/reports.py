"""
Dashboard and report aggregates

Every call recomputes from the stored rows; nothing is cached.
"""
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from sqlalchemy import select, func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.models.user import User
from fleetops.models.vehicle import Vehicle
from fleetops.models.driver import Driver, DriverStatus
from fleetops.models.trip import Trip, TripStatus, InboundTrip, OutboundTrip
from fleetops.models.expense import Expense
from fleetops.schemas.dashboard import (
    DashboardStats,
    MonthlyFigures,
    ExpenseBreakdownEntry,
    VehiclePerformance,
    ReportResponse,
)
from fleetops.core.totals import to_decimal, TWO_PLACES

SUB_TRIP_TABLES = (InboundTrip, OutboundTrip)


def month_start(day: date) -> date:
    return day.replace(day=1)


def next_month(day: date) -> date:
    if day.month == 12:
        return date(day.year + 1, 1, 1)
    return date(day.year, day.month + 1, 1)


def previous_month(day: date) -> date:
    if day.month == 1:
        return date(day.year - 1, 12, 1)
    return date(day.year, day.month - 1, 1)


def last_months(today: date, count: int) -> List[Tuple[date, date]]:
    """[start, end) ranges for the last `count` calendar months, oldest first"""
    start = month_start(today)
    ranges = []
    for _ in range(count):
        ranges.append((start, next_month(start)))
        start = previous_month(start)
    ranges.reverse()
    return ranges


async def _count(db: AsyncSession, query) -> int:
    result = await db.execute(query)
    return result.scalar() or 0


async def fare_between(db: AsyncSession, user: User, sub_model, start: date, end: date) -> Decimal:
    """Sum of sub-trip fares for the user's trips dated in [start, end)"""
    result = await db.execute(
        select(func.coalesce(func.sum(sub_model.total_fare), 0))
        .select_from(sub_model)
        .join(Trip, Trip.id == sub_model.trip_id)
        .where(
            and_(
                Trip.user_id == user.id,
                sub_model.date >= start,
                sub_model.date < end,
            )
        )
    )
    return to_decimal(result.scalar())


async def expenses_between(db: AsyncSession, user: User, start: date, end: date) -> Decimal:
    result = await db.execute(
        select(func.coalesce(func.sum(Expense.amount), 0)).where(
            and_(Expense.user_id == user.id, Expense.date >= start, Expense.date < end)
        )
    )
    return to_decimal(result.scalar())


async def dashboard_stats(db: AsyncSession, user: User, today: Optional[date] = None) -> DashboardStats:
    """Headline counts and current-month revenue/expenses"""
    today = today or date.today()
    start, end = month_start(today), next_month(today)

    total_vehicles = await _count(
        db, select(func.count(Vehicle.id)).where(Vehicle.user_id == user.id)
    )
    active_drivers = await _count(
        db,
        select(func.count(Driver.id)).where(
            and_(Driver.user_id == user.id, Driver.status == DriverStatus.ACTIVE)
        ),
    )
    active_trips = await _count(
        db,
        select(func.count(Trip.id)).where(
            and_(Trip.user_id == user.id, Trip.status == TripStatus.ACTIVE)
        ),
    )
    inbound_revenue = await fare_between(db, user, InboundTrip, start, end)
    outbound_revenue = await fare_between(db, user, OutboundTrip, start, end)
    monthly_expenses = await expenses_between(db, user, start, end)

    return DashboardStats(
        total_vehicles=total_vehicles,
        active_drivers=active_drivers,
        active_trips=active_trips,
        monthly_inbound_revenue=float(inbound_revenue),
        monthly_outbound_revenue=float(outbound_revenue),
        monthly_revenue=float(inbound_revenue + outbound_revenue),
        monthly_expenses=float(monthly_expenses),
    )


async def expense_breakdown(db: AsyncSession, user: User, start: date, end: date) -> List[ExpenseBreakdownEntry]:
    result = await db.execute(
        select(Expense.type, func.coalesce(func.sum(Expense.amount), 0))
        .where(and_(Expense.user_id == user.id, Expense.date >= start, Expense.date < end))
        .group_by(Expense.type)
    )
    amounts = {expense_type: to_decimal(amount) for expense_type, amount in result.all()}
    total = sum(amounts.values(), Decimal("0"))

    entries = []
    for expense_type, amount in sorted(amounts.items(), key=lambda pair: pair[1], reverse=True):
        percentage = (amount * 100 / total).quantize(TWO_PLACES) if total else Decimal("0")
        entries.append(
            ExpenseBreakdownEntry(
                type=getattr(expense_type, "value", expense_type),
                amount=float(amount),
                percentage=float(percentage),
            )
        )
    return entries


async def vehicle_performance(db: AsyncSession, user: User, start: date, end: date) -> List[VehiclePerformance]:
    """Trips and revenue per vehicle for legs dated in [start, end)"""
    trips: Dict[str, set] = {}
    revenue: Dict[str, Decimal] = {}

    for sub_model in SUB_TRIP_TABLES:
        result = await db.execute(
            select(Trip.vehicle_id, Trip.id, sub_model.total_fare)
            .select_from(sub_model)
            .join(Trip, Trip.id == sub_model.trip_id)
            .where(
                and_(
                    Trip.user_id == user.id,
                    Trip.vehicle_id.is_not(None),
                    sub_model.date >= start,
                    sub_model.date < end,
                )
            )
        )
        for vehicle_id, trip_id, fare in result.all():
            trips.setdefault(vehicle_id, set()).add(trip_id)
            revenue[vehicle_id] = revenue.get(vehicle_id, Decimal("0")) + to_decimal(fare)

    if not trips:
        return []

    result = await db.execute(
        select(Vehicle.id, Vehicle.license_plate).where(Vehicle.id.in_(list(trips)))
    )
    plates = dict(result.all())

    performance = [
        VehiclePerformance(
            vehicle_id=vehicle_id,
            license_plate=plates.get(vehicle_id, ""),
            trips=len(trip_ids),
            revenue=float(revenue[vehicle_id]),
        )
        for vehicle_id, trip_ids in trips.items()
    ]
    performance.sort(key=lambda row: row.revenue, reverse=True)
    return performance


async def build_report(db: AsyncSession, user: User, months: int, today: Optional[date] = None) -> ReportResponse:
    """Revenue vs expenses per month, expense breakdown and vehicle performance"""
    today = today or date.today()
    ranges = last_months(today, months)

    monthly = []
    total_revenue = Decimal("0")
    total_expenses = Decimal("0")
    for start, end in ranges:
        revenue = sum(
            [await fare_between(db, user, sub_model, start, end) for sub_model in SUB_TRIP_TABLES],
            Decimal("0"),
        )
        expenses = await expenses_between(db, user, start, end)
        total_revenue += revenue
        total_expenses += expenses
        monthly.append(
            MonthlyFigures(
                month=start.strftime("%Y-%m"),
                revenue=float(revenue),
                expenses=float(expenses),
                profit=float(revenue - expenses),
            )
        )

    window_start, window_end = ranges[0][0], ranges[-1][1]
    return ReportResponse(
        months=months,
        total_revenue=float(total_revenue),
        total_expenses=float(total_expenses),
        net_profit=float(total_revenue - total_expenses),
        monthly=monthly,
        expense_breakdown=await expense_breakdown(db, user, window_start, window_end),
        vehicle_performance=await vehicle_performance(db, user, window_start, window_end),
    )
