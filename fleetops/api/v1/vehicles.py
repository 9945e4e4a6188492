from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, and_
from typing import List, Optional
from datetime import date
from fleetops.config import get_settings
from fleetops.database import get_db
from fleetops.models.user import User
from fleetops.models.vehicle import Vehicle
from fleetops.models.trip import Trip
from fleetops.models.expense import Expense
from fleetops.middleware.auth import get_current_active_user
from fleetops.schemas.vehicle import VehicleCreate, VehicleUpdate, VehicleResponse, ExpiryAlertsResponse
from fleetops.core.filters import filter_rows
from fleetops.core.expiry import vehicle_document_alerts

settings = get_settings()

router = APIRouter()

VEHICLE_SEARCH_FIELDS = ("license_plate", "vehicle_owner", "fuel_type")


async def get_owned_vehicle(db: AsyncSession, user: User, vehicle_id: str) -> Vehicle:
    result = await db.execute(
        select(Vehicle).where(and_(Vehicle.id == vehicle_id, Vehicle.user_id == user.id))
    )
    vehicle = result.scalar_one_or_none()
    if not vehicle:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Vehicle not found"
        )
    return vehicle


async def ensure_plate_available(db: AsyncSession, user: User, license_plate: str, exclude_id: Optional[str] = None):
    query = select(Vehicle.id).where(
        and_(Vehicle.user_id == user.id, Vehicle.license_plate == license_plate)
    )
    if exclude_id:
        query = query.where(Vehicle.id != exclude_id)
    result = await db.execute(query)
    if result.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Vehicle {license_plate} is already registered"
        )


@router.get("", response_model=List[VehicleResponse])
async def list_vehicles(
    search: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """List vehicles filtered by search term and status"""
    result = await db.execute(
        select(Vehicle)
        .where(Vehicle.user_id == current_user.id)
        .order_by(Vehicle.created_at.desc())
    )
    vehicles = result.scalars().all()
    return filter_rows(vehicles, search=search, fields=VEHICLE_SEARCH_FIELDS, status=status_filter)


@router.get("/expiry-alerts", response_model=ExpiryAlertsResponse)
async def list_expiry_alerts(
    days: Optional[int] = Query(None, ge=0, le=365),
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Permits, pollution certificates and insurance that expired or expire soon"""
    window = days if days is not None else settings.EXPIRY_ALERT_DAYS
    result = await db.execute(
        select(Vehicle)
        .where(Vehicle.user_id == current_user.id)
        .order_by(Vehicle.license_plate)
    )
    today = date.today()
    alerts = []
    for vehicle in result.scalars().all():
        alerts.extend(vehicle_document_alerts(vehicle, today, window))
    alerts.sort(key=lambda alert: alert["days_remaining"])
    return ExpiryAlertsResponse(days=window, alerts=alerts)


@router.get("/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(
    vehicle_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Get vehicle details"""
    return await get_owned_vehicle(db, current_user, vehicle_id)


@router.post("", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    vehicle_data: VehicleCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Add a vehicle to the fleet"""
    await ensure_plate_available(db, current_user, vehicle_data.license_plate)

    vehicle = Vehicle(user_id=current_user.id, **vehicle_data.model_dump())
    db.add(vehicle)
    await db.commit()
    await db.refresh(vehicle)
    return vehicle


@router.put("/{vehicle_id}", response_model=VehicleResponse)
async def update_vehicle(
    vehicle_id: str,
    vehicle_data: VehicleUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Update vehicle fields that were sent"""
    vehicle = await get_owned_vehicle(db, current_user, vehicle_id)
    changes = vehicle_data.model_dump(exclude_unset=True)

    if changes.get("license_plate") and changes["license_plate"] != vehicle.license_plate:
        await ensure_plate_available(db, current_user, changes["license_plate"], exclude_id=vehicle.id)

    for field, value in changes.items():
        setattr(vehicle, field, value)

    await db.commit()
    await db.refresh(vehicle)
    return vehicle


@router.delete("/{vehicle_id}")
async def delete_vehicle(
    vehicle_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete a vehicle; trips and expenses keep their rows without it"""
    vehicle = await get_owned_vehicle(db, current_user, vehicle_id)
    await db.execute(update(Trip).where(Trip.vehicle_id == vehicle.id).values(vehicle_id=None))
    await db.execute(update(Expense).where(Expense.vehicle_id == vehicle.id).values(vehicle_id=None))
    await db.delete(vehicle)
    await db.commit()
    return {"message": "Vehicle deleted successfully"}
