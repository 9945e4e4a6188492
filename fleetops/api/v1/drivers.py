from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, and_
from typing import List, Optional
from fleetops.database import get_db
from fleetops.models.user import User
from fleetops.models.driver import Driver
from fleetops.models.trip import Trip
from fleetops.middleware.auth import get_current_active_user
from fleetops.schemas.driver import DriverCreate, DriverUpdate, DriverResponse
from fleetops.core.filters import filter_rows

router = APIRouter()

DRIVER_SEARCH_FIELDS = ("full_name", "email", "phone", "license_number")


async def get_owned_driver(db: AsyncSession, user: User, driver_id: str) -> Driver:
    result = await db.execute(
        select(Driver).where(and_(Driver.id == driver_id, Driver.user_id == user.id))
    )
    driver = result.scalar_one_or_none()
    if not driver:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Driver not found"
        )
    return driver


@router.get("", response_model=List[DriverResponse])
async def list_drivers(
    search: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """List drivers filtered by search term and status"""
    result = await db.execute(
        select(Driver)
        .where(Driver.user_id == current_user.id)
        .order_by(Driver.first_name, Driver.last_name)
    )
    drivers = result.scalars().all()
    return filter_rows(drivers, search=search, fields=DRIVER_SEARCH_FIELDS, status=status_filter)


@router.get("/{driver_id}", response_model=DriverResponse)
async def get_driver(
    driver_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Get driver details"""
    return await get_owned_driver(db, current_user, driver_id)


@router.post("", response_model=DriverResponse, status_code=status.HTTP_201_CREATED)
async def create_driver(
    driver_data: DriverCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Add a driver"""
    driver = Driver(user_id=current_user.id, **driver_data.model_dump())
    db.add(driver)
    await db.commit()
    await db.refresh(driver)
    return driver


@router.put("/{driver_id}", response_model=DriverResponse)
async def update_driver(
    driver_id: str,
    driver_data: DriverUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Update driver fields that were sent"""
    driver = await get_owned_driver(db, current_user, driver_id)

    for field, value in driver_data.model_dump(exclude_unset=True).items():
        setattr(driver, field, value)

    await db.commit()
    await db.refresh(driver)
    return driver


@router.delete("/{driver_id}")
async def delete_driver(
    driver_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete a driver and unassign them from trips"""
    driver = await get_owned_driver(db, current_user, driver_id)
    await db.execute(update(Trip).where(Trip.local_driver_id == driver.id).values(local_driver_id=None))
    await db.execute(update(Trip).where(Trip.route_driver_id == driver.id).values(route_driver_id=None))
    await db.delete(driver)
    await db.commit()
    return {"message": "Driver deleted successfully"}
