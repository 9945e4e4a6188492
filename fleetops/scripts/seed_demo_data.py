"""
Script to seed demo fleet data for a user
Run with: python -m fleetops.scripts.seed_demo_data [email]
"""
import asyncio
import sys
from datetime import date, timedelta
from decimal import Decimal
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.database import AsyncSessionLocal, init_db
from fleetops.models.user import User, UserStatus
from fleetops.models.vehicle import Vehicle, FuelType, VehicleStatus
from fleetops.models.driver import Driver, DriverStatus
from fleetops.models.goods_type import GoodsType
from fleetops.models.expense import Expense, ExpenseType
from fleetops.core.security import get_password_hash

DEFAULT_GOODS_TYPES = ["Cartons", "Electronics", "Furniture", "Grocery", "Textiles"]


async def seed_demo_data(db: AsyncSession, user: User) -> dict:
    """Seed goods types, vehicles, drivers and an expense; returns counts created"""
    created = {"goods_types": 0, "vehicles": 0, "drivers": 0, "expenses": 0}
    today = date.today()

    result = await db.execute(select(GoodsType.name).where(GoodsType.user_id == user.id))
    existing_names = {name.lower() for name in result.scalars().all()}
    for name in DEFAULT_GOODS_TYPES:
        if name.lower() not in existing_names:
            db.add(GoodsType(user_id=user.id, name=name))
            created["goods_types"] += 1

    result = await db.execute(select(Vehicle.license_plate).where(Vehicle.user_id == user.id))
    existing_plates = set(result.scalars().all())
    vehicles = [
        Vehicle(
            user_id=user.id,
            license_plate="MH12AB1234",
            vehicle_owner="Sharma Transport",
            fuel_type=FuelType.DIESEL,
            financed=True,
            emi_amount=Decimal("25000.00"),
            emi_date=today.replace(day=5),
            permit_expiry=today + timedelta(days=20),
            national_permit_expiry=today + timedelta(days=200),
            pucc_expiry=today + timedelta(days=90),
            insurance_expiry=today + timedelta(days=15),
            status=VehicleStatus.ACTIVE,
            mileage=84000,
        ),
        Vehicle(
            user_id=user.id,
            license_plate="GJ01CD5678",
            vehicle_owner="Patel Logistics",
            fuel_type=FuelType.CNG,
            financed=False,
            permit_expiry=today + timedelta(days=365),
            pucc_expiry=today - timedelta(days=3),
            insurance_expiry=today + timedelta(days=120),
            status=VehicleStatus.MAINTENANCE,
            mileage=52000,
        ),
    ]
    seeded_vehicles = []
    for vehicle in vehicles:
        if vehicle.license_plate not in existing_plates:
            db.add(vehicle)
            seeded_vehicles.append(vehicle)
            created["vehicles"] += 1

    result = await db.execute(select(Driver.license_number).where(Driver.user_id == user.id))
    existing_licences = set(result.scalars().all())
    drivers = [
        Driver(
            user_id=user.id,
            first_name="Ramesh",
            last_name="Kumar",
            phone="+91 9876543210",
            license_number="MH1220190012345",
            joining_date=today - timedelta(days=700),
            age=38,
            salary=Decimal("28000.00"),
            experience=12,
            city="Pune",
            state="Maharashtra",
            status=DriverStatus.ACTIVE,
        ),
        Driver(
            user_id=user.id,
            first_name="Suresh",
            last_name="Yadav",
            phone="+91 9123456780",
            license_number="GJ0120180067890",
            joining_date=today - timedelta(days=300),
            age=31,
            salary=Decimal("24000.00"),
            experience=6,
            city="Ahmedabad",
            state="Gujarat",
            status=DriverStatus.ON_LEAVE,
        ),
    ]
    for driver in drivers:
        if driver.license_number not in existing_licences:
            db.add(driver)
            created["drivers"] += 1

    if seeded_vehicles:
        await db.flush()
        db.add(
            Expense(
                user_id=user.id,
                vehicle_id=seeded_vehicles[0].id,
                type=ExpenseType.FUEL,
                amount=Decimal("4500.00"),
                description=f"Diesel refill for {seeded_vehicles[0].license_plate}",
                date=today,
            )
        )
        created["expenses"] += 1

    await db.commit()
    return created


async def seed_data(email: str = "demo@fleetops.local"):
    """Seed demo data for the given user, creating the user if needed"""
    print("Seeding demo data...")
    await init_db()

    async with AsyncSessionLocal() as db:
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if not user:
            print(f"Creating demo user {email}...")
            user = User(
                email=email,
                password_hash=get_password_hash("demo123"),
                full_name="Demo Operator",
                company_name="Demo Fleet",
                status=UserStatus.ACTIVE,
            )
            db.add(user)
            await db.commit()
            await db.refresh(user)

        created = await seed_demo_data(db, user)
        print(f"Done: {created}")


if __name__ == "__main__":
    asyncio.run(seed_data(*sys.argv[1:2]))
