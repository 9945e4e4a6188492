from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, Integer, Date, Numeric, Boolean, UniqueConstraint
from sqlalchemy.sql import func
import enum
from fleetops.database import Base
import uuid


class FuelType(str, enum.Enum):
    CNG = "CNG"
    DIESEL = "Diesel"
    BIO_DIESEL = "Bio Diesel"
    OTHER = "Other"


class VehicleStatus(str, enum.Enum):
    ACTIVE = "active"
    MAINTENANCE = "maintenance"
    INACTIVE = "inactive"


class Vehicle(Base):
    __tablename__ = "vehicles"
    __table_args__ = (
        UniqueConstraint("user_id", "license_plate", name="uq_vehicles_user_plate"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    license_plate = Column(String(20), nullable=False, index=True)
    vehicle_owner = Column(String, nullable=False)
    fuel_type = Column(Enum(FuelType), nullable=False, default=FuelType.DIESEL)

    # Financing
    financed = Column(Boolean, nullable=False, default=False)
    emi_amount = Column(Numeric(12, 2), nullable=True)
    emi_date = Column(Date, nullable=True)

    # Document expiry dates
    permit_expiry = Column(Date, nullable=True)
    national_permit_expiry = Column(Date, nullable=True)
    pucc_expiry = Column(Date, nullable=True)  # pollution certificate
    insurance_expiry = Column(Date, nullable=True)

    status = Column(Enum(VehicleStatus), nullable=False, default=VehicleStatus.ACTIVE, index=True)
    mileage = Column(Integer, nullable=True)
    last_service = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())
