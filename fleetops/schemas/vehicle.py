from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal
from fleetops.models.vehicle import FuelType, VehicleStatus


class VehicleCreate(BaseModel):
    license_plate: str = Field(..., min_length=1, max_length=20)
    vehicle_owner: str = Field(..., min_length=1)
    fuel_type: FuelType = FuelType.DIESEL
    financed: bool = False
    emi_amount: Optional[Decimal] = Field(None, ge=0)
    emi_date: Optional[date] = None
    permit_expiry: Optional[date] = None
    national_permit_expiry: Optional[date] = None
    pucc_expiry: Optional[date] = None
    insurance_expiry: Optional[date] = None
    status: VehicleStatus = VehicleStatus.ACTIVE
    mileage: Optional[int] = Field(None, ge=0)
    last_service: Optional[date] = None


class VehicleUpdate(BaseModel):
    license_plate: Optional[str] = Field(None, min_length=1, max_length=20)
    vehicle_owner: Optional[str] = Field(None, min_length=1)
    fuel_type: Optional[FuelType] = None
    financed: Optional[bool] = None
    emi_amount: Optional[Decimal] = Field(None, ge=0)
    emi_date: Optional[date] = None
    permit_expiry: Optional[date] = None
    national_permit_expiry: Optional[date] = None
    pucc_expiry: Optional[date] = None
    insurance_expiry: Optional[date] = None
    status: Optional[VehicleStatus] = None
    mileage: Optional[int] = Field(None, ge=0)
    last_service: Optional[date] = None


class VehicleResponse(BaseModel):
    id: str
    license_plate: str
    vehicle_owner: str
    fuel_type: FuelType
    financed: bool
    emi_amount: Optional[float]
    emi_date: Optional[date]
    permit_expiry: Optional[date]
    national_permit_expiry: Optional[date]
    pucc_expiry: Optional[date]
    insurance_expiry: Optional[date]
    status: VehicleStatus
    mileage: Optional[int]
    last_service: Optional[date]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ExpiryAlert(BaseModel):
    vehicle_id: str
    license_plate: str
    document: str
    expiry_date: date
    days_remaining: int
    expired: bool


class ExpiryAlertsResponse(BaseModel):
    days: int
    alerts: List[ExpiryAlert]
