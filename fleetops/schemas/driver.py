from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime, date
from decimal import Decimal
from fleetops.models.driver import DriverStatus


class DriverCreate(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = ""
    email: Optional[EmailStr] = None
    phone: str = Field(..., min_length=1)
    license_number: str = Field(..., min_length=1)
    joining_date: Optional[date] = None
    age: Optional[int] = Field(None, ge=18, le=100)
    salary: Optional[Decimal] = Field(None, ge=0)
    experience: Optional[int] = Field(None, ge=0)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    status: DriverStatus = DriverStatus.ACTIVE


class DriverUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1)
    license_number: Optional[str] = Field(None, min_length=1)
    joining_date: Optional[date] = None
    age: Optional[int] = Field(None, ge=18, le=100)
    salary: Optional[Decimal] = Field(None, ge=0)
    experience: Optional[int] = Field(None, ge=0)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    status: Optional[DriverStatus] = None


class DriverResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    full_name: str
    email: Optional[str]
    phone: str
    license_number: str
    joining_date: Optional[date]
    age: Optional[int]
    salary: Optional[float]
    experience: Optional[int]
    address: Optional[str]
    city: Optional[str]
    state: Optional[str]
    status: DriverStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
