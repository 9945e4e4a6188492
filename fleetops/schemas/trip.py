from pydantic import BaseModel, Field, computed_field, field_validator
from typing import Optional, List
from decimal import Decimal
import datetime as dt
from fleetops.models.trip import TripStatus
from fleetops.core.totals import line_total


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Items

class TripItemIn(BaseModel):
    sr_no: Optional[int] = Field(None, ge=1)
    customer_name: str = ""
    receiver_name: str = ""
    goods_type_id: Optional[str] = None
    total_weight: Decimal = Field(Decimal("0"), ge=0)
    total_quantity: int = Field(0, ge=0)
    fare_per_piece: Decimal = Field(Decimal("0"), ge=0)

    @field_validator("goods_type_id", mode="before")
    @classmethod
    def blank_goods_type(cls, value):
        return _blank_to_none(value)

    @computed_field
    @property
    def total_price(self) -> Decimal:
        # always derived; a client-sent total_price is ignored
        return line_total(self.total_quantity, self.fare_per_piece)


class TripItemResponse(BaseModel):
    id: str
    sr_no: int
    customer_name: str
    receiver_name: str
    goods_type_id: Optional[str]
    goods_type_name: Optional[str] = None
    total_weight: float
    total_quantity: int
    fare_per_piece: float
    total_price: float


# Wizard steps

class TripBasicRequest(BaseModel):
    trip_number: Optional[str] = None
    vehicle_id: str = Field(..., min_length=1)
    local_driver_id: Optional[str] = None
    route_driver_id: Optional[str] = None
    status: TripStatus = TripStatus.ACTIVE

    @field_validator("trip_number", "local_driver_id", "route_driver_id", mode="before")
    @classmethod
    def blank_optional_ids(cls, value):
        return _blank_to_none(value)


class InboundStepRequest(BaseModel):
    date: Optional[dt.date] = None
    source: str = Field(..., min_length=1)
    destination: str = Field(..., min_length=1)
    items: List[TripItemIn] = []


class OutboundStepRequest(BaseModel):
    """Source/destination default to the inbound leg reversed"""
    date: Optional[dt.date] = None
    source: Optional[str] = None
    destination: Optional[str] = None
    items: List[TripItemIn] = []

    @field_validator("source", "destination", mode="before")
    @classmethod
    def blank_route(cls, value):
        return _blank_to_none(value)


class TripStatusUpdate(BaseModel):
    status: TripStatus


class ItemsPreviewRequest(BaseModel):
    items: List[TripItemIn] = []


class ItemPreviewRow(BaseModel):
    sr_no: int
    total_quantity: int
    fare_per_piece: float
    total_price: float


class ItemsPreviewResponse(BaseModel):
    items: List[ItemPreviewRow]
    total_weight: float
    total_fare: float


# Responses

class SubTripResponse(BaseModel):
    id: str
    trip_id: str
    date: dt.date
    source: str
    destination: str
    total_weight: float
    total_fare: float
    items: List[TripItemResponse] = []


class RouteDefaults(BaseModel):
    source: str
    destination: str


class WizardStateResponse(BaseModel):
    trip_id: str
    current_step: str
    completed_steps: List[str]
    navigable_steps: List[str]
    outbound_defaults: RouteDefaults


class TripSummaryResponse(BaseModel):
    id: str
    trip_number: str
    status: TripStatus
    vehicle_id: Optional[str]
    vehicle_plate: Optional[str] = None
    local_driver_id: Optional[str]
    route_driver_id: Optional[str]
    completed_steps: List[str]
    inbound_total: float
    outbound_total: float
    created_at: dt.datetime


class TripDetailResponse(TripSummaryResponse):
    local_driver_name: Optional[str] = None
    route_driver_name: Optional[str] = None
    grand_total: float
    total_weight: float
    inbound_trips: List[SubTripResponse] = []
    outbound_trips: List[SubTripResponse] = []
