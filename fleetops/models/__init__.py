from fleetops.models.user import User, UserStatus, ApiToken, TokenType
from fleetops.models.vehicle import Vehicle, VehicleStatus, FuelType
from fleetops.models.driver import Driver, DriverStatus
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
from fleetops.models.expense import Expense, ExpenseType

__all__ = [
    "User",
    "UserStatus",
    "ApiToken",
    "TokenType",
    "Vehicle",
    "VehicleStatus",
    "FuelType",
    "Driver",
    "DriverStatus",
    "GoodsType",
    "Trip",
    "TripStatus",
    "TripDirection",
    "InboundTrip",
    "InboundTripItem",
    "OutboundTrip",
    "OutboundTripItem",
    "SUB_TRIP_MODELS",
    "Expense",
    "ExpenseType",
]
