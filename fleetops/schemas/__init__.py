# Pydantic schemas
from fleetops.schemas.auth import (
    UserCreate, UserLogin, UserResponse, TokenResponse, RefreshTokenRequest, ChangePasswordRequest,
)
from fleetops.schemas.vehicle import VehicleCreate, VehicleUpdate, VehicleResponse, ExpiryAlert, ExpiryAlertsResponse
from fleetops.schemas.driver import DriverCreate, DriverUpdate, DriverResponse
from fleetops.schemas.expense import ExpenseCreate, ExpenseUpdate, ExpenseResponse, ExpenseListResponse
from fleetops.schemas.goods_type import GoodsTypeCreate, GoodsTypeResponse
from fleetops.schemas.trip import (
    TripItemIn, TripItemResponse,
    TripBasicRequest, InboundStepRequest, OutboundStepRequest, TripStatusUpdate,
    ItemsPreviewRequest, ItemsPreviewResponse,
    SubTripResponse, WizardStateResponse, TripSummaryResponse, TripDetailResponse,
)
from fleetops.schemas.dashboard import DashboardStats, ReportResponse

__all__ = [
    "UserCreate", "UserLogin", "UserResponse", "TokenResponse", "RefreshTokenRequest", "ChangePasswordRequest",
    "VehicleCreate", "VehicleUpdate", "VehicleResponse", "ExpiryAlert", "ExpiryAlertsResponse",
    "DriverCreate", "DriverUpdate", "DriverResponse",
    "ExpenseCreate", "ExpenseUpdate", "ExpenseResponse", "ExpenseListResponse",
    "GoodsTypeCreate", "GoodsTypeResponse",
    "TripItemIn", "TripItemResponse",
    "TripBasicRequest", "InboundStepRequest", "OutboundStepRequest", "TripStatusUpdate",
    "ItemsPreviewRequest", "ItemsPreviewResponse",
    "SubTripResponse", "WizardStateResponse", "TripSummaryResponse", "TripDetailResponse",
    "DashboardStats", "ReportResponse",
]
