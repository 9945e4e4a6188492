from pydantic import BaseModel
from typing import List


class DashboardStats(BaseModel):
    total_vehicles: int
    active_drivers: int
    active_trips: int
    monthly_inbound_revenue: float
    monthly_outbound_revenue: float
    monthly_revenue: float
    monthly_expenses: float


class MonthlyFigures(BaseModel):
    month: str  # YYYY-MM
    revenue: float
    expenses: float
    profit: float


class ExpenseBreakdownEntry(BaseModel):
    type: str
    amount: float
    percentage: float


class VehiclePerformance(BaseModel):
    vehicle_id: str
    license_plate: str
    trips: int
    revenue: float


class ReportResponse(BaseModel):
    months: int
    total_revenue: float
    total_expenses: float
    net_profit: float
    monthly: List[MonthlyFigures]
    expense_breakdown: List[ExpenseBreakdownEntry]
    vehicle_performance: List[VehiclePerformance]
