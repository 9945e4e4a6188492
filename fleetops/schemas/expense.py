from pydantic import BaseModel, Field
from typing import Dict, Optional, List
from decimal import Decimal
import datetime as dt
from fleetops.models.expense import ExpenseType

# Fields are named "date" to match the table; annotate with dt.date so
# the field name never shadows the type.


class ExpenseCreate(BaseModel):
    type: ExpenseType
    amount: Decimal = Field(..., ge=0)
    description: str = Field(..., min_length=1)
    date: dt.date
    vehicle_id: Optional[str] = None
    receipt: Optional[str] = None


class ExpenseUpdate(BaseModel):
    type: Optional[ExpenseType] = None
    amount: Optional[Decimal] = Field(None, ge=0)
    description: Optional[str] = Field(None, min_length=1)
    date: Optional[dt.date] = None
    vehicle_id: Optional[str] = None
    receipt: Optional[str] = None


class ExpenseResponse(BaseModel):
    id: str
    type: ExpenseType
    amount: float
    description: str
    date: dt.date
    vehicle_id: Optional[str]
    vehicle_plate: Optional[str] = None
    receipt: Optional[str]
    created_at: dt.datetime


class ExpenseListResponse(BaseModel):
    items: List[ExpenseResponse]
    total_amount: float
    # every expense type, over all of the user's expenses regardless of filters
    totals_by_type: Dict[str, float]
