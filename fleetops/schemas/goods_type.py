from pydantic import BaseModel, Field
from datetime import datetime


class GoodsTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class GoodsTypeResponse(BaseModel):
    id: str
    name: str
    created_at: datetime

    class Config:
        from_attributes = True
