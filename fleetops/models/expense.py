from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, Date, Numeric
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from fleetops.database import Base
import uuid


class ExpenseType(str, enum.Enum):
    FUEL = "fuel"
    MAINTENANCE = "maintenance"
    INSURANCE = "insurance"
    TOLLS = "tolls"
    OTHER = "other"


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    vehicle_id = Column(String, ForeignKey("vehicles.id", ondelete="SET NULL"), nullable=True, index=True)
    type = Column(Enum(ExpenseType), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False, default=0)
    description = Column(String, nullable=False)
    date = Column(Date, nullable=False, index=True)
    receipt = Column(String, nullable=True)  # receipt file reference

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    # Relationships
    vehicle = relationship("Vehicle")
