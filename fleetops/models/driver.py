from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, Integer, Text, Date, Numeric
from sqlalchemy.sql import func
import enum
from fleetops.database import Base
import uuid


class DriverStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    ON_LEAVE = "on_leave"


class Driver(Base):
    __tablename__ = "drivers"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False, default="")
    email = Column(String, nullable=True)
    phone = Column(String, nullable=False)
    license_number = Column(String, nullable=False)
    joining_date = Column(Date, nullable=True)

    # Demographic / employment
    age = Column(Integer, nullable=True)
    salary = Column(Numeric(12, 2), nullable=True)
    experience = Column(Integer, nullable=True)  # years
    address = Column(Text, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)

    status = Column(Enum(DriverStatus), nullable=False, default=DriverStatus.ACTIVE, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name or ''}".strip()
