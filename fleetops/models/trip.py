from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, Integer, Date, Numeric, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from fleetops.database import Base
import uuid


class TripStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TripDirection(str, enum.Enum):
    INBOUND = "inbound"
    OUTBOUND = "outbound"


class Trip(Base):
    __tablename__ = "trips"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    trip_number = Column(String, nullable=False, index=True)
    vehicle_id = Column(String, ForeignKey("vehicles.id", ondelete="SET NULL"), nullable=True, index=True)
    local_driver_id = Column(String, ForeignKey("drivers.id", ondelete="SET NULL"), nullable=True)
    route_driver_id = Column(String, ForeignKey("drivers.id", ondelete="SET NULL"), nullable=True)
    status = Column(Enum(TripStatus), nullable=False, default=TripStatus.ACTIVE, index=True)

    # Wizard progress: names of completed steps, e.g. ["basic", "inbound"]
    completed_steps = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    # Relationships
    vehicle = relationship("Vehicle")
    local_driver = relationship("Driver", foreign_keys=[local_driver_id])
    route_driver = relationship("Driver", foreign_keys=[route_driver_id])
    inbound_trips = relationship(
        "InboundTrip",
        back_populates="trip",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="InboundTrip.created_at",
    )
    outbound_trips = relationship(
        "OutboundTrip",
        back_populates="trip",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OutboundTrip.created_at",
    )


class InboundTrip(Base):
    __tablename__ = "inbound_trips"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    trip_id = Column(String, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    source = Column(String, nullable=False)
    destination = Column(String, nullable=False)

    # Sums over items, recomputed on every item mutation
    total_weight = Column(Numeric(12, 2), nullable=False, default=0)
    total_fare = Column(Numeric(12, 2), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    # Relationships
    trip = relationship("Trip", back_populates="inbound_trips")
    items = relationship(
        "InboundTripItem",
        back_populates="inbound_trip",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="InboundTripItem.sr_no",
    )


class InboundTripItem(Base):
    __tablename__ = "inbound_trip_items"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    inbound_trip_id = Column(String, ForeignKey("inbound_trips.id", ondelete="CASCADE"), nullable=False, index=True)
    sr_no = Column(Integer, nullable=False)
    customer_name = Column(String, nullable=False, default="")
    receiver_name = Column(String, nullable=False, default="")
    goods_type_id = Column(String, ForeignKey("goods_types.id", ondelete="SET NULL"), nullable=True)
    total_weight = Column(Numeric(12, 2), nullable=False, default=0)
    total_quantity = Column(Integer, nullable=False, default=0)
    fare_per_piece = Column(Numeric(12, 2), nullable=False, default=0)
    total_price = Column(Numeric(12, 2), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    # Relationships
    inbound_trip = relationship("InboundTrip", back_populates="items")
    goods_type = relationship("GoodsType")


class OutboundTrip(Base):
    __tablename__ = "outbound_trips"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    trip_id = Column(String, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    source = Column(String, nullable=False)
    destination = Column(String, nullable=False)

    # Sums over items, recomputed on every item mutation
    total_weight = Column(Numeric(12, 2), nullable=False, default=0)
    total_fare = Column(Numeric(12, 2), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    # Relationships
    trip = relationship("Trip", back_populates="outbound_trips")
    items = relationship(
        "OutboundTripItem",
        back_populates="outbound_trip",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OutboundTripItem.sr_no",
    )


class OutboundTripItem(Base):
    __tablename__ = "outbound_trip_items"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    outbound_trip_id = Column(String, ForeignKey("outbound_trips.id", ondelete="CASCADE"), nullable=False, index=True)
    sr_no = Column(Integer, nullable=False)
    customer_name = Column(String, nullable=False, default="")
    receiver_name = Column(String, nullable=False, default="")
    goods_type_id = Column(String, ForeignKey("goods_types.id", ondelete="SET NULL"), nullable=True)
    total_weight = Column(Numeric(12, 2), nullable=False, default=0)
    total_quantity = Column(Integer, nullable=False, default=0)
    fare_per_piece = Column(Numeric(12, 2), nullable=False, default=0)
    total_price = Column(Numeric(12, 2), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    # Relationships
    outbound_trip = relationship("OutboundTrip", back_populates="items")
    goods_type = relationship("GoodsType")


# direction -> (sub-trip model, item model, item foreign key column name)
SUB_TRIP_MODELS = {
    TripDirection.INBOUND: (InboundTrip, InboundTripItem, "inbound_trip_id"),
    TripDirection.OUTBOUND: (OutboundTrip, OutboundTripItem, "outbound_trip_id"),
}
