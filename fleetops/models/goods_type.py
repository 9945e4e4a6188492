from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from fleetops.database import Base
import uuid


class GoodsType(Base):
    __tablename__ = "goods_types"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_goods_types_user_name"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
