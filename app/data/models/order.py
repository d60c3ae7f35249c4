import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from sqlalchemy.orm import relationship

from app.data.database import Base
from app.domain.order_status import OrderStatus


def _now():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    #uuid jako string, to samo id idzie do operatora platnosci jako orderId
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    clerk_id = Column(String, nullable=False, index=True)

    total_amount = Column(Integer, nullable=False)
    status = Column(String, nullable=False, default=OrderStatus.PENDING.value)  # pending, confirmed, shipped, delivered, cancelled
    shipping_address = Column(JSON, nullable=True)
    order_note = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
