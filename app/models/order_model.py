import enum
import uuid

from sqlalchemy import JSON, Column, DateTime, Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from app.database import Base
from app.services.service_helper import utc_now


class PaymentStatus(str, enum.Enum):
    pending = "pending"
    processing = "processing"
    completed = "completed"
    failed = "failed"
    cancelled = "cancelled"
    expired = "expired"
    refunded = "refunded"


class PurchaseWay(str, enum.Enum):
    all = "all"
    line_pay = "line_pay"
    credit_card = "credit_card"
    atm = "atm"
    cvs = "cvs"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    buyer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    purchase_way = Column(Enum(PurchaseWay, name="purchase_way_enum"), nullable=False)
    buyer_name = Column(String(100), nullable=False)
    buyer_phone = Column(String(20), nullable=False)
    buyer_email = Column(String(255), nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    payment_status = Column(
        Enum(PaymentStatus, name="payment_status_enum"), default=PaymentStatus.pending, nullable=False
    )
    merchant_trade_no = Column(String(20), unique=True, index=True)
    actual_payment_method = Column(String(50))
    payment_response = Column(JSON)
    paid_at = Column(DateTime)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    buyer = relationship("User")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)
    price_option_id = Column(Integer, ForeignKey("course_price_options.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    order = relationship("Order", back_populates="items")
    course = relationship("Course")
    price_option = relationship("CoursePriceOption")

    @property
    def course_name(self):
        return self.course.name if self.course else None
