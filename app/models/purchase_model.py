import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base
from app.services.service_helper import utc_now


class UserCoursePurchase(Base):
    """Số buổi học đã mua của một user cho một khóa học."""
    __tablename__ = "user_course_purchases"
    __table_args__ = (CheckConstraint("quantity_used <= quantity_total", name="ck_purchase_quantity_used"),)

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"))
    quantity_total = Column(Integer, default=0, nullable=False)
    quantity_used = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    course = relationship("Course")
    order = relationship("Order")

    @property
    def quantity_remaining(self) -> int:
        return self.quantity_total - self.quantity_used
