# app/models/notification_model.py
from sqlalchemy import Boolean, Column, Integer, ForeignKey, DateTime, String, Text, Enum
from sqlalchemy.orm import relationship
from app.database import Base
from app.services.service_helper import utc_now
import enum


class NotificationType(str, enum.Enum):
    """Định nghĩa các loại thông báo."""
    teacher_application = "teacher_application"
    course_review = "course_review"
    reservation = "reservation"
    order = "order"
    system = "system"


class Notification(Base):
    """
    Model cho bảng notifications.
    """
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True)
    receiver_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(Enum(NotificationType, name="notification_type_enum"), nullable=False)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    receiver = relationship("User")
