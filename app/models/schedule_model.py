from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Time
from sqlalchemy.orm import relationship

from app.database import Base
from app.services.service_helper import utc_now


class TeacherAvailableSlot(Base):
    """
    Khung giờ rảnh hàng tuần của giáo viên.
    weekday: 0-6, Chủ nhật = 0.
    """
    __tablename__ = "teacher_available_slots"

    id = Column(Integer, primary_key=True, index=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True)
    weekday = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    # Quan hệ với bảng teachers
    teacher = relationship("Teacher", back_populates="available_slots")
