import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.database import Base
from app.services.service_helper import utc_now


class ReservationStatus(str, enum.Enum):
    pending = "pending"
    reserved = "reserved"
    overdue = "overdue"
    completed = "completed"
    cancelled = "cancelled"


class Reservation(Base):
    """
    Một buổi học được học viên đặt với giáo viên.
    teacher_status / student_status được cập nhật độc lập bởi mỗi bên.
    """
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    reserve_time = Column(DateTime, nullable=False, index=True)
    teacher_status = Column(
        Enum(ReservationStatus, name="reservation_status_enum"), default=ReservationStatus.pending, nullable=False
    )
    student_status = Column(
        Enum(ReservationStatus, name="reservation_status_enum"), default=ReservationStatus.reserved, nullable=False
    )
    response_deadline = Column(DateTime)
    rejection_reason = Column(Text)
    cancel_reason = Column(Text)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)
    deleted_at = Column(DateTime)

    course = relationship("Course")
    teacher = relationship("Teacher")
    student = relationship("User")

    def __repr__(self):
        return (
            f"<Reservation(id={self.id}, teacher_id={self.teacher_id}, student_id={self.student_id}, "
            f"reserve_time={self.reserve_time})>"
        )
