import enum
import uuid

from sqlalchemy import JSON, Column, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from app.database import Base
from app.services.service_helper import utc_now


class ApplicationStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class Teacher(Base):
    """
    Model cho bảng teachers: hồ sơ giáo viên gắn với một user,
    đồng thời là đơn đăng ký làm giáo viên (application_status).
    """
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    application_status = Column(
        Enum(ApplicationStatus, name="application_status_enum"), default=ApplicationStatus.pending, nullable=False
    )
    application_submitted_at = Column(DateTime)
    application_reviewed_at = Column(DateTime)
    reviewer_id = Column(Integer, ForeignKey("admin_users.id"))
    review_notes = Column(Text)
    nationality = Column(String(50))
    city = Column(String(50))
    district = Column(String(50))
    address = Column(String(200))
    introduction = Column(Text)
    main_category_id = Column(Integer, ForeignKey("main_categories.id"))
    sub_category_ids = Column(JSON, default=list)
    total_students = Column(Integer, default=0, nullable=False)
    total_courses = Column(Integer, default=0, nullable=False)
    average_rating = Column(Numeric(3, 2), default=0, nullable=False)
    total_earnings = Column(Numeric(12, 2), default=0, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    user = relationship("User", back_populates="teacher", foreign_keys=[user_id])
    main_category = relationship("MainCategory")
    courses = relationship("Course", back_populates="teacher")
    available_slots = relationship("TeacherAvailableSlot", back_populates="teacher", cascade="all, delete-orphan")
    work_experiences = relationship("TeacherWorkExperience", back_populates="teacher", cascade="all, delete-orphan")
    learning_experiences = relationship(
        "TeacherLearningExperience", back_populates="teacher", cascade="all, delete-orphan"
    )
    certificates = relationship("TeacherCertificate", back_populates="teacher", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Teacher(id={self.id}, user_id={self.user_id}, status={self.application_status})>"
