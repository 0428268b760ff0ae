import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.teacher_model import ApplicationStatus
from app.services.service_helper import utc_now


class CourseStatus(str, enum.Enum):
    draft = "draft"
    submitted = "submitted"
    approved = "approved"
    rejected = "rejected"
    published = "published"
    archived = "archived"


class Course(Base):
    """
    Model cho bảng courses.
    status: vòng đời của khóa học; application_status: trạng thái duyệt của admin.
    """
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    teacher_id = Column(Integer, ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    content = Column(Text)
    main_image = Column(String(500))
    rate = Column(Numeric(3, 2), default=0, nullable=False)
    review_count = Column(Integer, default=0, nullable=False)
    view_count = Column(Integer, default=0, nullable=False)
    purchase_count = Column(Integer, default=0, nullable=False)
    student_count = Column(Integer, default=0, nullable=False)
    main_category_id = Column(Integer, ForeignKey("main_categories.id"))
    sub_category_id = Column(Integer, ForeignKey("sub_categories.id"))
    city_id = Column(Integer, ForeignKey("cities.id"))
    survey_url = Column(String(500))
    purchase_message = Column(Text)
    status = Column(Enum(CourseStatus, name="course_status_enum"), default=CourseStatus.draft, nullable=False)
    application_status = Column(Enum(ApplicationStatus, name="course_application_status_enum"))
    submission_notes = Column(Text)
    review_notes = Column(Text)
    archive_reason = Column(Text)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)
    deleted_at = Column(DateTime)

    teacher = relationship("Teacher", back_populates="courses")
    main_category = relationship("MainCategory")
    sub_category = relationship("SubCategory")
    city = relationship("City")
    price_options = relationship(
        "CoursePriceOption", back_populates="course", order_by="CoursePriceOption.price"
    )

    @property
    def active_price_options(self):
        return [option for option in self.price_options if option.is_active]

    def __repr__(self):
        return f"<Course(id={self.id}, name='{self.name}', status={self.status})>"
