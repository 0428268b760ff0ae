from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.database import Base
from app.services.service_helper import utc_now


class TeacherWorkExperience(Base):
    """Kinh nghiệm làm việc của giáo viên; đang làm thì không có thời điểm kết thúc."""
    __tablename__ = "teacher_work_experiences"

    id = Column(Integer, primary_key=True, index=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True)
    is_working = Column(Boolean, nullable=False)
    company_name = Column(String(200), nullable=False)
    workplace = Column(String(200), nullable=False)
    job_category = Column(String(100), nullable=False)
    job_title = Column(String(100), nullable=False)
    start_year = Column(Integer, nullable=False)
    start_month = Column(Integer, nullable=False)
    end_year = Column(Integer)
    end_month = Column(Integer)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    teacher = relationship("Teacher", back_populates="work_experiences")


class TeacherLearningExperience(Base):
    """Quá trình học tập; region=True là trong nước, False là nước ngoài."""
    __tablename__ = "teacher_learning_experiences"

    id = Column(Integer, primary_key=True, index=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True)
    is_in_school = Column(Boolean, nullable=False)
    degree = Column(String(50), nullable=False)
    school_name = Column(String(200), nullable=False)
    department = Column(String(200), nullable=False)
    region = Column(Boolean, nullable=False)
    start_year = Column(Integer, nullable=False)
    start_month = Column(Integer, nullable=False)
    end_year = Column(Integer)
    end_month = Column(Integer)
    file_path = Column(Text)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    teacher = relationship("Teacher", back_populates="learning_experiences")
