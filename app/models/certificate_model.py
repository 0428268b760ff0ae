from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.database import Base
from app.services.service_helper import utc_now


class TeacherCertificate(Base):
    __tablename__ = "teacher_certificates"

    id = Column(Integer, primary_key=True, index=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True)
    verifying_institution = Column(String(200), nullable=False)
    license_name = Column(String(200), nullable=False)
    holder_name = Column(String(100), nullable=False)
    license_number = Column(String(100), nullable=False, index=True)
    file_path = Column(Text, nullable=False)
    category_id = Column(String(50), nullable=False)
    subject = Column(String(100), nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    teacher = relationship("Teacher", back_populates="certificates")

    def __repr__(self):
        return f"<TeacherCertificate(id={self.id}, teacher_id={self.teacher_id}, license={self.license_name})>"
