import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from app.database import Base
from app.services.service_helper import utc_now


class RoleEnum(str, enum.Enum):
    student = "student"
    teacher_applicant = "teacher_applicant"
    teacher_pending = "teacher_pending"
    teacher = "teacher"
    admin = "admin"
    super_admin = "super_admin"


class UserRole(Base):
    """
    Vai trò của người dùng. Một user có thể có nhiều vai trò,
    vai trò bị thu hồi thì is_active = False thay vì xóa.
    """
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_role"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(Enum(RoleEnum, name="role_enum"), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    granted_at = Column(DateTime, default=utc_now, nullable=False)
    revoked_at = Column(DateTime)

    user = relationship("User", back_populates="roles")
