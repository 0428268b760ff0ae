import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String

from app.database import Base
from app.models.user_model import pwd_context
from app.services.service_helper import utc_now


class AdminRole(str, enum.Enum):
    super_admin = "super_admin"
    admin = "admin"


class AdminUser(Base):
    """Tài khoản quản trị, tách biệt với bảng users."""
    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False)
    password = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    role = Column(Enum(AdminRole, name="admin_role_enum"), default=AdminRole.admin, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login_at = Column(DateTime)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    def verify_password(self, plain_password: str) -> bool:
        return pwd_context.verify(plain_password.encode("utf-8")[:72], self.password)

    def set_password(self, plain_password: str):
        self.password = pwd_context.hash(plain_password.encode("utf-8")[:72])
