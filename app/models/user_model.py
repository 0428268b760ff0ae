import enum
import uuid

from sqlalchemy import Column, Integer, String, Date, DateTime, Enum, Text
from sqlalchemy.orm import relationship
from passlib.context import CryptContext

from app.database import Base
from app.services.service_helper import utc_now

# Context cho hashing/verify password
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AccountStatus(str, enum.Enum):
    active = "active"
    suspended = "suspended"
    locked = "locked"
    deactivated = "deactivated"


class User(Base):
    """
    Model cho bảng users (học viên, giáo viên đều là user).
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    name = Column(String(100))
    nick_name = Column(String(50), unique=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    birthday = Column(Date)
    contact_phone = Column(String(20))
    avatar_image = Column(Text)
    account_status = Column(
        Enum(AccountStatus, name="account_status_enum"), default=AccountStatus.active, nullable=False
    )
    last_login_at = Column(DateTime)
    password_reset_token = Column(String(255), index=True)
    password_reset_expires_at = Column(DateTime)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)
    deleted_at = Column(DateTime)

    roles = relationship("UserRole", back_populates="user", cascade="all, delete-orphan")
    teacher = relationship("Teacher", back_populates="user", uselist=False, foreign_keys="Teacher.user_id")
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', status={self.account_status})>"

    @property
    def active_roles(self) -> list[str]:
        return [r.role.value for r in self.roles if r.is_active]

    def verify_password(self, plain_password: str) -> bool:
        return pwd_context.verify(plain_password.encode("utf-8")[:72], self.password)

    def set_password(self, plain_password: str):
        self.password = pwd_context.hash(plain_password.encode("utf-8")[:72])
