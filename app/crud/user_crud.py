# app/crud/user_crud.py
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.models.role_model import RoleEnum
from app.models.user_model import User
from app.crud import user_role_crud
from app.services.service_helper import utc_now

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: int, include_deleted: bool = False) -> Optional[User]:
    """Lấy người dùng theo ID (mặc định bỏ qua tài khoản đã xóa mềm)."""
    query = db.query(User).filter(User.id == user_id)
    if not include_deleted:
        query = query.filter(User.deleted_at.is_(None))
    return query.first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def get_user_by_nick_name(db: Session, nick_name: str) -> Optional[User]:
    return db.query(User).filter(User.nick_name == nick_name).first()


def get_user_by_reset_token(db: Session, token: str) -> Optional[User]:
    return db.query(User).filter(User.password_reset_token == token).first()


def create_user(db: Session, nick_name: str, email: str, password: str) -> User:
    """Tạo user mới với vai trò mặc định là student."""
    db_user = User(nick_name=nick_name, email=email)
    db_user.set_password(password)
    db.add(db_user)
    db.flush()
    user_role_crud.grant_role(db, db_user.id, RoleEnum.student, commit=False)
    db.commit()
    db.refresh(db_user)
    logger.info(f"Tạo người dùng mới id={db_user.id}")
    return db_user


def update_user(db: Session, db_user: User, update_data: dict) -> User:
    for key, value in update_data.items():
        setattr(db_user, key, value)
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def touch_last_login(db: Session, db_user: User) -> User:
    db_user.last_login_at = utc_now()
    db.commit()
    db.refresh(db_user)
    return db_user
