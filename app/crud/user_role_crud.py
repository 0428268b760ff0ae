# app/crud/user_role_crud.py
from typing import Optional

from sqlalchemy.orm import Session

from app.models.role_model import RoleEnum, UserRole
from app.services.service_helper import utc_now


def get_user_role(db: Session, user_id: int, role: RoleEnum) -> Optional[UserRole]:
    return db.query(UserRole).filter(UserRole.user_id == user_id, UserRole.role == role).first()


def has_role(db: Session, user_id: int, role: RoleEnum) -> bool:
    db_role = get_user_role(db, user_id, role)
    return bool(db_role and db_role.is_active)


def grant_role(db: Session, user_id: int, role: RoleEnum, commit: bool = True) -> UserRole:
    """Cấp vai trò cho user; nếu vai trò đã bị thu hồi thì kích hoạt lại."""
    db_role = get_user_role(db, user_id, role)
    if db_role is None:
        db_role = UserRole(user_id=user_id, role=role)
        db.add(db_role)
    elif not db_role.is_active:
        db_role.is_active = True
        db_role.granted_at = utc_now()
        db_role.revoked_at = None
    if commit:
        db.commit()
    else:
        db.flush()
    return db_role


def revoke_role(db: Session, user_id: int, role: RoleEnum, commit: bool = True) -> bool:
    db_role = get_user_role(db, user_id, role)
    if not db_role or not db_role.is_active:
        return False
    db_role.is_active = False
    db_role.revoked_at = utc_now()
    if commit:
        db.commit()
    else:
        db.flush()
    return True
