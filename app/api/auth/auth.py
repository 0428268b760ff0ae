#app/api/auth/auth.py
import logging
import uuid
from datetime import timedelta
from typing import Dict, List, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt # type: ignore
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    ADMIN_TOKEN_EXPIRE_HOURS,
    REFRESH_TOKEN_EXPIRE_DAYS,
    SECRET_KEY,
)
from app.core.exceptions import AuthError, ErrorCode, PermissionDeniedError
from app.models.admin_model import AdminUser
from app.models.token_model import RefreshToken
from app.models.user_model import AccountStatus, User
from app.schemas.auth_schema import AuthenticatedUser, TokenData
from app.services.service_helper import utc_now

logger = logging.getLogger(__name__)

# Cấu hình JWT
ALGORITHM = "HS256"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")
admin_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/admin/login", scheme_name="AdminBearer")


def _invalid_token() -> AuthError:
    return AuthError(ErrorCode.TOKEN_INVALID_OR_EXPIRED, "Token không hợp lệ hoặc đã hết hạn")


def create_access_token(data: Dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = utc_now() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    # jti giúp hai token tạo cùng một giây vẫn khác nhau
    to_encode.update({"exp": expire, "jti": uuid.uuid4().hex})
    to_encode.setdefault("type", "access")
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def create_refresh_token(user_id: int, db: Session) -> str:
    expired = utc_now() + timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS)
    token = create_access_token(
        {"sub": str(user_id), "type": "refresh"},
        expires_delta=timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS),
    )
    db.add(RefreshToken(token=token, user_id=user_id, expired_at=expired))
    db.commit()
    return token


def create_user_tokens(user: User, db: Session) -> dict:
    access_token = create_access_token({"sub": str(user.id), "roles": user.active_roles})
    refresh_token = create_refresh_token(user.id, db)
    return {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "token_type": "Bearer",
        "expires_in": ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    }


def verify_refresh_token(token: str, db: Session) -> Optional[User]:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != "refresh":
        return None
    db_token = db.query(RefreshToken).filter(
        RefreshToken.token == token,
        RefreshToken.revoked == False,  # noqa: E712
        RefreshToken.expired_at > utc_now(),
    ).first()
    if not db_token:
        return None
    return db_token.user


def revoke_refresh_token(token: str, db: Session):
    db_token = db.query(RefreshToken).filter(RefreshToken.token == token).first()
    if db_token:
        db_token.revoked = True
        db.commit()


def verify_token(token: str) -> TokenData:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise _invalid_token()
    user_id = payload.get("sub")
    if user_id is None or payload.get("type") != "access":
        raise _invalid_token()
    return TokenData(user_id=int(user_id), token_type=payload["type"])


def get_current_active_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> AuthenticatedUser:
    token_data = verify_token(token)
    user = db.query(User).filter(User.id == token_data.user_id, User.deleted_at.is_(None)).first()
    if not user:
        raise AuthError(ErrorCode.USER_NOT_FOUND, "Người dùng không tồn tại")
    if user.account_status != AccountStatus.active:
        raise PermissionDeniedError(ErrorCode.ACCOUNT_SUSPENDED, "Tài khoản đã bị tạm ngưng")
    return AuthenticatedUser(
        user_id=user.id,
        uuid=user.uuid,
        nick_name=user.nick_name,
        email=user.email,
        roles=user.active_roles,
    )


def has_roles(required_roles: List[str]):
    """
    Dependency factory để kiểm tra quyền truy cập dựa trên vai trò.
    Hàm này trả về một dependency mới dựa trên danh sách vai trò yêu cầu.
    """
    def role_checker(current_user: AuthenticatedUser = Depends(get_current_active_user)):
        # Kiểm tra xem người dùng có ít nhất một trong các vai trò yêu cầu không
        if not any(role in required_roles for role in current_user.roles):
            raise PermissionDeniedError(
                ErrorCode.INSUFFICIENT_PERMISSIONS,
                "Bạn không có quyền để thực hiện hành động này."
            )
        return current_user
    return role_checker


# ---------------------------------------------------------
# ADMIN
# ---------------------------------------------------------

def create_admin_token(admin: AdminUser) -> str:
    return create_access_token(
        {"sub": str(admin.id), "admin_id": admin.id, "role": admin.role.value, "type": "admin"},
        expires_delta=timedelta(hours=ADMIN_TOKEN_EXPIRE_HOURS),
    )


def get_current_admin(token: str = Depends(admin_oauth2_scheme), db: Session = Depends(get_db)) -> AdminUser:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise AuthError(ErrorCode.ADMIN_TOKEN_INVALID, "Token quản trị không hợp lệ hoặc đã hết hạn")
    if payload.get("type") != "admin" or payload.get("admin_id") is None:
        raise AuthError(ErrorCode.ADMIN_TOKEN_INVALID, "Token quản trị không hợp lệ hoặc đã hết hạn")

    admin = db.query(AdminUser).filter(AdminUser.id == payload["admin_id"]).first()
    if not admin:
        raise AuthError(ErrorCode.ADMIN_TOKEN_INVALID, "Tài khoản quản trị không tồn tại")
    if not admin.is_active:
        raise PermissionDeniedError(ErrorCode.ADMIN_ACCOUNT_INACTIVE, "Tài khoản quản trị đã bị vô hiệu hóa")
    return admin
