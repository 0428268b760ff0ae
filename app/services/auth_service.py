# app/services/auth_service.py
import logging
import secrets
from datetime import timedelta

from sqlalchemy.orm import Session

from app.api.auth.auth import create_user_tokens, revoke_refresh_token, verify_refresh_token
from app.constants import RESET_TOKEN_EXPIRE_HOURS
from app.core.exceptions import (
    AuthError,
    BusinessError,
    ConflictError,
    ErrorCode,
    NotFoundError,
    PermissionDeniedError,
)
from app.crud import user_crud
from app.models.user_model import AccountStatus, User
from app.schemas.auth_schema import LoginRequest, RegisterRequest, ResetPasswordRequest
from app.schemas.user_schema import UserProfile, UserProfileUpdate
from app.services.service_helper import utc_now

logger = logging.getLogger(__name__)


def _auth_payload(db: Session, user: User) -> dict:
    tokens = create_user_tokens(user, db)
    db.refresh(user)
    return {**tokens, "user": UserProfile.model_validate(user)}


def register(db: Session, data: RegisterRequest) -> dict:
    if user_crud.get_user_by_email(db, data.email):
        raise ConflictError(ErrorCode.EMAIL_EXISTS, "Email đã được đăng ký")
    if user_crud.get_user_by_nick_name(db, data.nick_name):
        raise ConflictError(ErrorCode.NICKNAME_EXISTS, "Biệt danh đã được sử dụng")

    user = user_crud.create_user(db, nick_name=data.nick_name, email=data.email, password=data.password)
    return _auth_payload(db, user)


def login(db: Session, data: LoginRequest) -> dict:
    user = user_crud.get_user_by_email(db, data.email)
    logger.info(f"Attempting login for user: {data.email}")
    if not user or user.deleted_at is not None:
        raise AuthError(ErrorCode.INVALID_CREDENTIALS, "Email hoặc mật khẩu không đúng")
    if user.account_status != AccountStatus.active:
        raise PermissionDeniedError(ErrorCode.ACCOUNT_SUSPENDED, "Tài khoản đã bị tạm ngưng")
    if not user.verify_password(data.password):
        raise AuthError(ErrorCode.INVALID_CREDENTIALS, "Email hoặc mật khẩu không đúng")

    user_crud.touch_last_login(db, user)
    return _auth_payload(db, user)


def refresh(db: Session, refresh_token: str) -> dict:
    user = verify_refresh_token(refresh_token, db)
    if not user or user.deleted_at is not None:
        raise AuthError(ErrorCode.TOKEN_INVALID_OR_EXPIRED, "Refresh token không hợp lệ hoặc đã hết hạn")
    if user.account_status != AccountStatus.active:
        raise PermissionDeniedError(ErrorCode.ACCOUNT_SUSPENDED, "Tài khoản đã bị tạm ngưng")

    # Mỗi refresh token chỉ dùng được một lần
    revoke_refresh_token(refresh_token, db)
    return _auth_payload(db, user)


def logout(db: Session, refresh_token: str | None):
    if refresh_token:
        revoke_refresh_token(refresh_token, db)


def forgot_password(db: Session, email: str):
    """
    Luôn trả về thành công để không lộ email nào đã đăng ký.
    """
    user = user_crud.get_user_by_email(db, email)
    if not user or user.deleted_at is not None or user.account_status != AccountStatus.active:
        return

    user_crud.update_user(db, user, {
        "password_reset_token": secrets.token_hex(32),
        "password_reset_expires_at": utc_now() + timedelta(hours=RESET_TOKEN_EXPIRE_HOURS),
    })
    # TODO: gửi email chứa link đặt lại mật khẩu khi có dịch vụ email
    logger.info(f"Đã tạo token đặt lại mật khẩu cho user id={user.id}")


def reset_password(db: Session, data: ResetPasswordRequest):
    user = user_crud.get_user_by_reset_token(db, data.token)
    if not user or not user.password_reset_expires_at or user.password_reset_expires_at < utc_now():
        raise BusinessError(ErrorCode.RESET_TOKEN_INVALID, "Token đặt lại mật khẩu không hợp lệ hoặc đã hết hạn")
    if user.account_status != AccountStatus.active:
        raise BusinessError(ErrorCode.ACCOUNT_SUSPENDED_RESET, "Tài khoản đã bị tạm ngưng, không thể đặt lại mật khẩu")

    user.set_password(data.new_password)
    user_crud.update_user(db, user, {"password_reset_token": None, "password_reset_expires_at": None})


def get_profile(db: Session, user_id: int) -> User:
    user = user_crud.get_user(db, user_id)
    if not user:
        raise NotFoundError(ErrorCode.USER_NOT_FOUND, "Người dùng không tồn tại")
    return user


def update_profile(db: Session, user_id: int, data: UserProfileUpdate) -> User:
    user = get_profile(db, user_id)
    update_data = data.model_dump(exclude_unset=True)

    nick_name = update_data.get("nick_name")
    if nick_name and nick_name != user.nick_name:
        existing = user_crud.get_user_by_nick_name(db, nick_name)
        if existing and existing.id != user.id:
            raise ConflictError(ErrorCode.NICKNAME_EXISTS, "Biệt danh đã được sử dụng")

    return user_crud.update_user(db, user, update_data)


def delete_profile(db: Session, user_id: int):
    user = get_profile(db, user_id)
    user_crud.update_user(db, user, {
        "deleted_at": utc_now(),
        "account_status": AccountStatus.deactivated,
    })
    logger.info(f"Người dùng id={user_id} đã xóa tài khoản")
