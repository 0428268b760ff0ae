# app/api/v1/endpoints/auth_route.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.api.auth.auth import get_current_active_user
from app.config import REFRESH_TOKEN_EXPIRE_DAYS
from app.core.exceptions import AuthError, ErrorCode
from app.schemas import auth_schema, user_schema
from app.schemas.auth_schema import AuthenticatedUser
from app.schemas.common_schema import ApiResponse, MessageResponse, success
from app.services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter()

REFRESH_COOKIE = "refresh_token"


def _auth_response(message: str, payload: dict, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """Trả token trong body, đồng thời đặt refresh token vào cookie httponly."""
    response = JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(success(auth_schema.AuthResponse(**payload), message)),
    )
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=payload["refresh_token"],
        httponly=True,
        secure=False,  # dev localhost
        samesite="Lax",
        max_age=60 * 60 * 24 * REFRESH_TOKEN_EXPIRE_DAYS,
        path="/",
    )
    return response


@router.post(
    "/register",
    response_model=ApiResponse[auth_schema.AuthResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Đăng ký tài khoản mới",
)
def register(data: auth_schema.RegisterRequest, db: Session = Depends(get_db)):
    payload = auth_service.register(db, data)
    return _auth_response("Đăng ký thành công", payload, status.HTTP_201_CREATED)


@router.post("/login", response_model=ApiResponse[auth_schema.AuthResponse], summary="Đăng nhập")
def login(data: auth_schema.LoginRequest, db: Session = Depends(get_db)):
    payload = auth_service.login(db, data)
    return _auth_response("Đăng nhập thành công", payload)


@router.post("/refresh-token", response_model=ApiResponse[auth_schema.AuthResponse], summary="Làm mới access token")
def refresh_token(
    request: Request,
    data: Optional[auth_schema.RefreshTokenRequest] = None,
    db: Session = Depends(get_db),
):
    """
    Nhận refresh token từ body, nếu không có thì lấy từ cookie.
    """
    token = data.refresh_token if data else request.cookies.get(REFRESH_COOKIE)
    if not token:
        raise AuthError(ErrorCode.TOKEN_INVALID_OR_EXPIRED, "Thiếu refresh token")
    payload = auth_service.refresh(db, token)
    return _auth_response("Làm mới token thành công", payload)


@router.post("/logout", response_model=MessageResponse, summary="Đăng xuất")
def logout(
    request: Request,
    data: Optional[auth_schema.LogoutRequest] = None,
    db: Session = Depends(get_db),
):
    token = (data.refresh_token if data else None) or request.cookies.get(REFRESH_COOKIE)
    auth_service.logout(db, token)
    response = JSONResponse(content={"status": "success", "message": "Đăng xuất thành công"})
    response.delete_cookie(REFRESH_COOKIE, path="/")
    return response


@router.post("/forgot-password", response_model=MessageResponse, summary="Quên mật khẩu")
def forgot_password(data: auth_schema.ForgotPasswordRequest, db: Session = Depends(get_db)):
    auth_service.forgot_password(db, data.email)
    return {"status": "success", "message": "Nếu email tồn tại, hướng dẫn đặt lại mật khẩu đã được gửi"}


@router.post("/reset-password", response_model=MessageResponse, summary="Đặt lại mật khẩu")
def reset_password(data: auth_schema.ResetPasswordRequest, db: Session = Depends(get_db)):
    auth_service.reset_password(db, data)
    return {"status": "success", "message": "Đặt lại mật khẩu thành công"}


@router.get("/profile", response_model=ApiResponse[user_schema.UserProfile], summary="Xem hồ sơ cá nhân")
def get_profile(
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    user = auth_service.get_profile(db, current_user.user_id)
    return success(user_schema.UserProfile.model_validate(user), "Lấy hồ sơ thành công")


@router.put("/profile", response_model=ApiResponse[user_schema.UserProfile], summary="Cập nhật hồ sơ cá nhân")
def update_profile(
    data: user_schema.UserProfileUpdate,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    user = auth_service.update_profile(db, current_user.user_id, data)
    return success(user_schema.UserProfile.model_validate(user), "Cập nhật hồ sơ thành công")


@router.delete("/profile", response_model=MessageResponse, summary="Xóa tài khoản")
def delete_profile(
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    auth_service.delete_profile(db, current_user.user_id)
    return {"status": "success", "message": "Tài khoản đã được xóa"}
