import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.constants import PASSWORD_MAX_LENGTH, PASSWORD_MIN_LENGTH
from app.schemas.user_schema import UserProfile


def validate_password_strength(value: str) -> str:
    if not re.search(r"[A-Za-z]", value) or not re.search(r"\d", value):
        raise ValueError("Mật khẩu phải chứa ít nhất một chữ cái và một chữ số")
    return value


# Pydantic model cho payload của JWT
class TokenData(BaseModel):
    user_id: Optional[int] = None
    token_type: str = "access"


# Pydantic model cho người dùng đã xác thực
class AuthenticatedUser(BaseModel):
    user_id: int = Field(..., example=1, description="ID của người dùng")
    uuid: str = Field(..., description="UUID của người dùng")
    nick_name: str = Field(..., example="john_doe", description="Biệt danh")
    email: EmailStr = Field(..., example="john.doe@example.com", description="Email của người dùng")
    roles: List[str] = Field(..., example=["student"], description="Danh sách vai trò đang hiệu lực")

    class Config:
        from_attributes = True


class RegisterRequest(BaseModel):
    nick_name: str = Field(..., min_length=1, max_length=50, example="johndoe")
    email: EmailStr = Field(..., example="john.doe@example.com")
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)

    @field_validator("nick_name")
    @classmethod
    def strip_nick_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Biệt danh không được để trống")
        return value

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return validate_password_strength(value)


class LoginRequest(BaseModel):
    """
    Schema cho yêu cầu đăng nhập.
    """
    email: EmailStr = Field(..., example="john.doe@example.com")
    password: str = Field(..., min_length=1, example="secure_password1")


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)

    @field_validator("new_password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return validate_password_strength(value)


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int


class AuthResponse(TokenResponse):
    user: UserProfile


class LogoutRequest(BaseModel):
    refresh_token: Optional[str] = None
