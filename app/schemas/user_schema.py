from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.user_model import AccountStatus


class UserProfile(BaseModel):
    id: int
    uuid: str
    name: Optional[str] = None
    nick_name: str
    email: EmailStr
    birthday: Optional[date] = None
    contact_phone: Optional[str] = None
    avatar_image: Optional[str] = None
    account_status: AccountStatus
    roles: List[str] = Field(default_factory=list, validation_alias="active_roles")
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        populate_by_name = True


class UserProfileUpdate(BaseModel):
    """Cập nhật từng phần: chỉ các trường được gửi lên mới được ghi."""
    name: Optional[str] = Field(None, max_length=100)
    nick_name: Optional[str] = Field(None, min_length=1, max_length=50)
    birthday: Optional[date] = None
    contact_phone: Optional[str] = Field(None, max_length=20)
    avatar_image: Optional[str] = None

    @field_validator("nick_name")
    @classmethod
    def check_nick_name_not_null(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("Biệt danh không được để trống")
        return value

    @field_validator("contact_phone")
    @classmethod
    def check_phone(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.replace("-", "").replace("+", "").isdigit():
            raise ValueError("Số điện thoại không hợp lệ")
        return value

    @field_validator("birthday")
    @classmethod
    def check_birthday(cls, value: Optional[date]) -> Optional[date]:
        if value is not None and value > date.today():
            raise ValueError("Ngày sinh không được ở tương lai")
        return value


class UserBrief(BaseModel):
    id: int
    nick_name: str
    avatar_image: Optional[str] = None

    class Config:
        from_attributes = True
