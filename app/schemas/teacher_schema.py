from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

from app.models.teacher_model import ApplicationStatus
from app.schemas.user_schema import UserBrief


def _check_sub_category_ids(value: Optional[List[int]]) -> Optional[List[int]]:
    if value is None:
        return value
    if len(set(value)) != len(value):
        raise ValueError("Chuyên môn không được chọn trùng")
    if any(item <= 0 for item in value):
        raise ValueError("Mã chuyên môn phải là số nguyên dương")
    return value


class TeacherApplicationCreate(BaseModel):
    city: str = Field(..., min_length=1, max_length=50)
    district: str = Field(..., min_length=1, max_length=50)
    address: str = Field(..., min_length=1, max_length=200)
    main_category_id: int = Field(..., gt=0)
    sub_category_ids: List[int] = Field(..., min_length=1, max_length=3)
    introduction: str = Field(..., min_length=100, max_length=1000)
    nationality: Optional[str] = Field(None, max_length=50)

    @field_validator("sub_category_ids")
    @classmethod
    def check_sub_categories(cls, value: List[int]) -> List[int]:
        return _check_sub_category_ids(value)


class TeacherApplicationUpdate(BaseModel):
    city: Optional[str] = Field(None, min_length=1, max_length=50)
    district: Optional[str] = Field(None, min_length=1, max_length=50)
    address: Optional[str] = Field(None, min_length=1, max_length=200)
    main_category_id: Optional[int] = Field(None, gt=0)
    sub_category_ids: Optional[List[int]] = Field(None, min_length=1, max_length=3)
    introduction: Optional[str] = Field(None, min_length=100, max_length=1000)
    nationality: Optional[str] = Field(None, max_length=50)

    @field_validator("sub_category_ids")
    @classmethod
    def check_sub_categories(cls, value: Optional[List[int]]) -> Optional[List[int]]:
        return _check_sub_category_ids(value)

    @field_validator("city", "district", "address", "main_category_id", "sub_category_ids", "introduction")
    @classmethod
    def check_not_null(cls, value):
        if value is None:
            raise ValueError("Trường này không được để trống")
        return value


# Hồ sơ giáo viên đã duyệt dùng chung các trường với đơn đăng ký
TeacherProfileUpdate = TeacherApplicationUpdate


class TeacherApplicationRead(BaseModel):
    id: int
    uuid: str
    user_id: int
    application_status: ApplicationStatus
    application_submitted_at: Optional[datetime] = None
    application_reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    address: Optional[str] = None
    nationality: Optional[str] = None
    introduction: Optional[str] = None
    main_category_id: Optional[int] = None
    sub_category_ids: List[int] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @field_validator("sub_category_ids", mode="before")
    @classmethod
    def none_to_list(cls, value):
        return value or []


class TeacherProfileRead(TeacherApplicationRead):
    total_students: int
    total_courses: int
    average_rating: Decimal
    total_earnings: Decimal

    @field_serializer("average_rating", "total_earnings")
    def serialize_decimal(self, value: Decimal):
        return float(value)


class TeacherPublic(BaseModel):
    id: int
    uuid: str
    city: Optional[str] = None
    district: Optional[str] = None
    nationality: Optional[str] = None
    introduction: Optional[str] = None
    main_category_id: Optional[int] = None
    total_students: int
    total_courses: int
    average_rating: Decimal
    user: UserBrief

    class Config:
        from_attributes = True

    @field_serializer("average_rating")
    def serialize_rating(self, value: Decimal):
        return float(value)


class ApplicantInfo(BaseModel):
    id: int
    nick_name: str
    name: Optional[str] = None
    email: str

    class Config:
        from_attributes = True


class TeacherApplicationAdminView(TeacherApplicationRead):
    """Đơn đăng ký giáo viên kèm thông tin người nộp, dùng cho trang quản trị."""
    user: ApplicantInfo
