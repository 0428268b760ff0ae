from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

from app.constants import MAX_PRICE_OPTIONS_PER_COURSE
from app.models.course_model import CourseStatus
from app.models.teacher_model import ApplicationStatus
from app.schemas.catalog_schema import CityRead, SubCategoryRead
from app.schemas.common_schema import PaginationInfo
from app.schemas.price_option_schema import PriceOptionCreate, PriceOptionRead
from app.schemas.teacher_schema import TeacherPublic


class CourseSort(str, Enum):
    newest = "newest"
    popular = "popular"
    rating = "rating"
    price_low = "price_low"
    price_high = "price_high"


class CourseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, example="Python cho người mới bắt đầu")
    content: Optional[str] = None
    main_image: Optional[str] = Field(None, max_length=500)
    main_category_id: int = Field(..., gt=0)
    sub_category_id: int = Field(..., gt=0)
    city_id: int = Field(..., gt=0)
    survey_url: Optional[str] = Field(None, max_length=500)
    purchase_message: Optional[str] = None
    price_options: List[PriceOptionCreate] = Field(default_factory=list, max_length=MAX_PRICE_OPTIONS_PER_COURSE)


class CourseUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = None
    main_image: Optional[str] = Field(None, max_length=500)
    main_category_id: Optional[int] = Field(None, gt=0)
    sub_category_id: Optional[int] = Field(None, gt=0)
    city_id: Optional[int] = Field(None, gt=0)
    survey_url: Optional[str] = Field(None, max_length=500)
    purchase_message: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name_not_null(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("Tên khóa học không được để trống")
        return value


class CourseSubmit(BaseModel):
    submission_notes: Optional[str] = Field(None, max_length=1000)


class CourseArchive(BaseModel):
    archive_reason: Optional[str] = Field(None, max_length=500)


class CourseBrief(BaseModel):
    id: int
    uuid: str
    teacher_id: int
    name: str
    main_image: Optional[str] = None
    rate: Decimal
    review_count: int
    view_count: int
    purchase_count: int
    main_category_id: Optional[int] = None
    sub_category_id: Optional[int] = None
    city_id: Optional[int] = None
    status: CourseStatus
    application_status: Optional[ApplicationStatus] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @field_serializer("rate")
    def serialize_rate(self, value: Decimal):
        return float(value)


class CourseRead(CourseBrief):
    content: Optional[str] = None
    survey_url: Optional[str] = None
    purchase_message: Optional[str] = None
    submission_notes: Optional[str] = None
    review_notes: Optional[str] = None
    archive_reason: Optional[str] = None
    price_options: List[PriceOptionRead] = Field(default_factory=list, validation_alias="active_price_options")

    class Config:
        from_attributes = True
        populate_by_name = True


class CourseListResult(BaseModel):
    courses: List[CourseBrief]
    pagination: PaginationInfo


class PublicCourseItem(CourseBrief):
    min_price: Optional[float] = None
    teacher_name: Optional[str] = None


class PublicCourseListResult(BaseModel):
    courses: List[PublicCourseItem]
    pagination: PaginationInfo


class MainCategoryBrief(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class PublicCourseDetail(BaseModel):
    course: CourseRead
    teacher: TeacherPublic
    main_category: Optional[MainCategoryBrief] = None
    sub_category: Optional[SubCategoryRead] = None
    city: Optional[CityRead] = None
    price_options: List[PriceOptionRead]


class CourseAdminView(CourseBrief):
    """Khóa học chờ duyệt, dùng cho trang quản trị."""
    content: Optional[str] = None
    submission_notes: Optional[str] = None
    review_notes: Optional[str] = None
