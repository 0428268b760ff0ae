from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.common_schema import PaginationInfo
from app.schemas.user_schema import UserBrief


class ReviewSortBy(str, Enum):
    created_at = "created_at"
    rating = "rating"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


class ReviewCreate(BaseModel):
    reservation_uuid: str = Field(..., min_length=1, max_length=36)
    rate: int = Field(..., ge=1, le=5, example=5)
    comment: str = Field(..., min_length=1, max_length=1000, example="Giáo viên dạy rất dễ hiểu")

    @field_validator("comment")
    @classmethod
    def strip_comment(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Nội dung đánh giá không được để trống")
        return value


class ReviewCourseInfo(BaseModel):
    id: int
    uuid: str
    name: str

    class Config:
        from_attributes = True


class ReviewRead(BaseModel):
    id: int
    uuid: str
    reservation_id: int
    course_id: int
    user_id: int
    teacher_id: int
    rate: int
    comment: str
    user: Optional[UserBrief] = None
    course: Optional[ReviewCourseInfo] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RatingStats(BaseModel):
    average_rating: float
    total_reviews: int
    rating_distribution: Dict[str, int]


class CourseReviewsResult(BaseModel):
    reviews: List[ReviewRead]
    rating_stats: RatingStats
    pagination: PaginationInfo


class ReviewListResult(BaseModel):
    reviews: List[ReviewRead]
    pagination: PaginationInfo
