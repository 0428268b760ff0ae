from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer

from app.schemas.common_schema import PaginationInfo


class FavoriteAdd(BaseModel):
    course_id: int = Field(..., gt=0)


class FavoriteRead(BaseModel):
    id: int
    uuid: str
    user_id: int
    course_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class FavoriteCourse(BaseModel):
    id: int
    uuid: str
    name: str
    content: Optional[str] = None
    main_image: Optional[str] = None
    rate: Decimal
    review_count: int
    student_count: int

    class Config:
        from_attributes = True

    @field_serializer("rate")
    def serialize_rate(self, value: Decimal):
        return float(value)


class FavoriteItem(BaseModel):
    id: int
    course: FavoriteCourse
    created_at: datetime

    class Config:
        from_attributes = True


class FavoriteListResult(BaseModel):
    favorites: List[FavoriteItem]
    pagination: PaginationInfo


class FavoriteStatus(BaseModel):
    course_id: int
    is_favorited: bool
