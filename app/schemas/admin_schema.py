from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.admin_model import AdminRole
from app.schemas.common_schema import PaginationInfo
from app.schemas.course_schema import CourseAdminView
from app.schemas.teacher_schema import TeacherApplicationAdminView


class AdminLoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50, example="admin")
    password: str = Field(..., min_length=1, example="Admin@123")


class AdminProfile(BaseModel):
    id: int
    username: str
    name: str
    email: str
    role: AdminRole
    is_active: bool
    last_login_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminLoginResult(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    admin: AdminProfile


class ReviewDecision(BaseModel):
    """Ghi chú khi duyệt hoặc lý do khi từ chối."""
    notes: Optional[str] = Field(None, max_length=1000)


class RejectDecision(BaseModel):
    reason: str = Field(..., min_length=1, max_length=1000)


class TeacherApplicationList(BaseModel):
    applications: List[TeacherApplicationAdminView]
    pagination: PaginationInfo


class CourseApplicationList(BaseModel):
    courses: List[CourseAdminView]
    pagination: PaginationInfo
