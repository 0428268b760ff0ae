from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from app.models.notification_model import NotificationType
from app.schemas.common_schema import PaginationInfo


class NotificationRead(BaseModel):
    """
    Thông báo gửi tới người dùng (duyệt hồ sơ, duyệt khóa học, đặt lịch...).
    """
    id: int
    receiver_id: int
    type: NotificationType = Field(..., example=NotificationType.teacher_application)
    title: str
    content: str = Field(..., example="Hồ sơ giáo viên của bạn đã được duyệt.")
    is_read: bool = False
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationListResult(BaseModel):
    notifications: List[NotificationRead]
    unread_count: int
    pagination: PaginationInfo
