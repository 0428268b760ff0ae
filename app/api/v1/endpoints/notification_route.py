from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api import deps
from app.api.auth.auth import get_current_active_user
from app.schemas import notification_schema
from app.schemas.auth_schema import AuthenticatedUser
from app.schemas.common_schema import ApiResponse, MessageResponse, success
from app.services import notification_service

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[notification_schema.NotificationListResult],
    summary="Lấy danh sách thông báo của tôi",
)
def get_my_notifications(
    unread_only: bool = Query(False),
    pagination: deps.Pagination = Depends(deps.pagination_params),
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    """
    Quyền truy cập: **mọi vai trò đã đăng nhập**, chỉ trả về thông báo mà người dùng là người nhận.
    """
    result = notification_service.list_notifications(
        db, current_user.user_id, unread_only, pagination.page, pagination.per_page
    )
    return success(result, "Lấy danh sách thông báo thành công")


@router.put("/read-all", response_model=MessageResponse, summary="Đánh dấu tất cả đã đọc")
def mark_all_notifications_read(
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    count = notification_service.mark_all_read(db, current_user.user_id)
    return {"status": "success", "message": f"Đã đánh dấu {count} thông báo là đã đọc"}


@router.put(
    "/{notification_id}/read",
    response_model=ApiResponse[notification_schema.NotificationRead],
    summary="Đánh dấu thông báo đã đọc",
)
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    notification = notification_service.mark_read(db, current_user.user_id, notification_id)
    return success(notification_schema.NotificationRead.model_validate(notification), "Đã đánh dấu đã đọc")
