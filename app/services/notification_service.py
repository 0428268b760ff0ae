# app/services/notification_service.py
import logging

from sqlalchemy.orm import Session

from app.core.exceptions import ErrorCode, NotFoundError
from app.crud import notification_crud
from app.models.notification_model import Notification, NotificationType
from app.services.service_helper import build_pagination

logger = logging.getLogger(__name__)


def send_notification(
    db: Session,
    receiver_id: int,
    title: str,
    content: str,
    notif_type: NotificationType,
    commit: bool = True,
) -> Notification:
    notification = notification_crud.create_notification(db, receiver_id, notif_type, title, content, commit=commit)
    logger.debug(f"Gửi thông báo '{title}' tới user id={receiver_id}")
    return notification


def list_notifications(db: Session, user_id: int, unread_only: bool, page: int, per_page: int) -> dict:
    items, total = notification_crud.get_notifications_by_receiver_id(
        db, user_id, unread_only=unread_only, skip=(page - 1) * per_page, limit=per_page
    )
    return {
        "notifications": items,
        "unread_count": notification_crud.count_unread(db, user_id),
        "pagination": build_pagination(page, per_page, total),
    }


def mark_read(db: Session, user_id: int, notification_id: int) -> Notification:
    notification = notification_crud.get_notification(db, notification_id)
    # Thông báo của người khác cũng trả về 404 để không lộ sự tồn tại
    if not notification or notification.receiver_id != user_id:
        raise NotFoundError(ErrorCode.NOTIFICATION_NOT_FOUND, "Không tìm thấy thông báo")
    return notification_crud.update_is_read_status(db, notification, True)


def mark_all_read(db: Session, user_id: int) -> int:
    return notification_crud.mark_all_read(db, user_id)
