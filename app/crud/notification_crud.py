from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.models.notification_model import Notification, NotificationType


def get_notification(db: Session, notification_id: int) -> Optional[Notification]:
    """Lấy thông tin thông báo theo ID."""
    return db.query(Notification).filter(Notification.id == notification_id).first()


def get_notifications_by_receiver_id(
    db: Session, receiver_id: int, unread_only: bool = False, skip: int = 0, limit: int = 20
) -> Tuple[List[Notification], int]:
    """Lấy danh sách thông báo theo receiver_id, mới nhất trước."""
    query = db.query(Notification).filter(Notification.receiver_id == receiver_id)
    if unread_only:
        query = query.filter(Notification.is_read == False)  # noqa: E712
    total = query.count()
    items = query.order_by(Notification.created_at.desc(), Notification.id.desc()).offset(skip).limit(limit).all()
    return items, total


def count_unread(db: Session, receiver_id: int) -> int:
    return db.query(Notification).filter(
        Notification.receiver_id == receiver_id,
        Notification.is_read == False,  # noqa: E712
    ).count()


def create_notification(
    db: Session, receiver_id: int, notif_type: NotificationType, title: str, content: str, commit: bool = True
) -> Notification:
    """Tạo mới một thông báo. commit=False để gộp vào transaction của nghiệp vụ gọi tới."""
    db_notification = Notification(receiver_id=receiver_id, type=notif_type, title=title, content=content)
    db.add(db_notification)
    if commit:
        db.commit()
        db.refresh(db_notification)
    return db_notification


def update_is_read_status(db: Session, db_notification: Notification, is_read: bool) -> Notification:
    """
    Cập nhật trạng thái 'is_read' của một thông báo cụ thể.
    """
    db_notification.is_read = is_read
    db.commit()
    db.refresh(db_notification)
    return db_notification


def mark_all_read(db: Session, receiver_id: int) -> int:
    updated = db.query(Notification).filter(
        Notification.receiver_id == receiver_id,
        Notification.is_read == False,  # noqa: E712
    ).update({Notification.is_read: True}, synchronize_session=False)
    db.commit()
    return updated
