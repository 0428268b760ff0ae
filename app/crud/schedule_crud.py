# app/crud/schedule_crud.py
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.reservation_model import Reservation, ReservationStatus
from app.models.schedule_model import TeacherAvailableSlot


def get_slots_by_teacher(db: Session, teacher_id: int, active_only: bool = False) -> List[TeacherAvailableSlot]:
    """Lấy các khung giờ của giáo viên, sắp theo thứ và giờ bắt đầu."""
    query = db.query(TeacherAvailableSlot).filter(TeacherAvailableSlot.teacher_id == teacher_id)
    if active_only:
        query = query.filter(TeacherAvailableSlot.is_active == True)  # noqa: E712
    return query.order_by(TeacherAvailableSlot.weekday, TeacherAvailableSlot.start_time).all()


def get_slots_by_ids(db: Session, teacher_id: int, slot_ids: List[int]) -> List[TeacherAvailableSlot]:
    return db.query(TeacherAvailableSlot).filter(
        TeacherAvailableSlot.teacher_id == teacher_id,
        TeacherAvailableSlot.id.in_(slot_ids),
    ).all()


def find_slot_containing(db: Session, teacher_id: int, weekday: int, at) -> Optional[TeacherAvailableSlot]:
    """Khung giờ đang hoạt động chứa thời điểm `at` (start <= at < end)."""
    return db.query(TeacherAvailableSlot).filter(
        TeacherAvailableSlot.teacher_id == teacher_id,
        TeacherAvailableSlot.weekday == weekday,
        TeacherAvailableSlot.is_active == True,  # noqa: E712
        TeacherAvailableSlot.start_time <= at,
        TeacherAvailableSlot.end_time > at,
    ).first()


def replace_slots(db: Session, teacher_id: int, new_slots: List[dict]) -> tuple[List[TeacherAvailableSlot], int]:
    """
    Xóa toàn bộ khung giờ cũ rồi tạo mới trong cùng một transaction.
    Trả về (danh sách khung giờ mới, số khung giờ đã xóa).
    """
    try:
        deleted_count = db.query(TeacherAvailableSlot).filter(
            TeacherAvailableSlot.teacher_id == teacher_id
        ).delete(synchronize_session=False)
        created = [TeacherAvailableSlot(teacher_id=teacher_id, **slot) for slot in new_slots]
        db.add_all(created)
        db.commit()
    except Exception:
        db.rollback()
        raise
    for slot in created:
        db.refresh(slot)
    return created, deleted_count


def get_reservations_in_range(
    db: Session, teacher_id: int, from_time: datetime, to_time: datetime
) -> List[Reservation]:
    return db.query(Reservation).filter(
        Reservation.teacher_id == teacher_id,
        Reservation.reserve_time >= from_time,
        Reservation.reserve_time <= to_time,
        Reservation.teacher_status.in_([ReservationStatus.reserved, ReservationStatus.completed]),
        Reservation.deleted_at.is_(None),
    ).all()
