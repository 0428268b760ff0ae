# app/crud/reservation_crud.py
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from app.models.reservation_model import Reservation, ReservationStatus


def get_reservation(db: Session, reservation_id: int) -> Optional[Reservation]:
    return db.query(Reservation).filter(Reservation.id == reservation_id, Reservation.deleted_at.is_(None)).first()


def get_reservation_by_uuid(db: Session, reservation_uuid: str) -> Optional[Reservation]:
    return db.query(Reservation).filter(Reservation.uuid == reservation_uuid, Reservation.deleted_at.is_(None)).first()


def find_conflict(db: Session, teacher_id: int, reserve_time: datetime) -> Optional[Reservation]:
    """Lịch chưa bị hủy của giáo viên tại đúng thời điểm này."""
    return db.query(Reservation).filter(
        Reservation.teacher_id == teacher_id,
        Reservation.reserve_time == reserve_time,
        Reservation.teacher_status != ReservationStatus.cancelled,
        Reservation.deleted_at.is_(None),
    ).first()


def count_pending(db: Session, student_id: int, course_id: int) -> int:
    """Lịch đang chờ giáo viên xác nhận (chưa trừ buổi học)."""
    return db.query(Reservation).filter(
        Reservation.student_id == student_id,
        Reservation.course_id == course_id,
        Reservation.teacher_status == ReservationStatus.pending,
        Reservation.deleted_at.is_(None),
    ).count()


def get_reservations(
    db: Session,
    *,
    student_id: Optional[int] = None,
    teacher_id: Optional[int] = None,
    status: Optional[ReservationStatus] = None,
    course_id: Optional[int] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    skip: int = 0,
    limit: int = 10,
) -> Tuple[List[Reservation], int]:
    query = db.query(Reservation).filter(Reservation.deleted_at.is_(None))
    if student_id is not None:
        query = query.filter(Reservation.student_id == student_id)
        if status:
            query = query.filter(Reservation.student_status == status)
    if teacher_id is not None:
        query = query.filter(Reservation.teacher_id == teacher_id)
        if status:
            query = query.filter(Reservation.teacher_status == status)
    if course_id:
        query = query.filter(Reservation.course_id == course_id)
    if date_from:
        query = query.filter(Reservation.reserve_time >= date_from)
    if date_to:
        query = query.filter(Reservation.reserve_time <= date_to)

    total = query.count()
    items = (
        query.options(joinedload(Reservation.course), joinedload(Reservation.student))
        .order_by(Reservation.reserve_time.desc(), Reservation.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return items, total


def get_reservations_between(
    db: Session, start: datetime, end: datetime, student_id: Optional[int] = None, teacher_id: Optional[int] = None
) -> List[Reservation]:
    query = db.query(Reservation).options(
        joinedload(Reservation.course), joinedload(Reservation.student), joinedload(Reservation.teacher)
    ).filter(
        Reservation.reserve_time >= start,
        Reservation.reserve_time <= end,
        Reservation.deleted_at.is_(None),
    )
    if student_id is not None:
        query = query.filter(Reservation.student_id == student_id)
    if teacher_id is not None:
        query = query.filter(Reservation.teacher_id == teacher_id)
    return query.order_by(Reservation.reserve_time.asc()).all()


def get_overdue_pending(db: Session, now: datetime) -> List[Reservation]:
    return db.query(Reservation).filter(
        Reservation.teacher_status == ReservationStatus.pending,
        Reservation.response_deadline.isnot(None),
        Reservation.response_deadline < now,
        Reservation.deleted_at.is_(None),
    ).all()


def save(db: Session, db_reservation: Reservation, commit: bool = True) -> Reservation:
    db.add(db_reservation)
    if commit:
        db.commit()
        db.refresh(db_reservation)
    return db_reservation
