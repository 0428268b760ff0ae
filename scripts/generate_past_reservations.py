"""
Tạo dữ liệu lịch học trong quá khứ cho các khóa học đã mua, phục vụ demo lịch và đánh giá.

Chạy từ thư mục gốc của project:
    python -m scripts.generate_past_reservations --months 3 --count 5 [--student-id 12]
"""
import argparse
import logging
import random
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from app.database import SessionLocal
from app.logging_config import setup_logging
from app.models import *  # noqa: F401,F403
from app.models.purchase_model import UserCoursePurchase
from app.models.reservation_model import Reservation, ReservationStatus
from app.models.schedule_model import TeacherAvailableSlot
from app.models.user_model import User
from app.services.service_helper import js_weekday, utc_now

logger = logging.getLogger("generate_past_reservations")

# Tỉ lệ phần trăm cho completed / cancelled, phần còn lại là overdue
STATUS_DISTRIBUTION = {ReservationStatus.completed: 70, ReservationStatus.cancelled: 20}

CANCEL_REASONS = [
    "Học viên có việc đột xuất",
    "Trùng lịch cần đổi giờ",
    "Không khỏe",
    "Bận công việc",
]


def random_status() -> ReservationStatus:
    roll = random.uniform(0, 100)
    cumulative = 0
    for status, weight in STATUS_DISTRIBUTION.items():
        cumulative += weight
        if roll <= cumulative:
            return status
    return ReservationStatus.overdue


def pick_past_times(
    db: Session, teacher_id: int, slots: List[TeacherAvailableSlot], months: int, count: int
) -> List[datetime]:
    """Chọn ngẫu nhiên các thời điểm trong quá khứ khớp khung giờ rảnh và không trùng lịch có sẵn."""
    end = utc_now()
    start = end - timedelta(days=30 * months)
    span = (end - start).total_seconds()
    picked: List[datetime] = []

    for _ in range(count * 10):
        if len(picked) >= count:
            break
        slot = random.choice(slots)
        candidate = start + timedelta(seconds=random.uniform(0, span))
        candidate += timedelta(days=slot.weekday - js_weekday(candidate.date()))
        if candidate > end:
            candidate -= timedelta(days=7)
        elif candidate < start:
            candidate += timedelta(days=7)
        candidate = candidate.replace(
            hour=slot.start_time.hour, minute=slot.start_time.minute, second=0, microsecond=0
        )
        if candidate >= end or candidate in picked:
            continue
        exists = db.query(Reservation.id).filter(
            Reservation.teacher_id == teacher_id,
            Reservation.reserve_time == candidate,
            Reservation.deleted_at.is_(None),
        ).first()
        if not exists:
            picked.append(candidate)

    if len(picked) < count:
        logger.warning(f"Chỉ tạo được {len(picked)}/{count} thời điểm không trùng lịch")
    return sorted(picked)


def generate_for_purchase(db: Session, purchase: UserCoursePurchase, months: int, count: int) -> int:
    course = purchase.course
    slots = db.query(TeacherAvailableSlot).filter(
        TeacherAvailableSlot.teacher_id == course.teacher_id,
        TeacherAvailableSlot.is_active == True,  # noqa: E712
    ).all()
    if not slots:
        logger.info(f"Purchase id={purchase.id}: giáo viên chưa có khung giờ rảnh, bỏ qua")
        return 0

    wanted = min(count, purchase.quantity_remaining)
    if wanted <= 0:
        logger.info(f"Purchase id={purchase.id}: không còn buổi học, bỏ qua")
        return 0

    used = 0
    times = pick_past_times(db, course.teacher_id, slots, months, wanted)
    for reserve_time in times:
        status = random_status()
        db.add(Reservation(
            course_id=course.id,
            teacher_id=course.teacher_id,
            student_id=purchase.user_id,
            reserve_time=reserve_time,
            teacher_status=status,
            student_status=status,
            rejection_reason=random.choice(CANCEL_REASONS) if status == ReservationStatus.cancelled else None,
        ))
        # Lịch bị hủy không trừ buổi học
        if status != ReservationStatus.cancelled:
            used += 1

    purchase.quantity_used += used
    db.flush()
    logger.info(f"Purchase id={purchase.id}: tạo {len(times)} lịch học, trừ {used} buổi")
    return len(times)


def run(db: Session, months: int, count: int, student_id: Optional[int] = None) -> int:
    try:
        if student_id is not None and not db.get(User, student_id):
            raise ValueError(f"Học viên id={student_id} không tồn tại")

        query = db.query(UserCoursePurchase).order_by(UserCoursePurchase.id)
        if student_id is not None:
            query = query.filter(UserCoursePurchase.user_id == student_id)
        purchases = query.all()
        if not purchases:
            logger.info("Không có bản ghi mua khóa học nào")
            return 0

        total = sum(generate_for_purchase(db, purchase, months, count) for purchase in purchases)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Tạo lịch học thất bại, đã rollback")
        raise
    logger.info(f"Đã tạo {total} lịch học trong quá khứ")
    return total


def parse_args():
    parser = argparse.ArgumentParser(description="Tạo lịch học trong quá khứ cho các khóa học đã mua")
    parser.add_argument("--months", type=int, default=3, help="Số tháng lùi về quá khứ")
    parser.add_argument("--count", type=int, default=5, help="Số lịch học mỗi bản ghi mua")
    parser.add_argument("--student-id", type=int, default=None, help="Chỉ tạo cho một học viên")
    return parser.parse_args()


if __name__ == "__main__":
    setup_logging()
    args = parse_args()
    session = SessionLocal()
    try:
        run(session, args.months, args.count, args.student_id)
    finally:
        session.close()
