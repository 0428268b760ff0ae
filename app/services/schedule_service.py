# app/services/schedule_service.py
import logging
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.constants import (
    DEFAULT_CONFLICT_CHECK_DAYS,
    MAX_CONFLICT_CHECK_DAYS,
    SLOT_DURATION_MINUTES,
    WEEKLY_DAY_KEYS,
)
from app.core.exceptions import BusinessError, ErrorCode
from app.crud import schedule_crud
from app.schemas.schedule_schema import ScheduleUpdateRequest, WeeklyScheduleRequest
from app.services import teacher_service
from app.services.service_helper import (
    add_minutes,
    format_time,
    js_weekday,
    to_naive_time,
    weekday_to_weekly_key,
    weekly_key_to_weekday,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------
# AVAILABLE SLOTS
# ---------------------------------------------------------

def get_schedule(db: Session, user_id: int) -> dict:
    teacher = teacher_service.get_approved_teacher_for_user(db, user_id)
    slots = schedule_crud.get_slots_by_teacher(db, teacher.id)
    return {"available_slots": slots, "total_slots": len(slots)}


def update_schedule(db: Session, user_id: int, data: ScheduleUpdateRequest) -> dict:
    teacher = teacher_service.get_approved_teacher_for_user(db, user_id)

    new_slots = [
        {
            "weekday": slot.weekday,
            "start_time": to_naive_time(slot.start_time),
            "end_time": to_naive_time(slot.end_time),
            "is_active": slot.is_active,
        }
        for slot in data.available_slots
    ]
    created, deleted_count = schedule_crud.replace_slots(db, teacher.id, new_slots)
    logger.info(f"Giáo viên id={teacher.id} cập nhật lịch: tạo {len(created)}, xóa {deleted_count}")
    return {
        "available_slots": created,
        "total_slots": len(created),
        "updated_count": 0,
        "created_count": len(created),
        "deleted_count": deleted_count,
    }


def get_public_slots(db: Session, teacher_id: int):
    teacher = teacher_service.get_public_teacher(db, teacher_id)
    return schedule_crud.get_slots_by_teacher(db, teacher.id, active_only=True)


# ---------------------------------------------------------
# CONFLICT CHECK
# ---------------------------------------------------------

def _resolve_period(from_date: Optional[date], to_date: Optional[date]) -> tuple[date, date]:
    from_date = from_date or date.today()
    to_date = to_date or from_date + timedelta(days=DEFAULT_CONFLICT_CHECK_DAYS)
    if from_date >= to_date:
        raise BusinessError(ErrorCode.SCHEDULE_INVALID_DATE_RANGE, "Ngày bắt đầu phải trước ngày kết thúc")
    if (to_date - from_date).days > MAX_CONFLICT_CHECK_DAYS:
        raise BusinessError(
            ErrorCode.SCHEDULE_INVALID_DATE_RANGE,
            f"Khoảng thời gian kiểm tra không được vượt quá {MAX_CONFLICT_CHECK_DAYS} ngày",
        )
    return from_date, to_date


def check_conflicts(
    db: Session,
    user_id: int,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    slot_ids: Optional[List[int]] = None,
) -> dict:
    """
    Tìm các buổi học đã đặt (reserved/completed) rơi vào khung giờ rảnh của giáo viên.
    Thời điểm t thuộc khung giờ khi start <= t < end.
    """
    teacher = teacher_service.get_approved_teacher_for_user(db, user_id)
    from_date, to_date = _resolve_period(from_date, to_date)

    if slot_ids:
        slots = schedule_crud.get_slots_by_ids(db, teacher.id, slot_ids)
    else:
        slots = schedule_crud.get_slots_by_teacher(db, teacher.id)
    reservations = schedule_crud.get_reservations_in_range(
        db,
        teacher.id,
        datetime.combine(from_date, time.min),
        datetime.combine(to_date, time.max),
    )

    conflicts = []
    for reservation in reservations:
        reserve_weekday = js_weekday(reservation.reserve_time.date())
        reserve_at = reservation.reserve_time.time()
        for slot in slots:
            if slot.weekday == reserve_weekday and slot.start_time <= reserve_at < slot.end_time:
                conflicts.append({
                    "slot_id": slot.id,
                    "reservation_id": reservation.id,
                    "reserve_time": reservation.reserve_time,
                    "student_id": reservation.student_id,
                    "reason": (
                        f"Buổi học lúc {format_time(reserve_at)} trùng với khung giờ "
                        f"{format_time(slot.start_time)}-{format_time(slot.end_time)}"
                    ),
                })

    return {
        "has_conflicts": bool(conflicts),
        "conflicts": conflicts,
        "total_conflicts": len(conflicts),
        "check_period": {"from_date": from_date, "to_date": to_date},
    }


# ---------------------------------------------------------
# WEEKLY SCHEDULE
# ---------------------------------------------------------

def _to_weekly(slots) -> tuple[Dict[str, List[str]], Dict[str, int]]:
    weekly: Dict[str, List[str]] = {key: [] for key in WEEKLY_DAY_KEYS}
    for slot in slots:
        if slot.is_active:
            weekly[weekday_to_weekly_key(slot.weekday)].append(format_time(slot.start_time))
    for key in weekly:
        weekly[key].sort()
    slots_by_day = {key: len(value) for key, value in weekly.items()}
    return weekly, slots_by_day


def get_weekly_schedule(db: Session, user_id: int) -> dict:
    teacher = teacher_service.get_approved_teacher_for_user(db, user_id)
    weekly, slots_by_day = _to_weekly(schedule_crud.get_slots_by_teacher(db, teacher.id))
    return {
        "weekly_schedule": weekly,
        "total_slots": sum(slots_by_day.values()),
        "slots_by_day": slots_by_day,
    }


def update_weekly_schedule(db: Session, user_id: int, data: WeeklyScheduleRequest) -> dict:
    """Dựng lại toàn bộ lịch từ lịch tuần; mỗi khung giờ kéo dài một tiếng."""
    teacher = teacher_service.get_approved_teacher_for_user(db, user_id)

    new_slots = []
    for key, starts in data.weekly_schedule.items():
        for start in starts:
            start_time = to_naive_time(start)
            new_slots.append({
                "weekday": weekly_key_to_weekday(key),
                "start_time": start_time,
                "end_time": add_minutes(start_time, SLOT_DURATION_MINUTES),
                "is_active": True,
            })

    created, deleted_count = schedule_crud.replace_slots(db, teacher.id, new_slots)
    weekly, slots_by_day = _to_weekly(created)
    return {
        "weekly_schedule": weekly,
        "total_slots": len(created),
        "slots_by_day": slots_by_day,
        "updated_count": 0,
        "created_count": len(created),
        "deleted_count": deleted_count,
    }
