# app/services/reservation_service.py
import calendar
import logging
from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from app.constants import (
    CANCEL_MIN_HOURS_BEFORE,
    NORMAL_RESPONSE_HOURS,
    SLOT_DURATION_MINUTES,
    URGENT_RESPONSE_HOURS,
)
from app.core.exceptions import (
    BusinessError,
    ConflictError,
    ErrorCode,
    NotFoundError,
    PermissionDeniedError,
)
from app.crud import course_crud, purchase_crud, reservation_crud, schedule_crud, teacher_crud
from app.models.course_model import CourseStatus
from app.models.notification_model import NotificationType
from app.models.reservation_model import Reservation, ReservationStatus
from app.models.teacher_model import Teacher
from app.schemas.reservation_schema import (
    CalendarViewType,
    ReservationCreate,
    ReservationRole,
    StatusType,
)
from app.services import notification_service, purchase_service
from app.services.service_helper import build_pagination, js_weekday, to_naive_time, utc_now

logger = logging.getLogger(__name__)


# ---------------------------------------------------------
# HELPERS
# ---------------------------------------------------------

def _get_reservation(db: Session, reservation_id: int) -> Reservation:
    reservation = reservation_crud.get_reservation(db, reservation_id)
    if not reservation:
        raise NotFoundError(ErrorCode.RESERVATION_NOT_FOUND, "Không tìm thấy lịch học")
    return reservation


def _teacher_of_user(db: Session, user_id: int) -> Optional[Teacher]:
    return teacher_crud.get_teacher_by_user_id(db, user_id)


def _require_teacher(db: Session, user_id: int, reservation: Reservation) -> Teacher:
    teacher = _teacher_of_user(db, user_id)
    if not teacher or teacher.id != reservation.teacher_id:
        raise PermissionDeniedError(ErrorCode.RESERVATION_FORBIDDEN, "Bạn không có quyền với lịch học này")
    return teacher


def _require_student(user_id: int, reservation: Reservation):
    if reservation.student_id != user_id:
        raise PermissionDeniedError(ErrorCode.RESERVATION_FORBIDDEN, "Bạn không có quyền với lịch học này")


def calculate_response_deadline(reserve_time: datetime, now: Optional[datetime] = None) -> datetime:
    """
    Lịch học trước khi hết ngày mai: giáo viên có 12 giờ để phản hồi, các lịch khác 24 giờ.
    """
    now = now or utc_now()
    end_of_tomorrow = datetime.combine(now.date() + timedelta(days=2), datetime.min.time())
    hours = URGENT_RESPONSE_HOURS if reserve_time < end_of_tomorrow else NORMAL_RESPONSE_HOURS
    return now + timedelta(hours=hours)


def display_status(reservation: Reservation) -> str:
    if ReservationStatus.cancelled in (reservation.teacher_status, reservation.student_status):
        return "cancelled"
    if reservation.teacher_status == reservation.student_status == ReservationStatus.completed:
        return "completed"
    if reservation.teacher_status == ReservationStatus.pending:
        return "pending"
    return "reserved"


# ---------------------------------------------------------
# STUDENT: ĐẶT LỊCH
# ---------------------------------------------------------

def create_reservation(db: Session, user_id: int, data: ReservationCreate) -> dict:
    purchase = purchase_crud.get_purchase(db, user_id, data.course_id)
    if not purchase:
        raise BusinessError(ErrorCode.RESERVATION_COURSE_NOT_PURCHASED, "Bạn chưa mua khóa học này")

    pending = reservation_crud.count_pending(db, user_id, data.course_id)
    if purchase.quantity_remaining - pending <= 0:
        raise BusinessError(ErrorCode.RESERVATION_INSUFFICIENT_LESSONS, "Không còn buổi học để đặt lịch")

    course = course_crud.get_course(db, data.course_id)
    if not course or course.teacher_id != data.teacher_id or course.status != CourseStatus.published:
        raise BusinessError(ErrorCode.RESERVATION_TEACHER_UNAVAILABLE, "Giáo viên không dạy khóa học này")

    reserve_at = datetime.combine(data.reserve_date, to_naive_time(data.reserve_time))
    if reserve_at <= utc_now():
        raise BusinessError(ErrorCode.RESERVATION_PAST_TIME, "Không thể đặt lịch cho thời điểm đã qua")

    slot = schedule_crud.find_slot_containing(db, data.teacher_id, js_weekday(data.reserve_date), reserve_at.time())
    if not slot:
        raise BusinessError(ErrorCode.RESERVATION_TEACHER_UNAVAILABLE, "Giáo viên không rảnh vào thời điểm này")

    if reservation_crud.find_conflict(db, data.teacher_id, reserve_at):
        raise ConflictError(ErrorCode.RESERVATION_CONFLICT, "Khung giờ này đã có người đặt")

    try:
        reservation = Reservation(
            course_id=data.course_id,
            teacher_id=data.teacher_id,
            student_id=user_id,
            reserve_time=reserve_at,
            teacher_status=ReservationStatus.pending,
            student_status=ReservationStatus.reserved,
            response_deadline=calculate_response_deadline(reserve_at),
        )
        db.add(reservation)
        notification_service.send_notification(
            db,
            course.teacher.user_id,
            "Yêu cầu đặt lịch mới",
            f"Có yêu cầu đặt lịch khóa học '{course.name}' vào {reserve_at:%Y-%m-%d %H:%M}.",
            NotificationType.reservation,
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(reservation)

    logger.info(f"User id={user_id} đặt lịch id={reservation.id} với giáo viên id={data.teacher_id}")
    reserved = pending + 1
    return {
        "reservation": reservation,
        "remaining_lessons": {
            "total": purchase.quantity_total,
            "used": purchase.quantity_used,
            "reserved": reserved,
            "remaining": purchase.quantity_remaining - reserved,
        },
    }


def list_reservations(
    db: Session,
    user_id: int,
    role: ReservationRole,
    status: Optional[ReservationStatus],
    course_id: Optional[int],
    date_from: Optional[date],
    date_to: Optional[date],
    page: int,
    per_page: int,
) -> dict:
    filters = {}
    if role == ReservationRole.teacher:
        teacher = _teacher_of_user(db, user_id)
        if not teacher:
            raise NotFoundError(ErrorCode.TEACHER_NOT_FOUND, "Không tìm thấy hồ sơ giáo viên")
        filters["teacher_id"] = teacher.id
    else:
        filters["student_id"] = user_id

    items, total = reservation_crud.get_reservations(
        db,
        status=status,
        course_id=course_id,
        date_from=datetime.combine(date_from, datetime.min.time()) if date_from else None,
        date_to=datetime.combine(date_to, datetime.max.time()) if date_to else None,
        skip=(page - 1) * per_page,
        limit=per_page,
        **filters,
    )
    return {"reservations": items, "pagination": build_pagination(page, per_page, total)}


# ---------------------------------------------------------
# CẬP NHẬT TRẠNG THÁI
# ---------------------------------------------------------

def update_status(db: Session, user_id: int, reservation_id: int, status_type: StatusType) -> dict:
    reservation = _get_reservation(db, reservation_id)
    if status_type == StatusType.teacher_complete:
        _require_teacher(db, user_id, reservation)
    else:
        _require_student(user_id, reservation)

    if ReservationStatus.cancelled in (reservation.teacher_status, reservation.student_status):
        raise BusinessError(ErrorCode.RESERVATION_INVALID_STATUS, "Lịch học đã bị hủy")
    if reservation.teacher_status == ReservationStatus.pending:
        raise BusinessError(ErrorCode.RESERVATION_INVALID_STATUS, "Lịch học chưa được xác nhận")
    if reservation.reserve_time > utc_now():
        raise BusinessError(ErrorCode.RESERVATION_INVALID_STATUS, "Buổi học chưa diễn ra")

    if status_type == StatusType.teacher_complete:
        reservation.teacher_status = ReservationStatus.completed
    else:
        reservation.student_status = ReservationStatus.completed

    reservation = reservation_crud.save(db, reservation)
    return {
        "reservation": reservation,
        "is_fully_completed": (
            reservation.teacher_status == ReservationStatus.completed
            and reservation.student_status == ReservationStatus.completed
        ),
    }


def cancel_reservation(db: Session, user_id: int, reservation_id: int, reason: Optional[str] = None) -> dict:
    reservation = _get_reservation(db, reservation_id)
    teacher = _teacher_of_user(db, user_id)
    is_teacher = teacher is not None and teacher.id == reservation.teacher_id
    if reservation.student_id != user_id and not is_teacher:
        raise PermissionDeniedError(ErrorCode.RESERVATION_FORBIDDEN, "Bạn không có quyền hủy lịch học này")

    if ReservationStatus.completed in (reservation.teacher_status, reservation.student_status):
        raise BusinessError(ErrorCode.RESERVATION_INVALID_STATUS, "Lịch học đã hoàn thành, không thể hủy")
    if ReservationStatus.cancelled in (reservation.teacher_status, reservation.student_status):
        raise BusinessError(ErrorCode.RESERVATION_INVALID_STATUS, "Lịch học đã bị hủy trước đó")
    if reservation.reserve_time - utc_now() < timedelta(hours=CANCEL_MIN_HOURS_BEFORE):
        raise BusinessError(
            ErrorCode.RESERVATION_CANCEL_TOO_LATE,
            f"Chỉ có thể hủy lịch trước giờ học ít nhất {CANCEL_MIN_HOURS_BEFORE} giờ",
        )

    # Buổi học chỉ bị trừ khi giáo viên đã xác nhận
    was_consumed = reservation.teacher_status == ReservationStatus.reserved
    refunded = 0
    try:
        reservation.teacher_status = ReservationStatus.cancelled
        reservation.student_status = ReservationStatus.cancelled
        reservation.response_deadline = None
        reservation.cancel_reason = reason
        if was_consumed:
            purchase = purchase_crud.get_purchase(db, reservation.student_id, reservation.course_id)
            if purchase and purchase.quantity_used > 0:
                purchase_service.refund_one(db, purchase, commit=False)
                refunded = 1
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(reservation)

    logger.info(f"Lịch học id={reservation.id} đã bị hủy bởi user id={user_id}")
    return {"reservation": reservation, "refunded_lessons": refunded}


def confirm_reservation(db: Session, user_id: int, reservation_id: int) -> Reservation:
    reservation = _get_reservation(db, reservation_id)
    _require_teacher(db, user_id, reservation)
    if reservation.teacher_status != ReservationStatus.pending:
        raise BusinessError(ErrorCode.RESERVATION_INVALID_STATUS, "Chỉ có thể xác nhận lịch học đang chờ")
    if reservation.response_deadline and utc_now() > reservation.response_deadline:
        raise BusinessError(ErrorCode.RESERVATION_RESPONSE_EXPIRED, "Đã quá hạn phản hồi lịch học")

    purchase = purchase_crud.get_purchase(db, reservation.student_id, reservation.course_id)
    if not purchase:
        raise BusinessError(ErrorCode.RESERVATION_COURSE_NOT_PURCHASED, "Học viên chưa mua khóa học này")

    try:
        purchase_service.consume(db, purchase, 1, commit=False)
        reservation.teacher_status = ReservationStatus.reserved
        reservation.response_deadline = None
        notification_service.send_notification(
            db,
            reservation.student_id,
            "Lịch học đã được xác nhận",
            f"Giáo viên đã xác nhận buổi học vào {reservation.reserve_time:%Y-%m-%d %H:%M}.",
            NotificationType.reservation,
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(reservation)
    return reservation


def reject_reservation(db: Session, user_id: int, reservation_id: int, reason: Optional[str] = None) -> Reservation:
    reservation = _get_reservation(db, reservation_id)
    _require_teacher(db, user_id, reservation)
    if reservation.teacher_status != ReservationStatus.pending:
        raise BusinessError(ErrorCode.RESERVATION_INVALID_STATUS, "Chỉ có thể từ chối lịch học đang chờ")

    try:
        reservation.teacher_status = ReservationStatus.cancelled
        reservation.student_status = ReservationStatus.cancelled
        reservation.response_deadline = None
        reservation.rejection_reason = reason
        notification_service.send_notification(
            db,
            reservation.student_id,
            "Lịch học bị từ chối",
            f"Giáo viên đã từ chối buổi học vào {reservation.reserve_time:%Y-%m-%d %H:%M}."
            + (f" Lý do: {reason}" if reason else ""),
            NotificationType.reservation,
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(reservation)
    return reservation


# ---------------------------------------------------------
# LỊCH DẠNG TUẦN / THÁNG
# ---------------------------------------------------------

def _calendar_range(view: CalendarViewType, target: date) -> tuple[date, date]:
    if view == CalendarViewType.week:
        start = target - timedelta(days=target.weekday())
        return start, start + timedelta(days=6)
    last_day = calendar.monthrange(target.year, target.month)[1]
    return target.replace(day=1), target.replace(day=last_day)


def get_calendar(db: Session, user_id: int, view: CalendarViewType, target: date, role: ReservationRole) -> dict:
    start, end = _calendar_range(view, target)
    filters = {}
    if role == ReservationRole.teacher:
        teacher = _teacher_of_user(db, user_id)
        if not teacher:
            raise NotFoundError(ErrorCode.TEACHER_NOT_FOUND, "Không tìm thấy hồ sơ giáo viên")
        filters["teacher_id"] = teacher.id
    else:
        filters["student_id"] = user_id

    reservations = reservation_crud.get_reservations_between(
        db,
        datetime.combine(start, datetime.min.time()),
        datetime.combine(end, datetime.max.time()),
        **filters,
    )

    by_day = {}
    for reservation in reservations:
        if role == ReservationRole.teacher:
            participant_id = reservation.student_id
            participant_name = reservation.student.nick_name if reservation.student else None
        else:
            participant_id = reservation.teacher_id
            teacher_user = reservation.teacher.user if reservation.teacher else None
            participant_name = teacher_user.nick_name if teacher_user else None
        by_day.setdefault(reservation.reserve_time.date(), []).append({
            "id": reservation.id,
            "uuid": reservation.uuid,
            "time": reservation.reserve_time.strftime("%H:%M"),
            "duration": SLOT_DURATION_MINUTES,
            "status": display_status(reservation),
            "course_id": reservation.course_id,
            "course_name": reservation.course.name if reservation.course else None,
            "participant_id": participant_id,
            "participant_name": participant_name,
        })

    days = []
    current = start
    while current <= end:
        days.append({"date": current, "weekday": js_weekday(current), "reservations": by_day.get(current, [])})
        current += timedelta(days=1)

    result = {
        "view": view,
        "period": {"start_date": start, "end_date": end},
        "calendar_data": days,
        "summary": None,
    }
    if view == CalendarViewType.month:
        result["period"].update({"year": target.year, "month": target.month})
        statuses = [display_status(reservation) for reservation in reservations]
        result["summary"] = {
            "total_reservations": len(reservations),
            "completed_reservations": statuses.count("completed"),
            "upcoming_reservations": statuses.count("reserved"),
        }
    return result


# ---------------------------------------------------------
# JOB ĐỊNH KỲ
# ---------------------------------------------------------

def expire_overdue(db: Session) -> int:
    """
    Hủy các lịch học giáo viên không phản hồi trước response_deadline.
    Được APScheduler gọi định kỳ.
    """
    now = utc_now()
    overdue = reservation_crud.get_overdue_pending(db, now)
    if not overdue:
        return 0
    try:
        for reservation in overdue:
            reservation.teacher_status = ReservationStatus.cancelled
            reservation.student_status = ReservationStatus.cancelled
            reservation.cancel_reason = "Giáo viên không phản hồi trước thời hạn"
            reservation.response_deadline = None
            notification_service.send_notification(
                db,
                reservation.student_id,
                "Lịch học đã hết hạn",
                f"Yêu cầu đặt lịch vào {reservation.reserve_time:%Y-%m-%d %H:%M} đã hết hạn do giáo viên không phản hồi.",
                NotificationType.reservation,
                commit=False,
            )
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Đã hủy {len(overdue)} lịch học quá hạn phản hồi")
    return len(overdue)
