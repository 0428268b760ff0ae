# app/services/review_service.py
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import BusinessError, ConflictError, ErrorCode, NotFoundError
from app.crud import course_crud, reservation_crud, review_crud, teacher_crud
from app.models.course_model import CourseStatus
from app.models.reservation_model import ReservationStatus
from app.models.review_model import Review
from app.schemas.review_schema import ReviewCreate
from app.services.service_helper import build_pagination

logger = logging.getLogger(__name__)

REVIEWABLE_STATUSES = (ReservationStatus.completed, ReservationStatus.overdue)


def _two_decimals(value: float) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def submit_review(db: Session, user_id: int, data: ReviewCreate) -> Review:
    """
    Học viên đánh giá một buổi học đã hoàn thành.
    Lưu đánh giá và tính lại điểm của khóa học, giáo viên trong cùng một transaction.
    """
    reservation = reservation_crud.get_reservation_by_uuid(db, data.reservation_uuid)
    if not reservation or reservation.student_id != user_id:
        raise NotFoundError(ErrorCode.RESERVATION_NOT_FOUND, "Không tìm thấy lịch học")
    if reservation.student_status not in REVIEWABLE_STATUSES:
        raise BusinessError(
            ErrorCode.REVIEW_RESERVATION_NOT_COMPLETED,
            "Chỉ có thể đánh giá buổi học đã hoàn thành",
        )
    if review_crud.get_review_by_reservation(db, reservation.id):
        raise ConflictError(ErrorCode.REVIEW_ALREADY_EXISTS, "Buổi học này đã được đánh giá")

    try:
        review = Review(
            reservation_id=reservation.id,
            course_id=reservation.course_id,
            user_id=user_id,
            teacher_id=reservation.teacher_id,
            rate=data.rate,
            comment=data.comment,
        )
        db.add(review)
        if reservation.student_status == ReservationStatus.overdue:
            reservation.student_status = ReservationStatus.completed
        db.flush()

        course_avg, course_count = review_crud.rating_summary(db, course_id=reservation.course_id)
        course = reservation.course
        course.rate = _two_decimals(course_avg)
        course.review_count = course_count

        teacher_avg, _ = review_crud.rating_summary(db, teacher_id=reservation.teacher_id)
        reservation.teacher.average_rating = _two_decimals(teacher_avg)

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(review)
    logger.info(f"User id={user_id} đánh giá khóa học id={review.course_id} ({review.rate} sao)")
    return review


def get_course_reviews(
    db: Session,
    course_uuid: str,
    rating: Optional[int],
    sort_by: str,
    sort_order: str,
    page: int,
    per_page: int,
) -> dict:
    course = course_crud.get_course_by_uuid(db, course_uuid)
    if not course or course.status != CourseStatus.published:
        raise NotFoundError(ErrorCode.COURSE_NOT_FOUND, "Không tìm thấy khóa học")

    reviews, total = review_crud.get_reviews(
        db,
        course_id=course.id,
        rating=rating,
        sort_by=sort_by,
        sort_order=sort_order,
        skip=(page - 1) * per_page,
        limit=per_page,
    )
    average, count = review_crud.rating_summary(db, course_id=course.id)
    return {
        "reviews": reviews,
        "rating_stats": {
            "average_rating": round(average, 1),
            "total_reviews": count,
            "rating_distribution": review_crud.rating_distribution(db, course.id),
        },
        "pagination": build_pagination(page, per_page, total),
    }


def get_my_reviews(
    db: Session, user_id: int, course_id: Optional[int], sort_by: str, sort_order: str, page: int, per_page: int
) -> dict:
    filters = {"course_id": course_id} if course_id else {}
    reviews, total = review_crud.get_reviews(
        db,
        user_id=user_id,
        sort_by=sort_by,
        sort_order=sort_order,
        skip=(page - 1) * per_page,
        limit=per_page,
        **filters,
    )
    return {"reviews": reviews, "pagination": build_pagination(page, per_page, total)}


def get_received_reviews(
    db: Session,
    user_id: int,
    course_id: Optional[int],
    rating: Optional[int],
    sort_by: str,
    sort_order: str,
    page: int,
    per_page: int,
) -> dict:
    teacher = teacher_crud.get_teacher_by_user_id(db, user_id)
    if not teacher:
        raise NotFoundError(ErrorCode.TEACHER_NOT_FOUND, "Không tìm thấy hồ sơ giáo viên")
    filters = {"course_id": course_id} if course_id else {}
    reviews, total = review_crud.get_reviews(
        db,
        teacher_id=teacher.id,
        rating=rating,
        sort_by=sort_by,
        sort_order=sort_order,
        skip=(page - 1) * per_page,
        limit=per_page,
        **filters,
    )
    return {"reviews": reviews, "pagination": build_pagination(page, per_page, total)}
