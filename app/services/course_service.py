# app/services/course_service.py
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import (
    AppValidationError,
    BusinessError,
    ErrorCode,
    NotFoundError,
    PermissionDeniedError,
)
from app.crud import catalog_crud, course_crud, teacher_crud
from app.models.course_model import Course, CourseStatus
from app.models.teacher_model import ApplicationStatus
from app.schemas.course_schema import CourseArchive, CourseCreate, CourseSubmit, CourseUpdate
from app.schemas.price_option_schema import PriceOptionCreate
from app.services.service_helper import build_pagination, utc_now
from app.services.teacher_service import get_approved_teacher_for_user

logger = logging.getLogger(__name__)


# ---------------------------------------------------------
# HELPERS
# ---------------------------------------------------------

def _validate_references(db: Session, main_category_id: Optional[int], sub_category_id: Optional[int], city_id: Optional[int]):
    """Kiểm tra danh mục và thành phố có tồn tại, danh mục con thuộc danh mục chính."""
    errors = {}
    if main_category_id is not None and not catalog_crud.get_main_category(db, main_category_id):
        errors["main_category_id"] = ["Danh mục chính không tồn tại"]
    if sub_category_id is not None:
        sub = catalog_crud.get_sub_category(db, sub_category_id)
        if not sub:
            errors["sub_category_id"] = ["Danh mục con không tồn tại"]
        elif main_category_id is not None and sub.main_category_id != main_category_id:
            errors["sub_category_id"] = ["Danh mục con không thuộc danh mục chính đã chọn"]
    if city_id is not None and not catalog_crud.get_city(db, city_id):
        errors["city_id"] = ["Thành phố không tồn tại"]
    if errors:
        raise AppValidationError(errors)


def _validate_inline_options(options: List[PriceOptionCreate]):
    seen = set()
    errors = {}
    for index, option in enumerate(options):
        key = (option.price, option.quantity)
        if key in seen:
            errors[f"price_options[{index}]"] = ["Phương án giá bị trùng lặp"]
        seen.add(key)
    if errors:
        raise AppValidationError(errors)


def get_owned_course(db: Session, user_id: int, course_id: int) -> Course:
    """
    Lấy khóa học của giáo viên đang đăng nhập.
    404 nếu không tồn tại, 403 nếu thuộc giáo viên khác.
    """
    teacher = get_approved_teacher_for_user(db, user_id)
    course = course_crud.get_course(db, course_id)
    if not course:
        raise NotFoundError(ErrorCode.COURSE_NOT_FOUND, "Không tìm thấy khóa học")
    if course.teacher_id != teacher.id:
        raise PermissionDeniedError(ErrorCode.COURSE_NOT_OWNER, "Bạn không có quyền với khóa học này")
    return course


# ---------------------------------------------------------
# TEACHER CRUD
# ---------------------------------------------------------

def create_course(db: Session, user_id: int, data: CourseCreate) -> Course:
    teacher = get_approved_teacher_for_user(db, user_id)
    _validate_references(db, data.main_category_id, data.sub_category_id, data.city_id)
    _validate_inline_options(data.price_options)

    course = course_crud.create_course(
        db,
        teacher.id,
        data.model_dump(exclude={"price_options"}),
        [option.model_dump() for option in data.price_options],
    )
    logger.info(f"Giáo viên id={teacher.id} đã tạo khóa học id={course.id}")
    return course


def list_my_courses(db: Session, user_id: int, status: Optional[CourseStatus], page: int, per_page: int) -> dict:
    teacher = get_approved_teacher_for_user(db, user_id)
    courses, total = course_crud.get_teacher_courses(db, teacher.id, status, (page - 1) * per_page, per_page)
    return {"courses": courses, "pagination": build_pagination(page, per_page, total)}


def get_my_course(db: Session, user_id: int, course_id: int) -> Course:
    return get_owned_course(db, user_id, course_id)


def update_course(db: Session, user_id: int, course_id: int, data: CourseUpdate) -> Course:
    course = get_owned_course(db, user_id, course_id)
    if course.application_status == ApplicationStatus.pending:
        raise BusinessError(ErrorCode.COURSE_ALREADY_PENDING, "Khóa học đang chờ duyệt, không thể chỉnh sửa")

    update_data = data.model_dump(exclude_unset=True)
    if {"main_category_id", "sub_category_id", "city_id"} & update_data.keys():
        _validate_references(
            db,
            update_data.get("main_category_id", course.main_category_id),
            update_data.get("sub_category_id", course.sub_category_id),
            update_data.get("city_id"),
        )
    return course_crud.update_course(db, course, update_data)


def delete_course(db: Session, user_id: int, course_id: int):
    course = get_owned_course(db, user_id, course_id)
    if course.status == CourseStatus.published:
        raise BusinessError(
            ErrorCode.COURSE_PUBLISHED_CANNOT_DELETE,
            "Khóa học đã xuất bản không thể xóa, hãy lưu trữ khóa học",
        )
    course_crud.update_course(db, course, {"deleted_at": utc_now()})
    logger.info(f"Khóa học id={course_id} đã bị xóa mềm")


# ---------------------------------------------------------
# LIFECYCLE
# ---------------------------------------------------------

def submit_course(db: Session, user_id: int, course_id: int, data: CourseSubmit) -> Course:
    course = get_owned_course(db, user_id, course_id)
    if course.status != CourseStatus.draft:
        raise BusinessError(ErrorCode.COURSE_INVALID_STATUS, "Chỉ khóa học nháp mới có thể gửi duyệt")
    if course.application_status == ApplicationStatus.pending:
        raise BusinessError(ErrorCode.COURSE_ALREADY_PENDING, "Khóa học đang chờ duyệt")
    return course_crud.update_course(db, course, {
        "application_status": ApplicationStatus.pending,
        "submission_notes": data.submission_notes,
        "review_notes": None,
    })


def resubmit_course(db: Session, user_id: int, course_id: int, data: CourseSubmit) -> Course:
    course = get_owned_course(db, user_id, course_id)
    if course.application_status != ApplicationStatus.rejected:
        raise BusinessError(ErrorCode.COURSE_INVALID_STATUS, "Chỉ có thể gửi lại khóa học đã bị từ chối")
    return course_crud.update_course(db, course, {
        "application_status": ApplicationStatus.pending,
        "submission_notes": data.submission_notes,
        "review_notes": None,
    })


def publish_course(db: Session, user_id: int, course_id: int) -> Course:
    course = get_owned_course(db, user_id, course_id)
    if course.status != CourseStatus.draft:
        raise BusinessError(ErrorCode.COURSE_INVALID_STATUS, "Chỉ khóa học nháp mới có thể xuất bản")
    if course.application_status != ApplicationStatus.approved:
        raise BusinessError(ErrorCode.COURSE_NOT_APPROVED, "Khóa học chưa được duyệt")

    course.status = CourseStatus.published
    db.flush()
    teacher_crud.refresh_course_count(db, course.teacher)
    db.commit()
    db.refresh(course)
    logger.info(f"Khóa học id={course.id} đã được xuất bản")
    return course


def archive_course(db: Session, user_id: int, course_id: int, data: CourseArchive) -> Course:
    course = get_owned_course(db, user_id, course_id)
    if course.status != CourseStatus.published:
        raise BusinessError(ErrorCode.COURSE_INVALID_STATUS, "Chỉ khóa học đã xuất bản mới có thể lưu trữ")

    course.status = CourseStatus.archived
    course.archive_reason = data.archive_reason
    db.flush()
    teacher_crud.refresh_course_count(db, course.teacher)
    db.commit()
    db.refresh(course)
    return course


# ---------------------------------------------------------
# PUBLIC
# ---------------------------------------------------------

def list_public_courses(
    db: Session,
    keyword: Optional[str],
    main_category_id: Optional[int],
    sub_category_id: Optional[int],
    city_id: Optional[int],
    sort: str,
    page: int,
    per_page: int,
) -> dict:
    rows, total = course_crud.get_public_courses(
        db,
        keyword=keyword,
        main_category_id=main_category_id,
        sub_category_id=sub_category_id,
        city_id=city_id,
        sort=sort,
        skip=(page - 1) * per_page,
        limit=per_page,
    )
    courses = []
    for course, min_price, teacher_name in rows:
        item = {column.name: getattr(course, column.name) for column in Course.__table__.columns}
        item["min_price"] = float(min_price) if min_price is not None else None
        item["teacher_name"] = teacher_name
        courses.append(item)
    return {"courses": courses, "pagination": build_pagination(page, per_page, total)}


def get_public_course(db: Session, course_id: int) -> dict:
    course = course_crud.get_published_course(db, course_id)
    if not course:
        raise NotFoundError(ErrorCode.COURSE_NOT_FOUND, "Không tìm thấy khóa học")
    course_crud.increment_view_count(db, course)
    return {
        "course": course,
        "teacher": course.teacher,
        "main_category": course.main_category,
        "sub_category": course.sub_category,
        "city": course.city,
        "price_options": course.active_price_options,
    }
