# app/services/teacher_service.py
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import (
    AppValidationError,
    BusinessError,
    ConflictError,
    ErrorCode,
    NotFoundError,
    PermissionDeniedError,
)
from app.crud import catalog_crud, teacher_crud, user_crud, user_role_crud
from app.models.role_model import RoleEnum
from app.models.teacher_model import ApplicationStatus, Teacher
from app.models.user_model import AccountStatus
from app.schemas.teacher_schema import TeacherApplicationCreate, TeacherApplicationUpdate
from app.services.service_helper import build_pagination, utc_now

logger = logging.getLogger(__name__)


# ---------------------------------------------------------
# HELPERS
# ---------------------------------------------------------

def get_approved_teacher_for_user(db: Session, user_id: int) -> Teacher:
    """
    Lấy hồ sơ giáo viên đã được duyệt của user.
    Dùng chung cho khóa học, lịch dạy, phương án giá.
    """
    teacher = teacher_crud.get_teacher_by_user_id(db, user_id)
    if not teacher:
        raise NotFoundError(ErrorCode.TEACHER_NOT_FOUND, "Không tìm thấy hồ sơ giáo viên")
    if teacher.application_status != ApplicationStatus.approved:
        raise PermissionDeniedError(ErrorCode.TEACHER_NOT_APPROVED, "Hồ sơ giáo viên chưa được duyệt")
    return teacher


def _validate_categories(db: Session, main_category_id: Optional[int], sub_category_ids: Optional[List[int]]):
    errors = {}
    if main_category_id is not None and not catalog_crud.get_main_category(db, main_category_id):
        errors["main_category_id"] = ["Danh mục chính không tồn tại"]
    if sub_category_ids:
        for sub_id in sub_category_ids:
            sub = catalog_crud.get_sub_category(db, sub_id)
            if not sub or (main_category_id is not None and sub.main_category_id != main_category_id):
                errors.setdefault("sub_category_ids", []).append(f"Chuyên môn {sub_id} không hợp lệ")
    if errors:
        raise AppValidationError(errors)


def _get_application(db: Session, user_id: int) -> Teacher:
    teacher = teacher_crud.get_teacher_by_user_id(db, user_id)
    if not teacher:
        raise NotFoundError(ErrorCode.APPLICATION_NOT_FOUND, "Không tìm thấy đơn đăng ký giáo viên")
    return teacher


# ---------------------------------------------------------
# APPLICATION
# ---------------------------------------------------------

def apply(db: Session, user_id: int, data: TeacherApplicationCreate) -> Teacher:
    user = user_crud.get_user(db, user_id)
    if not user or user.account_status != AccountStatus.active:
        raise PermissionDeniedError(ErrorCode.ACCOUNT_SUSPENDED, "Tài khoản không ở trạng thái hoạt động")
    if not user_role_crud.has_role(db, user_id, RoleEnum.student):
        raise PermissionDeniedError(ErrorCode.STUDENT_ROLE_REQUIRED, "Chỉ học viên mới có thể đăng ký làm giáo viên")
    if teacher_crud.get_teacher_by_user_id(db, user_id):
        raise ConflictError(ErrorCode.APPLICATION_EXISTS, "Bạn đã nộp đơn đăng ký giáo viên")

    _validate_categories(db, data.main_category_id, data.sub_category_ids)

    teacher = teacher_crud.create_teacher(db, user_id, {
        **data.model_dump(),
        "application_status": ApplicationStatus.pending,
        "application_submitted_at": utc_now(),
    })
    user_role_crud.grant_role(db, user_id, RoleEnum.teacher_pending, commit=False)
    db.commit()
    db.refresh(teacher)
    logger.info(f"User id={user_id} đã nộp đơn đăng ký giáo viên id={teacher.id}")
    return teacher


def get_application(db: Session, user_id: int) -> Teacher:
    return _get_application(db, user_id)


def update_application(db: Session, user_id: int, data: TeacherApplicationUpdate) -> Teacher:
    teacher = _get_application(db, user_id)
    if teacher.application_status == ApplicationStatus.approved:
        raise BusinessError(ErrorCode.APPLICATION_NOT_EDITABLE, "Đơn đã được duyệt, không thể chỉnh sửa")

    update_data = data.model_dump(exclude_unset=True)
    _validate_categories(
        db,
        update_data.get("main_category_id", teacher.main_category_id),
        update_data.get("sub_category_ids", teacher.sub_category_ids),
    )
    return teacher_crud.update_teacher(db, teacher, update_data)


def resubmit(db: Session, user_id: int) -> Teacher:
    teacher = _get_application(db, user_id)
    if teacher.application_status != ApplicationStatus.rejected:
        raise BusinessError(ErrorCode.APPLICATION_NOT_REJECTED, "Chỉ có thể nộp lại đơn đã bị từ chối")
    return teacher_crud.update_teacher(db, teacher, {
        "application_status": ApplicationStatus.pending,
        "application_submitted_at": utc_now(),
        "application_reviewed_at": None,
        "reviewer_id": None,
        "review_notes": None,
    })


# ---------------------------------------------------------
# PROFILE
# ---------------------------------------------------------

def get_profile(db: Session, user_id: int) -> Teacher:
    return get_approved_teacher_for_user(db, user_id)


def update_profile(db: Session, user_id: int, data: TeacherApplicationUpdate) -> Teacher:
    teacher = get_approved_teacher_for_user(db, user_id)
    update_data = data.model_dump(exclude_unset=True)
    _validate_categories(
        db,
        update_data.get("main_category_id", teacher.main_category_id),
        update_data.get("sub_category_ids", teacher.sub_category_ids),
    )
    return teacher_crud.update_teacher(db, teacher, update_data)


# ---------------------------------------------------------
# PUBLIC
# ---------------------------------------------------------

def get_public_teacher(db: Session, teacher_id: int) -> Teacher:
    teacher = teacher_crud.get_approved_teacher(db, teacher_id)
    if not teacher or teacher.user.deleted_at is not None:
        raise NotFoundError(ErrorCode.TEACHER_NOT_FOUND, "Không tìm thấy giáo viên")
    return teacher


def get_public_teacher_courses(db: Session, teacher_id: int, page: int, per_page: int) -> dict:
    get_public_teacher(db, teacher_id)
    courses, total = teacher_crud.get_published_courses(db, teacher_id, (page - 1) * per_page, per_page)
    return {"courses": courses, "pagination": build_pagination(page, per_page, total)}
