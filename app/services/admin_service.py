# app/services/admin_service.py
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.api.auth.auth import create_admin_token
from app.config import ADMIN_TOKEN_EXPIRE_HOURS
from app.core.exceptions import AuthError, BusinessError, ErrorCode, NotFoundError, PermissionDeniedError
from app.crud import course_crud, teacher_crud, user_role_crud
from app.models.admin_model import AdminUser
from app.models.course_model import Course
from app.models.notification_model import NotificationType
from app.models.role_model import RoleEnum
from app.models.teacher_model import ApplicationStatus, Teacher
from app.schemas.admin_schema import AdminLoginRequest
from app.services import notification_service
from app.services.service_helper import build_pagination, utc_now

logger = logging.getLogger(__name__)


# ---------------------------------------------------------
# AUTH
# ---------------------------------------------------------

def login(db: Session, data: AdminLoginRequest) -> dict:
    admin = db.query(AdminUser).filter(AdminUser.username == data.username).first()
    if not admin or not admin.verify_password(data.password):
        logger.warning(f"Đăng nhập quản trị thất bại: {data.username}")
        raise AuthError(ErrorCode.ADMIN_INVALID_CREDENTIALS, "Tên đăng nhập hoặc mật khẩu không đúng")
    if not admin.is_active:
        raise PermissionDeniedError(ErrorCode.ADMIN_ACCOUNT_INACTIVE, "Tài khoản quản trị đã bị vô hiệu hóa")

    admin.last_login_at = utc_now()
    db.commit()
    db.refresh(admin)
    logger.info(f"Admin {admin.username} đăng nhập")
    return {
        "access_token": create_admin_token(admin),
        "token_type": "Bearer",
        "expires_in": ADMIN_TOKEN_EXPIRE_HOURS * 3600,
        "admin": admin,
    }


# ---------------------------------------------------------
# TEACHER APPLICATIONS
# ---------------------------------------------------------

def list_teacher_applications(db: Session, status: Optional[ApplicationStatus], page: int, per_page: int) -> dict:
    items, total = teacher_crud.get_applications(db, status, (page - 1) * per_page, per_page)
    return {"applications": items, "pagination": build_pagination(page, per_page, total)}


def _get_pending_application(db: Session, teacher_id: int) -> Teacher:
    teacher = teacher_crud.get_teacher(db, teacher_id)
    if not teacher:
        raise NotFoundError(ErrorCode.APPLICATION_NOT_FOUND, "Không tìm thấy đơn đăng ký giáo viên")
    if teacher.application_status != ApplicationStatus.pending:
        raise BusinessError(ErrorCode.APPLICATION_NOT_PENDING, "Đơn đăng ký không ở trạng thái chờ duyệt")
    return teacher


def approve_teacher(db: Session, admin: AdminUser, teacher_id: int, notes: Optional[str]) -> Teacher:
    teacher = _get_pending_application(db, teacher_id)
    try:
        teacher_crud.update_teacher(db, teacher, {
            "application_status": ApplicationStatus.approved,
            "application_reviewed_at": utc_now(),
            "reviewer_id": admin.id,
            "review_notes": notes,
        }, commit=False)
        user_role_crud.grant_role(db, teacher.user_id, RoleEnum.teacher, commit=False)
        user_role_crud.revoke_role(db, teacher.user_id, RoleEnum.teacher_pending, commit=False)
        notification_service.send_notification(
            db,
            teacher.user_id,
            "Đơn đăng ký giáo viên đã được duyệt",
            "Chúc mừng! Bạn đã trở thành giáo viên và có thể tạo khóa học.",
            NotificationType.teacher_application,
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(teacher)
    logger.info(f"Admin {admin.username} duyệt đơn giáo viên id={teacher.id}")
    return teacher


def reject_teacher(db: Session, admin: AdminUser, teacher_id: int, reason: str) -> Teacher:
    teacher = _get_pending_application(db, teacher_id)
    try:
        teacher_crud.update_teacher(db, teacher, {
            "application_status": ApplicationStatus.rejected,
            "application_reviewed_at": utc_now(),
            "reviewer_id": admin.id,
            "review_notes": reason,
        }, commit=False)
        notification_service.send_notification(
            db,
            teacher.user_id,
            "Đơn đăng ký giáo viên bị từ chối",
            f"Lý do: {reason}",
            NotificationType.teacher_application,
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(teacher)
    logger.info(f"Admin {admin.username} từ chối đơn giáo viên id={teacher.id}")
    return teacher


# ---------------------------------------------------------
# COURSE APPLICATIONS
# ---------------------------------------------------------

def list_course_applications(db: Session, page: int, per_page: int) -> dict:
    items, total = course_crud.get_pending_courses(db, (page - 1) * per_page, per_page)
    return {"courses": items, "pagination": build_pagination(page, per_page, total)}


def _get_pending_course(db: Session, course_id: int) -> Course:
    course = course_crud.get_course(db, course_id)
    if not course:
        raise NotFoundError(ErrorCode.COURSE_NOT_FOUND, "Không tìm thấy khóa học")
    if course.application_status != ApplicationStatus.pending:
        raise BusinessError(ErrorCode.APPLICATION_NOT_PENDING, "Khóa học không ở trạng thái chờ duyệt")
    return course


def _decide_course(db: Session, admin: AdminUser, course: Course, decision: ApplicationStatus,
                   notes: Optional[str], title: str, content: str) -> Course:
    try:
        course.application_status = decision
        course.review_notes = notes
        notification_service.send_notification(
            db, course.teacher.user_id, title, content, NotificationType.course_review, commit=False
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(course)
    logger.info(f"Admin {admin.username} {decision.value} khóa học id={course.id}")
    return course


def approve_course(db: Session, admin: AdminUser, course_id: int, notes: Optional[str]) -> Course:
    course = _get_pending_course(db, course_id)
    return _decide_course(
        db, admin, course, ApplicationStatus.approved, notes,
        "Khóa học đã được duyệt",
        f"Khóa học \"{course.name}\" đã được duyệt. Bạn có thể xuất bản khóa học.",
    )


def reject_course(db: Session, admin: AdminUser, course_id: int, reason: str) -> Course:
    course = _get_pending_course(db, course_id)
    return _decide_course(
        db, admin, course, ApplicationStatus.rejected, reason,
        "Khóa học bị từ chối",
        f"Khóa học \"{course.name}\" bị từ chối. Lý do: {reason}",
    )
