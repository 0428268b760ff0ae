# app/api/v1/endpoints/admin_route.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api import deps
from app.api.auth.auth import get_current_admin
from app.models.admin_model import AdminUser
from app.models.teacher_model import ApplicationStatus
from app.schemas import admin_schema
from app.schemas.common_schema import ApiResponse, MessageResponse, success
from app.schemas.course_schema import CourseAdminView
from app.schemas.teacher_schema import TeacherApplicationAdminView
from app.services import admin_service

router = APIRouter()


@router.post("/login", response_model=ApiResponse[admin_schema.AdminLoginResult], summary="Đăng nhập quản trị")
def admin_login(data: admin_schema.AdminLoginRequest, db: Session = Depends(deps.get_db)):
    return success(admin_service.login(db, data), "Đăng nhập thành công")


@router.post("/logout", response_model=MessageResponse, summary="Đăng xuất quản trị")
def admin_logout(admin: AdminUser = Depends(get_current_admin)):
    # Token quản trị không lưu phía server, client tự xóa token
    return {"status": "success", "message": "Đăng xuất thành công"}


@router.get("/profile", response_model=ApiResponse[admin_schema.AdminProfile], summary="Thông tin quản trị viên")
def admin_profile(admin: AdminUser = Depends(get_current_admin)):
    return success(admin, "Lấy thông tin thành công")


# ---------------------------------------------------------
# TEACHER APPLICATIONS
# ---------------------------------------------------------

@router.get(
    "/teacher-applications",
    response_model=ApiResponse[admin_schema.TeacherApplicationList],
    summary="Danh sách đơn đăng ký giáo viên",
)
def list_teacher_applications(
    application_status: Optional[ApplicationStatus] = Query(None, alias="status"),
    pagination: deps.Pagination = Depends(deps.pagination_params),
    db: Session = Depends(deps.get_db),
    admin: AdminUser = Depends(get_current_admin),
):
    result = admin_service.list_teacher_applications(db, application_status, pagination.page, pagination.per_page)
    return success(result, "Lấy danh sách đơn đăng ký thành công")


@router.post(
    "/teacher-applications/{teacher_id}/approve",
    response_model=ApiResponse[TeacherApplicationAdminView],
    summary="Duyệt đơn đăng ký giáo viên",
)
def approve_teacher(
    teacher_id: int,
    data: Optional[admin_schema.ReviewDecision] = None,
    db: Session = Depends(deps.get_db),
    admin: AdminUser = Depends(get_current_admin),
):
    teacher = admin_service.approve_teacher(db, admin, teacher_id, data.notes if data else None)
    return success(teacher, "Đã duyệt đơn đăng ký giáo viên")


@router.post(
    "/teacher-applications/{teacher_id}/reject",
    response_model=ApiResponse[TeacherApplicationAdminView],
    summary="Từ chối đơn đăng ký giáo viên",
)
def reject_teacher(
    teacher_id: int,
    data: admin_schema.RejectDecision,
    db: Session = Depends(deps.get_db),
    admin: AdminUser = Depends(get_current_admin),
):
    teacher = admin_service.reject_teacher(db, admin, teacher_id, data.reason)
    return success(teacher, "Đã từ chối đơn đăng ký giáo viên")


# ---------------------------------------------------------
# COURSE APPLICATIONS
# ---------------------------------------------------------

@router.get(
    "/course-applications",
    response_model=ApiResponse[admin_schema.CourseApplicationList],
    summary="Danh sách khóa học chờ duyệt",
)
def list_course_applications(
    pagination: deps.Pagination = Depends(deps.pagination_params),
    db: Session = Depends(deps.get_db),
    admin: AdminUser = Depends(get_current_admin),
):
    result = admin_service.list_course_applications(db, pagination.page, pagination.per_page)
    return success(result, "Lấy danh sách khóa học chờ duyệt thành công")


@router.post(
    "/course-applications/{course_id}/approve",
    response_model=ApiResponse[CourseAdminView],
    summary="Duyệt khóa học",
)
def approve_course(
    course_id: int,
    data: Optional[admin_schema.ReviewDecision] = None,
    db: Session = Depends(deps.get_db),
    admin: AdminUser = Depends(get_current_admin),
):
    course = admin_service.approve_course(db, admin, course_id, data.notes if data else None)
    return success(course, "Đã duyệt khóa học")


@router.post(
    "/course-applications/{course_id}/reject",
    response_model=ApiResponse[CourseAdminView],
    summary="Từ chối khóa học",
)
def reject_course(
    course_id: int,
    data: admin_schema.RejectDecision,
    db: Session = Depends(deps.get_db),
    admin: AdminUser = Depends(get_current_admin),
):
    course = admin_service.reject_course(db, admin, course_id, data.reason)
    return success(course, "Đã từ chối khóa học")
