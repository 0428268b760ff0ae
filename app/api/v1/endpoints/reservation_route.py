# app/api/v1/endpoints/reservation_route.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api import deps
from app.api.auth.auth import get_current_active_user, has_roles
from app.models.reservation_model import ReservationStatus
from app.schemas import reservation_schema
from app.schemas.auth_schema import AuthenticatedUser
from app.schemas.common_schema import ApiResponse, success
from app.services import reservation_service

router = APIRouter()

TEACHER_ONLY = has_roles(["teacher"])


@router.post(
    "",
    response_model=ApiResponse[reservation_schema.ReservationCreateResult],
    status_code=status.HTTP_201_CREATED,
    summary="Đặt lịch học",
)
def create_reservation(
    data: reservation_schema.ReservationCreate,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    """
    Học viên đặt một buổi học trong khung giờ rảnh của giáo viên.
    Lịch mới ở trạng thái chờ giáo viên xác nhận; buổi học chỉ bị trừ khi được xác nhận.
    """
    result = reservation_service.create_reservation(db, current_user.user_id, data)
    return success(result, "Đặt lịch thành công")


@router.get("", response_model=ApiResponse[reservation_schema.ReservationListResult], summary="Danh sách lịch học")
def list_reservations(
    role: reservation_schema.ReservationRole = Query(reservation_schema.ReservationRole.student),
    reservation_status: Optional[ReservationStatus] = Query(None, alias="status"),
    course_id: Optional[int] = Query(None, gt=0),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    pagination: deps.Pagination = Depends(deps.pagination_params),
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    result = reservation_service.list_reservations(
        db, current_user.user_id, role, reservation_status, course_id, date_from, date_to,
        pagination.page, pagination.per_page,
    )
    return success(result, "Lấy danh sách lịch học thành công")


@router.get("/calendar", response_model=ApiResponse[reservation_schema.CalendarView], summary="Lịch học theo tuần/tháng")
def get_calendar(
    view: reservation_schema.CalendarViewType = Query(reservation_schema.CalendarViewType.week),
    target_date: date = Query(..., alias="date"),
    role: reservation_schema.ReservationRole = Query(reservation_schema.ReservationRole.student),
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    result = reservation_service.get_calendar(db, current_user.user_id, view, target_date, role)
    return success(result, "Lấy lịch học thành công")


@router.put(
    "/{reservation_id}/status",
    response_model=ApiResponse[reservation_schema.ReservationStatusResult],
    summary="Đánh dấu hoàn thành buổi học",
)
def update_reservation_status(
    reservation_id: int,
    data: reservation_schema.ReservationStatusUpdate,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    """
    - **teacher-complete**: giáo viên xác nhận đã dạy
    - **student-complete**: học viên xác nhận đã học
    """
    result = reservation_service.update_status(db, current_user.user_id, reservation_id, data.status_type)
    return success(result, "Cập nhật trạng thái lịch học thành công")


@router.post(
    "/{reservation_id}/cancel",
    response_model=ApiResponse[reservation_schema.ReservationCancelResult],
    summary="Hủy lịch học",
)
def cancel_reservation(
    reservation_id: int,
    data: Optional[reservation_schema.ReservationReason] = None,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    result = reservation_service.cancel_reservation(
        db, current_user.user_id, reservation_id, data.reason if data else None
    )
    return success(result, "Hủy lịch học thành công")


@router.post(
    "/{reservation_id}/confirm",
    response_model=ApiResponse[reservation_schema.ReservationRead],
    summary="Giáo viên xác nhận lịch học",
)
def confirm_reservation(
    reservation_id: int,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(TEACHER_ONLY),
):
    reservation = reservation_service.confirm_reservation(db, current_user.user_id, reservation_id)
    return success(reservation_schema.ReservationRead.model_validate(reservation), "Xác nhận lịch học thành công")


@router.post(
    "/{reservation_id}/reject",
    response_model=ApiResponse[reservation_schema.ReservationRead],
    summary="Giáo viên từ chối lịch học",
)
def reject_reservation(
    reservation_id: int,
    data: Optional[reservation_schema.ReservationReason] = None,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(TEACHER_ONLY),
):
    reservation = reservation_service.reject_reservation(
        db, current_user.user_id, reservation_id, data.reason if data else None
    )
    return success(reservation_schema.ReservationRead.model_validate(reservation), "Đã từ chối lịch học")
