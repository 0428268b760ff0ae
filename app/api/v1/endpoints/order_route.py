# app/api/v1/endpoints/order_route.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api import deps
from app.api.auth.auth import get_current_active_user
from app.models.order_model import PaymentStatus
from app.schemas import order_schema, payment_schema
from app.schemas.auth_schema import AuthenticatedUser
from app.schemas.common_schema import ApiResponse, success
from app.services import order_service, payment_service

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[order_schema.OrderDetail],
    status_code=status.HTTP_201_CREATED,
    summary="Tạo đơn hàng từ giỏ hàng",
)
def create_order(
    data: order_schema.OrderCreate,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    """
    Các sản phẩm được chọn sẽ bị xóa khỏi giỏ hàng sau khi tạo đơn.
    """
    result = order_service.create_order(db, current_user.user_id, data)
    return success(result, "Tạo đơn hàng thành công")


@router.get("", response_model=ApiResponse[order_schema.OrderListResult], summary="Danh sách đơn hàng")
def list_orders(
    payment_status: Optional[PaymentStatus] = Query(None, alias="status"),
    pagination: deps.Pagination = Depends(deps.pagination_params),
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    result = order_service.list_orders(
        db, current_user.user_id, payment_status, pagination.page, pagination.per_page
    )
    return success(result, "Lấy danh sách đơn hàng thành công")


@router.get("/{order_id}", response_model=ApiResponse[order_schema.OrderDetail], summary="Chi tiết đơn hàng")
def get_order(
    order_id: int,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    return success(order_service.get_order(db, current_user.user_id, order_id), "Lấy đơn hàng thành công")


@router.post("/{order_id}/cancel", response_model=ApiResponse[order_schema.OrderRead], summary="Hủy đơn hàng")
def cancel_order(
    order_id: int,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    order = order_service.cancel_order(db, current_user.user_id, order_id)
    return success(order_schema.OrderRead.model_validate(order), "Hủy đơn hàng thành công")


@router.post(
    "/{order_id}/payment",
    response_model=ApiResponse[payment_schema.PaymentCreateResult],
    summary="Tạo thanh toán ECPay cho đơn hàng",
)
def create_payment(
    order_id: int,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    """
    Trả về URL cổng thanh toán và các tham số form (đã ký CheckMacValue) để frontend submit.
    """
    result = payment_service.create_payment(db, current_user.user_id, order_id)
    return success(result, "Tạo thanh toán thành công")


@router.get(
    "/{order_id}/payment/status",
    response_model=ApiResponse[payment_schema.PaymentStatusRead],
    summary="Trạng thái thanh toán của đơn hàng",
)
def get_payment_status(
    order_id: int,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    result = payment_service.get_payment_status(db, current_user.user_id, order_id)
    return success(result, "Lấy trạng thái thanh toán thành công")
