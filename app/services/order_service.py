# app/services/order_service.py
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import BusinessError, ErrorCode, NotFoundError, PermissionDeniedError
from app.crud import cart_crud, order_crud
from app.models.cart_model import UserCartItem
from app.models.order_model import Order, OrderItem, PaymentStatus
from app.schemas.order_schema import OrderCreate
from app.services.cart_service import check_item_validity, ensure_not_own_course
from app.services.service_helper import build_pagination

logger = logging.getLogger(__name__)


def _validate_cart_items(db: Session, user_id: int, item_ids: List[int]) -> List[UserCartItem]:
    if not item_ids:
        raise BusinessError(ErrorCode.CART_ITEMS_REQUIRED, "Vui lòng chọn sản phẩm trong giỏ hàng")

    unique_ids = list(dict.fromkeys(item_ids))
    items = cart_crud.get_cart_items_by_ids(db, user_id, unique_ids)
    if len(items) != len(unique_ids):
        raise NotFoundError(ErrorCode.CART_ITEM_NOT_FOUND, "Một số sản phẩm không tồn tại trong giỏ hàng")

    for item in items:
        is_valid, reason = check_item_validity(item)
        if not is_valid:
            raise BusinessError(ErrorCode.CART_ITEM_INVALID, f"Sản phẩm {item.id} không hợp lệ: {reason}")
        ensure_not_own_course(db, user_id, item.course)
    return items


def get_order_for_user(db: Session, user_id: int, order_id: int) -> Order:
    order = order_crud.get_order(db, order_id)
    if not order:
        raise NotFoundError(ErrorCode.ORDER_NOT_FOUND, "Không tìm thấy đơn hàng")
    if order.buyer_id != user_id:
        raise PermissionDeniedError(ErrorCode.FORBIDDEN, "Bạn không có quyền xem đơn hàng này")
    return order


def _order_detail(order: Order) -> dict:
    return {"order": order, "order_items": list(order.items)}


def create_order(db: Session, user_id: int, data: OrderCreate) -> dict:
    """
    Tạo đơn hàng từ các sản phẩm trong giỏ.
    Đơn hàng, các dòng đơn hàng và việc xóa giỏ hàng nằm trong cùng một giao dịch.
    """
    cart_items = _validate_cart_items(db, user_id, data.cart_item_ids)

    try:
        order = Order(
            buyer_id=user_id,
            purchase_way=data.purchase_way,
            buyer_name=data.buyer_name,
            buyer_phone=data.buyer_phone,
            buyer_email=data.buyer_email,
            total_amount=Decimal("0"),
            payment_status=PaymentStatus.pending,
        )
        db.add(order)
        db.flush()

        total = Decimal("0")
        for cart_item in cart_items:
            unit_price = Decimal(cart_item.price_option.price)
            line_total = unit_price * cart_item.quantity
            total += line_total
            db.add(OrderItem(
                order_id=order.id,
                course_id=cart_item.course_id,
                price_option_id=cart_item.price_option_id,
                quantity=cart_item.quantity,
                unit_price=unit_price,
                total_price=line_total,
            ))
        order.total_amount = total

        for cart_item in cart_items:
            db.delete(cart_item)

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(order)
    logger.info(f"User id={user_id} đã tạo đơn hàng id={order.id}, tổng tiền {order.total_amount}")
    return _order_detail(order)


def list_orders(db: Session, user_id: int, status: Optional[PaymentStatus], page: int, per_page: int) -> dict:
    orders, total = order_crud.get_orders(db, user_id, status, (page - 1) * per_page, per_page)
    items = []
    for order in orders:
        items.append({
            "id": order.id,
            "uuid": order.uuid,
            "purchase_way": order.purchase_way,
            "buyer_name": order.buyer_name,
            "total_amount": float(order.total_amount),
            "payment_status": order.payment_status,
            "paid_at": order.paid_at,
            "created_at": order.created_at,
            "items_count": len(order.items),
            "courses_summary": [
                {"course_name": item.course_name or "Không tìm thấy khóa học", "total_quantity": item.quantity}
                for item in order.items
            ],
        })
    return {"orders": items, "pagination": build_pagination(page, per_page, total)}


def get_order(db: Session, user_id: int, order_id: int) -> dict:
    return _order_detail(get_order_for_user(db, user_id, order_id))


def cancel_order(db: Session, user_id: int, order_id: int) -> Order:
    order = get_order_for_user(db, user_id, order_id)
    if order.payment_status == PaymentStatus.cancelled:
        raise BusinessError(ErrorCode.ORDER_ALREADY_CANCELLED, "Đơn hàng đã bị hủy")
    if order.payment_status != PaymentStatus.pending:
        raise BusinessError(ErrorCode.ORDER_CANNOT_CANCEL, "Chỉ có thể hủy đơn hàng đang chờ thanh toán")
    order = order_crud.update_order(db, order, {"payment_status": PaymentStatus.cancelled})
    logger.info(f"Đơn hàng id={order_id} đã bị hủy")
    return order
