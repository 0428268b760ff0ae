# app/services/purchase_service.py
import logging
from collections import defaultdict
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import BusinessError, ErrorCode, NotFoundError
from app.crud import purchase_crud
from app.models.order_model import Order, PaymentStatus
from app.models.purchase_model import UserCoursePurchase

logger = logging.getLogger(__name__)


def create_from_order(db: Session, order: Order, commit: bool = True) -> List[UserCoursePurchase]:
    """
    Ghi nhận số buổi học đã mua từ một đơn hàng đã thanh toán.
    Mỗi khóa học: tổng (số buổi của phương án giá * số lượng), cộng dồn vào bản ghi sẵn có nếu đã mua trước đó.
    """
    if order.payment_status != PaymentStatus.completed:
        raise BusinessError(ErrorCode.ORDER_NOT_PAID, "Đơn hàng chưa được thanh toán")

    lessons_by_course = defaultdict(int)
    for item in order.items:
        lessons_by_course[item.course_id] += item.price_option.quantity * item.quantity

    purchases = []
    for course_id, lessons in lessons_by_course.items():
        purchase = purchase_crud.get_purchase(db, order.buyer_id, course_id)
        if purchase:
            purchase.quantity_total += lessons
        else:
            purchase = purchase_crud.create_purchase(db, order.buyer_id, course_id, order.id, lessons)
        if purchase.course:
            purchase.course.purchase_count = (purchase.course.purchase_count or 0) + 1
        purchases.append(purchase)

    if commit:
        db.commit()
    logger.info(f"Đơn hàng id={order.id}: ghi nhận {len(purchases)} khóa học đã mua cho user id={order.buyer_id}")
    return purchases


def list_purchases(db: Session, user_id: int, course_id: Optional[int] = None) -> List[UserCoursePurchase]:
    return purchase_crud.get_purchases(db, user_id, course_id)


def get_course_purchase(db: Session, user_id: int, course_id: int) -> UserCoursePurchase:
    purchase = purchase_crud.get_purchase(db, user_id, course_id)
    if not purchase:
        raise NotFoundError(ErrorCode.PURCHASE_NOT_FOUND, "Bạn chưa mua khóa học này")
    return purchase


def consume(db: Session, purchase: UserCoursePurchase, quantity: int = 1, commit: bool = True) -> UserCoursePurchase:
    if purchase.quantity_remaining < quantity:
        raise BusinessError(ErrorCode.PURCHASE_INSUFFICIENT, "Số buổi học còn lại không đủ")
    purchase.quantity_used += quantity
    if commit:
        db.commit()
        db.refresh(purchase)
    return purchase


def refund_one(db: Session, purchase: UserCoursePurchase, commit: bool = True) -> UserCoursePurchase:
    if purchase.quantity_used > 0:
        purchase.quantity_used -= 1
    if commit:
        db.commit()
        db.refresh(purchase)
    return purchase
