# app/services/cart_service.py
import logging
from decimal import Decimal
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from app.constants import CART_ITEM_QUANTITY_MAX
from app.core.exceptions import AppValidationError, ErrorCode, NotFoundError, PermissionDeniedError
from app.crud import cart_crud, course_crud, price_option_crud, teacher_crud
from app.models.cart_model import UserCartItem
from app.models.course_model import Course, CourseStatus
from app.schemas.cart_schema import CartItemAdd

logger = logging.getLogger(__name__)


def ensure_not_own_course(db: Session, user_id: int, course: Course):
    teacher = teacher_crud.get_teacher_by_user_id(db, user_id)
    if teacher and teacher.id == course.teacher_id:
        raise PermissionDeniedError(ErrorCode.CANNOT_PURCHASE_OWN_COURSE, "Không thể mua khóa học của chính mình")


def _get_owned_item(db: Session, user_id: int, item_id: int) -> UserCartItem:
    item = cart_crud.get_cart_item(db, item_id)
    if not item:
        raise NotFoundError(ErrorCode.CART_ITEM_NOT_FOUND, "Không tìm thấy sản phẩm trong giỏ hàng")
    if item.user_id != user_id:
        raise PermissionDeniedError(ErrorCode.FORBIDDEN, "Bạn không có quyền với sản phẩm này")
    return item


def check_item_validity(item: UserCartItem) -> Tuple[bool, Optional[str]]:
    """Sản phẩm hợp lệ khi khóa học còn xuất bản và phương án giá còn hoạt động."""
    course = item.course
    if not course or course.deleted_at is not None or course.status != CourseStatus.published:
        return False, "Khóa học không tồn tại hoặc chưa xuất bản"
    option = item.price_option
    if not option or not option.is_active or option.course_id != course.id:
        return False, "Phương án giá không tồn tại"
    return True, None


def describe_item(item: UserCartItem) -> dict:
    is_valid, reason = check_item_validity(item)
    course = item.course
    course_info = None
    if course:
        course_info = {
            "id": course.id,
            "uuid": course.uuid,
            "name": course.name,
            "main_image": course.main_image,
            "status": course.status.value,
            "teacher_id": course.teacher_id,
            "teacher_name": course.teacher.user.nick_name if course.teacher and course.teacher.user else None,
        }
    return {
        "id": item.id,
        "user_id": item.user_id,
        "course_id": item.course_id,
        "price_option_id": item.price_option_id,
        "quantity": item.quantity,
        "is_valid": is_valid,
        "invalid_reason": reason,
        "course": course_info,
        "price_option": item.price_option,
        "created_at": item.created_at,
        "updated_at": item.updated_at,
    }


def add_item(db: Session, user_id: int, data: CartItemAdd) -> Tuple[dict, bool]:
    """
    Thêm sản phẩm vào giỏ. Nếu đã có cùng khóa học và phương án giá thì cộng dồn số lượng.
    Trả về (sản phẩm, is_update).
    """
    course = course_crud.get_course(db, data.course_id)
    if not course or course.status != CourseStatus.published:
        raise NotFoundError(ErrorCode.COURSE_NOT_FOUND, "Không tìm thấy khóa học")
    option = price_option_crud.get_price_option(db, data.price_option_id)
    if not option or option.course_id != course.id or not option.is_active:
        raise NotFoundError(ErrorCode.PRICE_OPTION_NOT_FOUND, "Không tìm thấy phương án giá")
    ensure_not_own_course(db, user_id, course)

    existing = cart_crud.find_cart_item(db, user_id, course.id, option.id)
    if existing:
        quantity = existing.quantity + data.quantity
        if quantity > CART_ITEM_QUANTITY_MAX:
            raise AppValidationError({"quantity": [f"Số lượng tối đa là {CART_ITEM_QUANTITY_MAX}"]})
        item = cart_crud.update_quantity(db, existing, quantity)
        return describe_item(item), True

    item = cart_crud.create_cart_item(db, user_id, course.id, option.id, data.quantity)
    logger.info(f"User id={user_id} thêm khóa học id={course.id} vào giỏ hàng")
    return describe_item(item), False


def get_cart(db: Session, user_id: int) -> dict:
    items = [describe_item(item) for item in cart_crud.get_cart_items(db, user_id)]
    total_amount = Decimal("0")
    valid_items = 0
    for item in items:
        if item["is_valid"]:
            valid_items += 1
            total_amount += item["price_option"].price * item["quantity"]
    return {
        "cart_items": items,
        "summary": {
            "total_items": sum(item["quantity"] for item in items),
            "total_amount": float(total_amount),
            "valid_items": valid_items,
            "invalid_items": len(items) - valid_items,
        },
    }


def update_item(db: Session, user_id: int, item_id: int, quantity: int) -> dict:
    item = _get_owned_item(db, user_id, item_id)
    return describe_item(cart_crud.update_quantity(db, item, quantity))


def remove_item(db: Session, user_id: int, item_id: int):
    item = _get_owned_item(db, user_id, item_id)
    cart_crud.delete_cart_item(db, item)


def clear_cart(db: Session, user_id: int) -> int:
    return cart_crud.clear_cart(db, user_id)
