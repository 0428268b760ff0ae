# app/services/price_option_service.py
import logging
from typing import List

from sqlalchemy.orm import Session

from app.constants import MAX_PRICE_OPTIONS_PER_COURSE
from app.core.exceptions import BusinessError, ConflictError, ErrorCode, NotFoundError
from app.crud import price_option_crud
from app.models.price_option_model import CoursePriceOption
from app.schemas.price_option_schema import PriceOptionCreate, PriceOptionUpdate
from app.services.course_service import get_owned_course

logger = logging.getLogger(__name__)


def _get_option(db: Session, course_id: int, option_id: int) -> CoursePriceOption:
    option = price_option_crud.get_price_option(db, option_id)
    if not option or option.course_id != course_id or not option.is_active:
        raise NotFoundError(ErrorCode.PRICE_OPTION_NOT_FOUND, "Không tìm thấy phương án giá")
    return option


def list_options(db: Session, user_id: int, course_id: int) -> List[CoursePriceOption]:
    get_owned_course(db, user_id, course_id)
    return price_option_crud.get_active_options(db, course_id)


def create_option(db: Session, user_id: int, course_id: int, data: PriceOptionCreate) -> CoursePriceOption:
    get_owned_course(db, user_id, course_id)

    if price_option_crud.count_active_options(db, course_id) >= MAX_PRICE_OPTIONS_PER_COURSE:
        raise BusinessError(
            ErrorCode.PRICE_OPTION_LIMIT_EXCEEDED,
            f"Mỗi khóa học chỉ có tối đa {MAX_PRICE_OPTIONS_PER_COURSE} phương án giá",
        )
    if price_option_crud.find_duplicate(db, course_id, data.price, data.quantity):
        raise ConflictError(ErrorCode.PRICE_OPTION_DUPLICATE, "Phương án giá đã tồn tại")

    option = price_option_crud.create_price_option(db, course_id, data.price, data.quantity)
    logger.info(f"Đã tạo phương án giá id={option.id} cho khóa học id={course_id}")
    return option


def update_option(
    db: Session, user_id: int, course_id: int, option_id: int, data: PriceOptionUpdate
) -> CoursePriceOption:
    get_owned_course(db, user_id, course_id)
    option = _get_option(db, course_id, option_id)

    update_data = data.model_dump(exclude_unset=True, exclude_none=True)
    price = update_data.get("price", option.price)
    quantity = update_data.get("quantity", option.quantity)
    if price_option_crud.find_duplicate(db, course_id, price, quantity, exclude_id=option.id):
        raise ConflictError(ErrorCode.PRICE_OPTION_DUPLICATE, "Phương án giá đã tồn tại")

    return price_option_crud.update_price_option(db, option, update_data)


def delete_option(db: Session, user_id: int, course_id: int, option_id: int):
    get_owned_course(db, user_id, course_id)
    option = _get_option(db, course_id, option_id)
    price_option_crud.update_price_option(db, option, {"is_active": False})
    logger.info(f"Đã vô hiệu hóa phương án giá id={option_id}")
