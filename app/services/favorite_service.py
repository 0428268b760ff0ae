# app/services/favorite_service.py
import logging

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, ErrorCode, NotFoundError, PermissionDeniedError
from app.crud import course_crud, favorite_crud, teacher_crud
from app.models.favorite_model import UserFavorite
from app.services.service_helper import build_pagination

logger = logging.getLogger(__name__)


def add_favorite(db: Session, user_id: int, course_id: int) -> UserFavorite:
    course = course_crud.get_published_course(db, course_id)
    if not course:
        raise NotFoundError(ErrorCode.COURSE_NOT_FOUND, "Không tìm thấy khóa học")

    teacher = teacher_crud.get_teacher_by_user_id(db, user_id)
    if teacher and teacher.id == course.teacher_id:
        raise PermissionDeniedError(ErrorCode.CANNOT_FAVORITE_OWN_COURSE, "Không thể lưu khóa học của chính mình")

    if favorite_crud.get_favorite(db, user_id, course_id):
        raise ConflictError(ErrorCode.FAVORITE_ALREADY_EXISTS, "Khóa học đã có trong danh sách yêu thích")

    favorite = favorite_crud.create_favorite(db, user_id, course_id)
    logger.info(f"User id={user_id} lưu khóa học id={course_id} vào yêu thích")
    return favorite


def remove_favorite(db: Session, user_id: int, course_id: int):
    favorite = favorite_crud.get_favorite(db, user_id, course_id)
    if not favorite:
        raise NotFoundError(ErrorCode.FAVORITE_NOT_FOUND, "Khóa học không có trong danh sách yêu thích")
    favorite_crud.delete_favorite(db, favorite)


def list_favorites(db: Session, user_id: int, page: int, per_page: int) -> dict:
    items, total = favorite_crud.get_favorites(db, user_id, skip=(page - 1) * per_page, limit=per_page)
    return {"favorites": items, "pagination": build_pagination(page, per_page, total)}


def get_favorite_status(db: Session, user_id: int, course_id: int) -> dict:
    return {
        "course_id": course_id,
        "is_favorited": favorite_crud.get_favorite(db, user_id, course_id) is not None,
    }
