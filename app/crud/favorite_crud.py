# app/crud/favorite_crud.py
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.models.course_model import Course, CourseStatus
from app.models.favorite_model import UserFavorite


def get_favorite(db: Session, user_id: int, course_id: int) -> Optional[UserFavorite]:
    return db.query(UserFavorite).filter(
        UserFavorite.user_id == user_id,
        UserFavorite.course_id == course_id,
    ).first()


def get_favorites(db: Session, user_id: int, skip: int = 0, limit: int = 10) -> Tuple[List[UserFavorite], int]:
    """Chỉ trả về khóa học còn xuất bản, mới lưu nhất lên đầu."""
    query = (
        db.query(UserFavorite)
        .join(Course, Course.id == UserFavorite.course_id)
        .filter(
            UserFavorite.user_id == user_id,
            Course.status == CourseStatus.published,
            Course.deleted_at.is_(None),
        )
    )
    total = query.count()
    items = query.order_by(UserFavorite.created_at.desc(), UserFavorite.id.desc()).offset(skip).limit(limit).all()
    return items, total


def create_favorite(db: Session, user_id: int, course_id: int) -> UserFavorite:
    db_favorite = UserFavorite(user_id=user_id, course_id=course_id)
    db.add(db_favorite)
    db.commit()
    db.refresh(db_favorite)
    return db_favorite


def delete_favorite(db: Session, db_favorite: UserFavorite):
    db.delete(db_favorite)
    db.commit()
