# app/crud/purchase_crud.py
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from app.models.purchase_model import UserCoursePurchase


def get_purchase(db: Session, user_id: int, course_id: int) -> Optional[UserCoursePurchase]:
    return db.query(UserCoursePurchase).filter(
        UserCoursePurchase.user_id == user_id,
        UserCoursePurchase.course_id == course_id,
    ).first()


def get_purchases(db: Session, user_id: int, course_id: Optional[int] = None) -> List[UserCoursePurchase]:
    query = (
        db.query(UserCoursePurchase)
        .options(joinedload(UserCoursePurchase.course))
        .filter(UserCoursePurchase.user_id == user_id)
    )
    if course_id:
        query = query.filter(UserCoursePurchase.course_id == course_id)
    return query.order_by(UserCoursePurchase.created_at.desc()).all()


def create_purchase(db: Session, user_id: int, course_id: int, order_id: Optional[int], quantity: int) -> UserCoursePurchase:
    """Chỉ thêm vào session, việc commit do service quyết định."""
    db_purchase = UserCoursePurchase(
        user_id=user_id,
        course_id=course_id,
        order_id=order_id,
        quantity_total=quantity,
        quantity_used=0,
    )
    db.add(db_purchase)
    db.flush()
    return db_purchase
