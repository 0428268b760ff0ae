# app/crud/cart_crud.py
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.cart_model import UserCartItem


def get_cart_item(db: Session, item_id: int) -> Optional[UserCartItem]:
    return db.query(UserCartItem).filter(UserCartItem.id == item_id).first()


def get_cart_items(db: Session, user_id: int) -> List[UserCartItem]:
    return (
        db.query(UserCartItem)
        .filter(UserCartItem.user_id == user_id)
        .order_by(UserCartItem.created_at.desc(), UserCartItem.id.desc())
        .all()
    )


def get_cart_items_by_ids(db: Session, user_id: int, item_ids: List[int]) -> List[UserCartItem]:
    return db.query(UserCartItem).filter(
        UserCartItem.user_id == user_id,
        UserCartItem.id.in_(item_ids),
    ).all()


def find_cart_item(db: Session, user_id: int, course_id: int, price_option_id: int) -> Optional[UserCartItem]:
    return db.query(UserCartItem).filter(
        UserCartItem.user_id == user_id,
        UserCartItem.course_id == course_id,
        UserCartItem.price_option_id == price_option_id,
    ).first()


def create_cart_item(db: Session, user_id: int, course_id: int, price_option_id: int, quantity: int) -> UserCartItem:
    db_item = UserCartItem(
        user_id=user_id,
        course_id=course_id,
        price_option_id=price_option_id,
        quantity=quantity,
    )
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    return db_item


def update_quantity(db: Session, db_item: UserCartItem, quantity: int) -> UserCartItem:
    db_item.quantity = quantity
    db.commit()
    db.refresh(db_item)
    return db_item


def delete_cart_item(db: Session, db_item: UserCartItem):
    db.delete(db_item)
    db.commit()


def clear_cart(db: Session, user_id: int) -> int:
    deleted = db.query(UserCartItem).filter(UserCartItem.user_id == user_id).delete(synchronize_session=False)
    db.commit()
    return deleted
