# app/crud/price_option_crud.py
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.price_option_model import CoursePriceOption


def get_price_option(db: Session, option_id: int) -> Optional[CoursePriceOption]:
    return db.query(CoursePriceOption).filter(CoursePriceOption.id == option_id).first()


def get_active_options(db: Session, course_id: int) -> List[CoursePriceOption]:
    """Các phương án giá đang hoạt động, sắp theo giá tăng dần."""
    return (
        db.query(CoursePriceOption)
        .filter(CoursePriceOption.course_id == course_id, CoursePriceOption.is_active == True)  # noqa: E712
        .order_by(CoursePriceOption.price.asc(), CoursePriceOption.id.asc())
        .all()
    )


def count_active_options(db: Session, course_id: int) -> int:
    return db.query(CoursePriceOption).filter(
        CoursePriceOption.course_id == course_id,
        CoursePriceOption.is_active == True,  # noqa: E712
    ).count()


def find_duplicate(
    db: Session, course_id: int, price: Decimal, quantity: int, exclude_id: Optional[int] = None
) -> Optional[CoursePriceOption]:
    query = db.query(CoursePriceOption).filter(
        CoursePriceOption.course_id == course_id,
        CoursePriceOption.price == price,
        CoursePriceOption.quantity == quantity,
        CoursePriceOption.is_active == True,  # noqa: E712
    )
    if exclude_id is not None:
        query = query.filter(CoursePriceOption.id != exclude_id)
    return query.first()


def create_price_option(db: Session, course_id: int, price: Decimal, quantity: int) -> CoursePriceOption:
    db_option = CoursePriceOption(course_id=course_id, price=price, quantity=quantity)
    db.add(db_option)
    db.commit()
    db.refresh(db_option)
    return db_option


def update_price_option(db: Session, db_option: CoursePriceOption, update_data: dict) -> CoursePriceOption:
    for key, value in update_data.items():
        setattr(db_option, key, value)
    db.commit()
    db.refresh(db_option)
    return db_option
