# app/crud/catalog_crud.py
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from app.models.category_model import MainCategory, SubCategory
from app.models.city_model import City


def get_main_categories(db: Session) -> List[dict]:
    """Danh mục chính đang hoạt động, kèm danh mục con đang hoạt động."""
    categories = (
        db.query(MainCategory)
        .options(selectinload(MainCategory.sub_categories))
        .filter(MainCategory.is_active == True)  # noqa: E712
        .order_by(MainCategory.display_order, MainCategory.id)
        .all()
    )
    return [
        {
            "id": category.id,
            "name": category.name,
            "icon_url": category.icon_url,
            "display_order": category.display_order,
            "sub_categories": [sub for sub in category.sub_categories if sub.is_active],
        }
        for category in categories
    ]


def get_main_category(db: Session, category_id: int) -> Optional[MainCategory]:
    return db.query(MainCategory).filter(MainCategory.id == category_id, MainCategory.is_active == True).first()  # noqa: E712


def get_sub_category(db: Session, sub_category_id: int) -> Optional[SubCategory]:
    return db.query(SubCategory).filter(SubCategory.id == sub_category_id, SubCategory.is_active == True).first()  # noqa: E712


def get_cities(db: Session) -> List[City]:
    return db.query(City).filter(City.is_active == True).order_by(City.id).all()  # noqa: E712


def get_city(db: Session, city_id: int) -> Optional[City]:
    return db.query(City).filter(City.id == city_id, City.is_active == True).first()  # noqa: E712
