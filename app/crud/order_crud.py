# app/crud/order_crud.py
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, selectinload

from app.models.order_model import Order, OrderItem, PaymentStatus


def get_order(db: Session, order_id: int) -> Optional[Order]:
    return db.query(Order).options(selectinload(Order.items)).filter(Order.id == order_id).first()


def get_order_by_trade_no(db: Session, merchant_trade_no: str) -> Optional[Order]:
    return db.query(Order).filter(Order.merchant_trade_no == merchant_trade_no).first()


def get_orders(
    db: Session, buyer_id: int, status: Optional[PaymentStatus] = None, skip: int = 0, limit: int = 10
) -> Tuple[List[Order], int]:
    query = db.query(Order).filter(Order.buyer_id == buyer_id)
    if status:
        query = query.filter(Order.payment_status == status)
    total = query.count()
    items = (
        query.options(selectinload(Order.items).selectinload(OrderItem.course))
        .order_by(Order.created_at.desc(), Order.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return items, total


def update_order(db: Session, db_order: Order, update_data: dict, commit: bool = True) -> Order:
    for key, value in update_data.items():
        setattr(db_order, key, value)
    if commit:
        db.commit()
        db.refresh(db_order)
    return db_order
