from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_serializer, field_validator

from app.models.order_model import PaymentStatus, PurchaseWay
from app.schemas.common_schema import PaginationInfo


class OrderCreate(BaseModel):
    cart_item_ids: List[int] = Field(default_factory=list)
    purchase_way: PurchaseWay
    buyer_name: str = Field(..., min_length=1, max_length=100)
    buyer_phone: str = Field(..., min_length=8, max_length=20, example="0912345678")
    buyer_email: EmailStr

    @field_validator("buyer_phone")
    @classmethod
    def check_phone(cls, value: str) -> str:
        digits = value.replace("-", "").replace(" ", "")
        if not digits.lstrip("+").isdigit():
            raise ValueError("Số điện thoại không hợp lệ")
        return value


class OrderItemRead(BaseModel):
    id: int
    course_id: int
    course_name: Optional[str] = None
    price_option_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal

    class Config:
        from_attributes = True

    @field_serializer("unit_price", "total_price")
    def serialize_amount(self, value: Decimal):
        return float(value)


class OrderRead(BaseModel):
    id: int
    uuid: str
    buyer_id: int
    purchase_way: PurchaseWay
    buyer_name: str
    buyer_phone: str
    buyer_email: str
    total_amount: Decimal
    payment_status: PaymentStatus
    merchant_trade_no: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @field_serializer("total_amount")
    def serialize_total(self, value: Decimal):
        return float(value)


class OrderDetail(BaseModel):
    order: OrderRead
    order_items: List[OrderItemRead]


class CourseSummary(BaseModel):
    course_name: str
    total_quantity: int


class OrderListItem(BaseModel):
    id: int
    uuid: str
    purchase_way: PurchaseWay
    buyer_name: str
    total_amount: float
    payment_status: PaymentStatus
    paid_at: Optional[datetime] = None
    created_at: datetime
    items_count: int
    courses_summary: List[CourseSummary]


class OrderListResult(BaseModel):
    orders: List[OrderListItem]
    pagination: PaginationInfo
