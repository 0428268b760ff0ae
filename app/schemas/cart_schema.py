from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.constants import CART_ITEM_QUANTITY_MAX, CART_ITEM_QUANTITY_MIN
from app.schemas.price_option_schema import PriceOptionRead


class CartItemAdd(BaseModel):
    course_id: int = Field(..., gt=0)
    price_option_id: int = Field(..., gt=0)
    quantity: int = Field(1, ge=CART_ITEM_QUANTITY_MIN, le=CART_ITEM_QUANTITY_MAX)


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., ge=CART_ITEM_QUANTITY_MIN, le=CART_ITEM_QUANTITY_MAX)


class CartCourseInfo(BaseModel):
    id: int
    uuid: str
    name: str
    main_image: Optional[str] = None
    status: str
    teacher_id: int
    teacher_name: Optional[str] = None


class CartItemRead(BaseModel):
    id: int
    user_id: int
    course_id: int
    price_option_id: int
    quantity: int
    is_valid: bool = True
    invalid_reason: Optional[str] = None
    course: Optional[CartCourseInfo] = None
    price_option: Optional[PriceOptionRead] = None
    created_at: datetime
    updated_at: datetime


class CartSummary(BaseModel):
    total_items: int
    total_amount: float
    valid_items: int
    invalid_items: int


class CartRead(BaseModel):
    cart_items: List[CartItemRead]
    summary: CartSummary
