from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_serializer

from app.constants import PRICE_MAX, PRICE_MIN, QUANTITY_MAX, QUANTITY_MIN


class PriceOptionCreate(BaseModel):
    price: Decimal = Field(..., ge=PRICE_MIN, le=PRICE_MAX, decimal_places=2, example=1500)
    quantity: int = Field(..., ge=QUANTITY_MIN, le=QUANTITY_MAX, example=10)


class PriceOptionUpdate(BaseModel):
    price: Optional[Decimal] = Field(None, ge=PRICE_MIN, le=PRICE_MAX, decimal_places=2)
    quantity: Optional[int] = Field(None, ge=QUANTITY_MIN, le=QUANTITY_MAX)


class PriceOptionRead(BaseModel):
    id: int
    uuid: str
    course_id: int
    price: Decimal
    quantity: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @field_serializer("price")
    def serialize_price(self, value: Decimal):
        return float(value)
