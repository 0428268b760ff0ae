from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class PurchaseCourseInfo(BaseModel):
    id: int
    uuid: str
    name: str
    main_image: Optional[str] = None

    class Config:
        from_attributes = True


class PurchaseRead(BaseModel):
    id: int
    uuid: str
    user_id: int
    course_id: int
    order_id: Optional[int] = None
    quantity_total: int
    quantity_used: int
    quantity_remaining: int
    course: Optional[PurchaseCourseInfo] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
