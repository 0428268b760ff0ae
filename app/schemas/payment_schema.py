from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel

from app.models.order_model import PaymentStatus


class PaymentCreateResult(BaseModel):
    payment_url: str
    form_data: Dict[str, str]
    merchant_trade_no: str
    total_amount: float


class PaymentStatusRead(BaseModel):
    order_id: int
    payment_status: PaymentStatus
    merchant_trade_no: Optional[str] = None
    actual_payment_method: Optional[str] = None
    paid_at: Optional[datetime] = None
    payment_info: Optional[Dict[str, Any]] = None
