# app/api/v1/endpoints/payment_route.py
from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from app.api import deps
from app.services import payment_service

router = APIRouter()


@router.post("/ecpay/callback", response_class=PlainTextResponse, summary="ECPay gửi kết quả thanh toán")
async def ecpay_callback(request: Request, db: Session = Depends(deps.get_db)):
    """
    ECPay gửi dữ liệu dạng form (application/x-www-form-urlencoded).
    Phản hồi `1|OK` khi đã xử lý xong.
    Toàn bộ các trường phải được giữ nguyên để kiểm tra CheckMacValue.
    """
    form = await request.form()
    # Truy vấn DB đồng bộ, chạy ngoài event loop
    await run_in_threadpool(payment_service.handle_callback, db, {key: str(value) for key, value in form.items()})
    return PlainTextResponse("1|OK")
