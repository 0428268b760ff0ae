# app/services/payment_service.py
import hashlib
import logging
import time
import urllib.parse
from datetime import datetime
from typing import Dict, Optional

from sqlalchemy.orm import Session

from app.config import (
    API_BASE_URL,
    ECPAY_API_URL,
    ECPAY_HASH_IV,
    ECPAY_HASH_KEY,
    ECPAY_MERCHANT_ID,
    FRONTEND_URL,
)
from app.core.exceptions import BusinessError, ErrorCode
from app.crud import order_crud
from app.models.order_model import Order, PaymentStatus, PurchaseWay
from app.services import purchase_service
from app.services.order_service import get_order_for_user
from app.services.service_helper import utc_now

logger = logging.getLogger(__name__)

CALLBACK_PATH = "/api/v1/payments/ecpay/callback"

CHOOSE_PAYMENT = {
    PurchaseWay.all: "ALL",
    PurchaseWay.credit_card: "Credit",
    PurchaseWay.atm: "ATM",
    PurchaseWay.cvs: "CVS",
    # LINE Pay đi qua kênh thẻ tín dụng
    PurchaseWay.line_pay: "Credit",
}

PAYMENT_METHOD_NAMES = {
    "Credit_CreditCard": "Thẻ tín dụng",
    "ATM_LAND": "Chuyển khoản ATM",
    "CVS_CVS": "Mã thanh toán cửa hàng tiện lợi",
    "BARCODE_BARCODE": "Mã vạch cửa hàng tiện lợi",
    "WebATM_LAND": "WebATM",
    "ApplePay": "Apple Pay",
    "GooglePay": "Google Pay",
}


# ---------------------------------------------------------
# ECPAY HELPERS
# ---------------------------------------------------------

def generate_check_mac_value(params: Dict[str, str], hash_key: str = ECPAY_HASH_KEY, hash_iv: str = ECPAY_HASH_IV) -> str:
    """
    Tính CheckMacValue theo chuẩn ECPay (EncryptType=1, SHA256):
    sắp xếp tham số theo tên, bọc HashKey/HashIV, URL-encode kiểu .NET, chuyển chữ thường, băm rồi chuyển chữ hoa.
    """
    filtered = {key: value for key, value in params.items() if key != "CheckMacValue"}
    query = "&".join(f"{key}={filtered[key]}" for key in sorted(filtered, key=str.lower))
    raw = f"HashKey={hash_key}&{query}&HashIV={hash_iv}"
    encoded = urllib.parse.quote_plus(raw, safe="-_.!*()").lower()
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest().upper()


def verify_check_mac_value(params: Dict[str, str]) -> bool:
    received = params.get("CheckMacValue")
    if not received:
        return False
    return received.upper() == generate_check_mac_value(params)


def generate_merchant_trade_no(order_id: int) -> str:
    timestamp = str(int(time.time() * 1000))[-8:]
    return f"ORDER{timestamp}{str(order_id).zfill(4)}"


def format_trade_date(value: Optional[datetime] = None) -> str:
    return (value or datetime.now()).strftime("%Y/%m/%d %H:%M:%S")


def extract_payment_info(payment_response: Optional[dict]) -> Optional[dict]:
    if not payment_response:
        return None
    info = {
        "trade_no": payment_response.get("TradeNo"),
        "payment_date": payment_response.get("PaymentDate"),
        "payment_type": payment_response.get("PaymentType"),
    }
    for source, target in (("BankCode", "bank_code"), ("vAccount", "v_account"), ("ExpireDate", "expire_date")):
        if payment_response.get(source):
            info[target] = payment_response[source]
    return info


# ---------------------------------------------------------
# PAYMENT FLOW
# ---------------------------------------------------------

def create_payment(db: Session, user_id: int, order_id: int) -> dict:
    order = get_order_for_user(db, user_id, order_id)
    if order.payment_status != PaymentStatus.pending:
        raise BusinessError(ErrorCode.PAYMENT_INVALID_STATUS, "Đơn hàng đã thanh toán hoặc trạng thái không hợp lệ")

    merchant_trade_no = generate_merchant_trade_no(order.id)
    params = {
        "MerchantID": ECPAY_MERCHANT_ID,
        "MerchantTradeNo": merchant_trade_no,
        "MerchantTradeDate": format_trade_date(),
        "PaymentType": "aio",
        "TotalAmount": str(int(round(order.total_amount))),
        "TradeDesc": "Mua khoa hoc truc tuyen",
        "ItemName": "Khoa hoc truc tuyen",
        "ReturnURL": f"{API_BASE_URL}{CALLBACK_PATH}",
        "OrderResultURL": f"{API_BASE_URL}{CALLBACK_PATH}",
        "ClientBackURL": f"{FRONTEND_URL}/payment/result",
        "ChoosePayment": CHOOSE_PAYMENT.get(order.purchase_way, "ALL"),
        "EncryptType": "1",
    }
    params["CheckMacValue"] = generate_check_mac_value(params)

    order_crud.update_order(db, order, {
        "merchant_trade_no": merchant_trade_no,
        "payment_status": PaymentStatus.processing,
    })
    logger.info(f"Tạo thanh toán ECPay cho đơn hàng id={order.id}, mã giao dịch {merchant_trade_no}")
    return {
        "payment_url": ECPAY_API_URL,
        "form_data": params,
        "merchant_trade_no": merchant_trade_no,
        "total_amount": float(order.total_amount),
    }


def handle_callback(db: Session, form: Dict[str, str]) -> Optional[Order]:
    """
    Xử lý kết quả thanh toán ECPay gửi về.
    RtnCode == "1": đơn hàng hoàn tất và ghi nhận khóa học đã mua trong cùng giao dịch.
    """
    if not verify_check_mac_value(form):
        logger.warning(f"CheckMacValue không hợp lệ cho giao dịch {form.get('MerchantTradeNo')}")
        raise BusinessError(ErrorCode.PAYMENT_CALLBACK_INVALID, "Xác thực kết quả thanh toán thất bại")

    order = order_crud.get_order_by_trade_no(db, form.get("MerchantTradeNo", ""))
    if not order:
        logger.error(f"Không tìm thấy đơn hàng cho giao dịch {form.get('MerchantTradeNo')}")
        return None
    if order.payment_status == PaymentStatus.completed:
        logger.info(f"Đơn hàng id={order.id} đã hoàn tất trước đó, bỏ qua callback lặp lại")
        return order

    payment_type = form.get("PaymentType", "")
    order.payment_response = dict(form)
    order.actual_payment_method = PAYMENT_METHOD_NAMES.get(payment_type, payment_type)

    try:
        if form.get("RtnCode") == "1":
            order.payment_status = PaymentStatus.completed
            order.paid_at = utc_now()
            purchase_service.create_from_order(db, order, commit=False)
            logger.info(f"Đơn hàng id={order.id} thanh toán thành công")
        else:
            order.payment_status = PaymentStatus.failed
            logger.info(f"Đơn hàng id={order.id} thanh toán thất bại: {form.get('RtnMsg')}")
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(order)
    return order


def get_payment_status(db: Session, user_id: int, order_id: int) -> dict:
    order = get_order_for_user(db, user_id, order_id)
    return {
        "order_id": order.id,
        "payment_status": order.payment_status,
        "merchant_trade_no": order.merchant_trade_no,
        "actual_payment_method": order.actual_payment_method,
        "paid_at": order.paid_at,
        "payment_info": extract_payment_info(order.payment_response),
    }
