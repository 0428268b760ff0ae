from conftest import auth_headers

from app.models.course_model import CourseStatus
from app.models.order_model import Order, PaymentStatus
from app.models.purchase_model import UserCoursePurchase
from app.services.payment_service import generate_check_mac_value, verify_check_mac_value

BUYER = {
    "purchase_way": "credit_card",
    "buyer_name": "Nguyễn Văn B",
    "buyer_phone": "0912345678",
    "buyer_email": "buyer@mail.com",
}


def _add_to_cart(client, headers, course, quantity=1):
    option = course.active_price_options[0]
    return client.post(
        "/api/v1/cart/items",
        json={"course_id": course.id, "price_option_id": option.id, "quantity": quantity},
        headers=headers,
    )


def _checkout(client, headers, course, quantity=1):
    item_id = _add_to_cart(client, headers, course, quantity).json()["data"]["id"]
    response = client.post("/api/v1/orders", json={"cart_item_ids": [item_id], **BUYER}, headers=headers)
    assert response.status_code == 201
    return response.json()["data"]["order"]


def _callback(client, merchant_trade_no, rtn_code="1"):
    form = {
        "MerchantID": "3002607",
        "MerchantTradeNo": merchant_trade_no,
        "RtnCode": rtn_code,
        "RtnMsg": "Succeeded" if rtn_code == "1" else "Failed",
        "TradeNo": "2410180000000001",
        "TradeAmt": "2000",
        "PaymentDate": "2026/10/18 10:00:00",
        "PaymentType": "Credit_CreditCard",
    }
    form["CheckMacValue"] = generate_check_mac_value(form)
    return client.post("/api/v1/payments/ecpay/callback", data=form)


# ---------------------------------------------------------
# GIỎ HÀNG
# ---------------------------------------------------------

def test_add_to_cart_merges_quantity(client, course, student_headers):
    response = _add_to_cart(client, student_headers, course)
    assert response.status_code == 201
    assert response.json()["data"]["is_valid"] is True

    response = _add_to_cart(client, student_headers, course, quantity=2)
    assert response.status_code == 200
    assert response.json()["data"]["quantity"] == 3

    summary = client.get("/api/v1/cart", headers=student_headers).json()["data"]["summary"]
    assert summary == {"total_items": 3, "total_amount": 3000.0, "valid_items": 1, "invalid_items": 0}


def test_cart_quantity_cannot_exceed_limit(client, course, student_headers):
    _add_to_cart(client, student_headers, course, quantity=60)
    response = _add_to_cart(client, student_headers, course, quantity=60)
    assert response.status_code == 400
    assert "quantity" in response.json()["errors"]


def test_cannot_buy_own_course(client, course, teacher_headers):
    response = _add_to_cart(client, teacher_headers, course)
    assert response.status_code == 403
    assert response.json()["code"] == "CANNOT_PURCHASE_OWN_COURSE"


def test_cart_marks_unpublished_course_invalid(client, db, course, student_headers):
    _add_to_cart(client, student_headers, course)
    course.status = CourseStatus.archived
    db.commit()

    data = client.get("/api/v1/cart", headers=student_headers).json()["data"]
    assert data["cart_items"][0]["is_valid"] is False
    assert data["summary"]["invalid_items"] == 1
    assert data["summary"]["total_amount"] == 0.0


def test_update_and_remove_cart_item(client, course, student_headers, make_user):
    item_id = _add_to_cart(client, student_headers, course).json()["data"]["id"]

    other = make_user("stranger")
    response = client.put(f"/api/v1/cart/items/{item_id}", json={"quantity": 4}, headers=auth_headers(other))
    assert response.status_code == 403

    response = client.put(f"/api/v1/cart/items/{item_id}", json={"quantity": 4}, headers=student_headers)
    assert response.json()["data"]["quantity"] == 4

    assert client.delete(f"/api/v1/cart/items/{item_id}", headers=student_headers).status_code == 200
    assert client.get("/api/v1/cart", headers=student_headers).json()["data"]["cart_items"] == []


def test_clear_cart(client, course, student_headers):
    _add_to_cart(client, student_headers, course)
    assert client.delete("/api/v1/cart", headers=student_headers).status_code == 200
    assert client.get("/api/v1/cart", headers=student_headers).json()["data"]["summary"]["total_items"] == 0


# ---------------------------------------------------------
# ĐƠN HÀNG
# ---------------------------------------------------------

def test_create_order_snapshots_prices_and_empties_cart(client, course, student_headers):
    order = _checkout(client, student_headers, course, quantity=2)
    assert order["total_amount"] == 2000.0
    assert order["payment_status"] == "pending"

    detail = client.get(f"/api/v1/orders/{order['id']}", headers=student_headers).json()["data"]
    assert detail["order_items"][0]["unit_price"] == 1000.0
    assert detail["order_items"][0]["course_name"] == course.name
    assert client.get("/api/v1/cart", headers=student_headers).json()["data"]["cart_items"] == []

    orders = client.get("/api/v1/orders", headers=student_headers).json()["data"]["orders"]
    assert orders[0]["courses_summary"] == [{"course_name": course.name, "total_quantity": 2}]


def test_create_order_requires_items(client, student_headers):
    response = client.post("/api/v1/orders", json={"cart_item_ids": [], **BUYER}, headers=student_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "CART_ITEMS_REQUIRED"

    response = client.post("/api/v1/orders", json={"cart_item_ids": [999], **BUYER}, headers=student_headers)
    assert response.status_code == 404
    assert response.json()["code"] == "CART_ITEM_NOT_FOUND"


def test_create_order_rejects_invalid_item(client, db, course, student_headers):
    item_id = _add_to_cart(client, student_headers, course).json()["data"]["id"]
    course.status = CourseStatus.archived
    db.commit()

    response = client.post("/api/v1/orders", json={"cart_item_ids": [item_id], **BUYER}, headers=student_headers)
    assert response.status_code == 400
    assert response.json()["code"] == "CART_ITEM_INVALID"


def test_order_of_other_user_is_forbidden(client, course, student_headers, make_user):
    order = _checkout(client, student_headers, course)
    other = make_user("stranger")
    assert client.get(f"/api/v1/orders/{order['id']}", headers=auth_headers(other)).status_code == 403


def test_cancel_order(client, course, student_headers):
    order = _checkout(client, student_headers, course)
    response = client.post(f"/api/v1/orders/{order['id']}/cancel", headers=student_headers)
    assert response.status_code == 200
    assert response.json()["data"]["payment_status"] == "cancelled"

    response = client.post(f"/api/v1/orders/{order['id']}/cancel", headers=student_headers)
    assert response.json()["code"] == "ORDER_ALREADY_CANCELLED"


# ---------------------------------------------------------
# THANH TOÁN
# ---------------------------------------------------------

def test_check_mac_value_is_stable():
    params = {"MerchantID": "3002607", "TotalAmount": "1000", "ItemName": "Khoa hoc"}
    mac = generate_check_mac_value(params)
    assert len(mac) == 64
    assert mac == mac.upper()
    assert verify_check_mac_value({**params, "CheckMacValue": mac.lower()})
    assert not verify_check_mac_value({**params, "TotalAmount": "1", "CheckMacValue": mac})


def test_create_payment_marks_order_processing(client, course, student_headers):
    order = _checkout(client, student_headers, course)

    response = client.post(f"/api/v1/orders/{order['id']}/payment", headers=student_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["form_data"]["TotalAmount"] == "1000"
    assert data["form_data"]["ChoosePayment"] == "Credit"
    assert verify_check_mac_value(data["form_data"])

    status = client.get(f"/api/v1/orders/{order['id']}/payment/status", headers=student_headers).json()["data"]
    assert status["payment_status"] == "processing"

    # Chỉ đơn đang chờ mới tạo được thanh toán
    response = client.post(f"/api/v1/orders/{order['id']}/payment", headers=student_headers)
    assert response.json()["code"] == "PAYMENT_INVALID_STATUS"


def test_successful_callback_creates_purchase_once(client, db, course, student, student_headers):
    order = _checkout(client, student_headers, course, quantity=2)
    trade_no = client.post(f"/api/v1/orders/{order['id']}/payment", headers=student_headers).json()["data"][
        "merchant_trade_no"
    ]

    response = _callback(client, trade_no)
    assert response.status_code == 200
    assert response.text == "1|OK"

    # ECPay có thể gửi lại callback, không được cộng thêm buổi học
    assert _callback(client, trade_no).text == "1|OK"

    purchase = db.query(UserCoursePurchase).filter_by(user_id=student.id, course_id=course.id).one()
    assert purchase.quantity_total == 20
    db.refresh(course)
    assert course.purchase_count == 1

    status = client.get(f"/api/v1/orders/{order['id']}/payment/status", headers=student_headers).json()["data"]
    assert status["payment_status"] == "completed"
    assert status["actual_payment_method"] == "Thẻ tín dụng"
    assert status["payment_info"]["trade_no"] == "2410180000000001"

    purchases = client.get("/api/v1/purchases", headers=student_headers).json()["data"]
    assert purchases[0]["quantity_remaining"] == 20
    response = client.get(f"/api/v1/purchases/courses/{course.id}", headers=student_headers)
    assert response.json()["data"]["course"]["name"] == course.name


def test_failed_callback_marks_order_failed(client, db, course, student_headers):
    order = _checkout(client, student_headers, course)
    trade_no = client.post(f"/api/v1/orders/{order['id']}/payment", headers=student_headers).json()["data"][
        "merchant_trade_no"
    ]

    assert _callback(client, trade_no, rtn_code="10100058").text == "1|OK"
    assert db.get(Order, order["id"]).payment_status == PaymentStatus.failed
    assert db.query(UserCoursePurchase).count() == 0


def test_callback_with_bad_mac_is_rejected(client):
    response = client.post(
        "/api/v1/payments/ecpay/callback",
        data={"MerchantTradeNo": "ORDER000", "RtnCode": "1", "CheckMacValue": "ABC"},
    )
    assert response.status_code == 400
    assert response.json()["code"] == "PAYMENT_CALLBACK_INVALID"


def test_purchase_not_found(client, course, student_headers):
    response = client.get(f"/api/v1/purchases/courses/{course.id}", headers=student_headers)
    assert response.status_code == 404
    assert response.json()["code"] == "PURCHASE_NOT_FOUND"
