# app/core/exceptions.py
from typing import Dict, List, Optional

from fastapi import status


class ErrorCode:
    """Danh mục mã lỗi trả về cho client."""

    # Chung
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    HTTP_ERROR = "HTTP_ERROR"

    # Xác thực
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ACCOUNT_SUSPENDED = "ACCOUNT_SUSPENDED"
    ACCOUNT_SUSPENDED_RESET = "ACCOUNT_SUSPENDED_RESET"
    TOKEN_INVALID_OR_EXPIRED = "TOKEN_INVALID_OR_EXPIRED"
    RESET_TOKEN_INVALID = "RESET_TOKEN_INVALID"
    EMAIL_EXISTS = "EMAIL_EXISTS"
    NICKNAME_EXISTS = "NICKNAME_EXISTS"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"

    # Giáo viên
    APPLICATION_EXISTS = "APPLICATION_EXISTS"
    APPLICATION_NOT_FOUND = "APPLICATION_NOT_FOUND"
    APPLICATION_NOT_EDITABLE = "APPLICATION_NOT_EDITABLE"
    APPLICATION_NOT_REJECTED = "APPLICATION_NOT_REJECTED"
    APPLICATION_NOT_PENDING = "APPLICATION_NOT_PENDING"
    TEACHER_NOT_FOUND = "TEACHER_NOT_FOUND"
    TEACHER_NOT_APPROVED = "TEACHER_NOT_APPROVED"
    STUDENT_ROLE_REQUIRED = "STUDENT_ROLE_REQUIRED"
    WORK_EXPERIENCE_NOT_FOUND = "WORK_EXPERIENCE_NOT_FOUND"
    LEARNING_EXPERIENCE_NOT_FOUND = "LEARNING_EXPERIENCE_NOT_FOUND"
    CERTIFICATE_NOT_FOUND = "CERTIFICATE_NOT_FOUND"
    TEACHER_RECORD_FORBIDDEN = "TEACHER_RECORD_FORBIDDEN"

    # Lịch dạy
    SCHEDULE_INVALID_DATE_RANGE = "SCHEDULE_INVALID_DATE_RANGE"

    # Danh mục & khóa học
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    CITY_NOT_FOUND = "CITY_NOT_FOUND"
    COURSE_NOT_FOUND = "COURSE_NOT_FOUND"
    COURSE_NOT_OWNER = "COURSE_NOT_OWNER"
    COURSE_INVALID_STATUS = "COURSE_INVALID_STATUS"
    COURSE_ALREADY_PENDING = "COURSE_ALREADY_PENDING"
    COURSE_PUBLISHED_CANNOT_DELETE = "COURSE_PUBLISHED_CANNOT_DELETE"
    COURSE_NOT_APPROVED = "COURSE_NOT_APPROVED"

    # Khóa học yêu thích
    FAVORITE_ALREADY_EXISTS = "FAVORITE_ALREADY_EXISTS"
    FAVORITE_NOT_FOUND = "FAVORITE_NOT_FOUND"
    CANNOT_FAVORITE_OWN_COURSE = "CANNOT_FAVORITE_OWN_COURSE"

    # Phương án giá
    PRICE_OPTION_NOT_FOUND = "PRICE_OPTION_NOT_FOUND"
    PRICE_OPTION_LIMIT_EXCEEDED = "PRICE_OPTION_LIMIT_EXCEEDED"
    PRICE_OPTION_DUPLICATE = "PRICE_OPTION_DUPLICATE"

    # Giỏ hàng & đơn hàng
    CART_ITEM_NOT_FOUND = "CART_ITEM_NOT_FOUND"
    CART_ITEMS_REQUIRED = "CART_ITEMS_REQUIRED"
    CART_ITEM_INVALID = "CART_ITEM_INVALID"
    CANNOT_PURCHASE_OWN_COURSE = "CANNOT_PURCHASE_OWN_COURSE"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    ORDER_ALREADY_CANCELLED = "ORDER_ALREADY_CANCELLED"
    ORDER_CANNOT_CANCEL = "ORDER_CANNOT_CANCEL"
    ORDER_NOT_PAID = "ORDER_NOT_PAID"
    PAYMENT_INVALID_STATUS = "PAYMENT_INVALID_STATUS"
    PAYMENT_CALLBACK_INVALID = "PAYMENT_CALLBACK_INVALID"

    # Gói đã mua
    PURCHASE_NOT_FOUND = "PURCHASE_NOT_FOUND"
    PURCHASE_INSUFFICIENT = "PURCHASE_INSUFFICIENT"

    # Đặt lịch
    RESERVATION_NOT_FOUND = "RESERVATION_NOT_FOUND"
    RESERVATION_COURSE_NOT_PURCHASED = "RESERVATION_COURSE_NOT_PURCHASED"
    RESERVATION_INSUFFICIENT_LESSONS = "RESERVATION_INSUFFICIENT_LESSONS"
    RESERVATION_TEACHER_UNAVAILABLE = "RESERVATION_TEACHER_UNAVAILABLE"
    RESERVATION_CONFLICT = "RESERVATION_CONFLICT"
    RESERVATION_PAST_TIME = "RESERVATION_PAST_TIME"
    RESERVATION_INVALID_STATUS = "RESERVATION_INVALID_STATUS"
    RESERVATION_CANCEL_TOO_LATE = "RESERVATION_CANCEL_TOO_LATE"
    RESERVATION_RESPONSE_EXPIRED = "RESERVATION_RESPONSE_EXPIRED"
    RESERVATION_FORBIDDEN = "RESERVATION_FORBIDDEN"

    # Đánh giá
    REVIEW_RESERVATION_NOT_COMPLETED = "REVIEW_RESERVATION_NOT_COMPLETED"
    REVIEW_ALREADY_EXISTS = "REVIEW_ALREADY_EXISTS"

    # Quản trị
    ADMIN_INVALID_CREDENTIALS = "ADMIN_INVALID_CREDENTIALS"
    ADMIN_ACCOUNT_INACTIVE = "ADMIN_ACCOUNT_INACTIVE"
    ADMIN_TOKEN_INVALID = "ADMIN_TOKEN_INVALID"

    NOTIFICATION_NOT_FOUND = "NOTIFICATION_NOT_FOUND"


class AppError(Exception):
    """
    Lỗi nghiệp vụ có mã lỗi, thông điệp và HTTP status.
    Được chuyển thành JSON thống nhất bởi error handler trung tâm.
    """

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        code: str,
        message: str,
        status_code: Optional[int] = None,
        errors: Optional[Dict[str, List[str]]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors

    def to_dict(self) -> dict:
        body = {"status": "error", "code": self.code, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class BusinessError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class AppValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        errors: Dict[str, List[str]],
        message: str = "Dữ liệu không hợp lệ",
        code: str = ErrorCode.VALIDATION_ERROR,
    ):
        super().__init__(code, message, errors=errors)


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Lỗi hệ thống, vui lòng thử lại sau"):
        super().__init__(ErrorCode.INTERNAL_ERROR, message)
