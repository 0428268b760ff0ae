# app/constants.py
from decimal import Decimal

# ---------------------------------------------------------
# Phân trang
# ---------------------------------------------------------
DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100

# ---------------------------------------------------------
# Lịch dạy của giáo viên
# ---------------------------------------------------------
TIME_PATTERN = r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$"
MAX_SLOTS_PER_UPDATE = 50
MAX_SLOTS_PER_DAY = 10
MAX_SLOTS_PER_WEEK = 70
SLOT_DURATION_MINUTES = 60

# Các khung giờ chuẩn cho lịch tuần (mỗi khung 1 tiếng)
STANDARD_TIME_SLOTS = [
    "09:00", "10:00", "11:00",
    "13:00", "14:00", "15:00", "16:00", "17:00",
    "19:00", "20:00",
]

# Key của lịch tuần: "1" = thứ Hai ... "7" = Chủ nhật
WEEKLY_DAY_KEYS = ["1", "2", "3", "4", "5", "6", "7"]

DEFAULT_CONFLICT_CHECK_DAYS = 30
MAX_CONFLICT_CHECK_DAYS = 365

# ---------------------------------------------------------
# Phương án giá của khóa học
# ---------------------------------------------------------
MAX_PRICE_OPTIONS_PER_COURSE = 3
PRICE_MIN = Decimal("1")
PRICE_MAX = Decimal("999999")
QUANTITY_MIN = 1
QUANTITY_MAX = 999

# ---------------------------------------------------------
# Giỏ hàng
# ---------------------------------------------------------
CART_ITEM_QUANTITY_MIN = 1
CART_ITEM_QUANTITY_MAX = 99

# ---------------------------------------------------------
# Đặt lịch học
# ---------------------------------------------------------
CANCEL_MIN_HOURS_BEFORE = 24
URGENT_RESPONSE_HOURS = 12
NORMAL_RESPONSE_HOURS = 24

# ---------------------------------------------------------
# Bảo mật
# ---------------------------------------------------------
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
RESET_TOKEN_EXPIRE_HOURS = 1
