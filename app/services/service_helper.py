from datetime import date, datetime, time, timedelta, timezone
import math


def utc_now() -> datetime:
    """Thời điểm hiện tại theo UTC (naive), thống nhất với các cột DateTime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_time(t: str | time) -> time:
    """
    Convert string "HH:MM" / ISO hoặc datetime.time có tzinfo sang naive time.
    """
    if isinstance(t, time):
        return t.replace(tzinfo=None)
    if isinstance(t, str):
        t = t.strip().rstrip("Z")
        for fmt in ("%H:%M", "%H:%M:%S"):
            try:
                return datetime.strptime(t, fmt).time()
            except ValueError:
                continue
        return time.fromisoformat(t).replace(tzinfo=None)
    return t


def format_time(t: time) -> str:
    return t.strftime("%H:%M")


def add_minutes(t: time, minutes: int) -> time:
    return (datetime.combine(date.min, t) + timedelta(minutes=minutes)).time()


def js_weekday(d: date) -> int:
    """Thứ trong tuần dạng 0-6 với Chủ nhật = 0."""
    return (d.weekday() + 1) % 7


def weekly_key_to_weekday(key: str) -> int:
    """Key lịch tuần "1".."7" (thứ Hai..Chủ nhật) -> weekday 0-6 (Chủ nhật = 0)."""
    return int(key) % 7


def weekday_to_weekly_key(weekday: int) -> str:
    return "7" if weekday == 0 else str(weekday)


def build_pagination(page: int, per_page: int, total: int) -> dict:
    return {
        "current_page": page,
        "per_page": per_page,
        "total": total,
        "total_pages": math.ceil(total / per_page) if per_page else 0,
    }
