import re
from datetime import date, datetime, time
from typing import Dict, List

from pydantic import BaseModel, Field, ValidationInfo, field_serializer, field_validator

from app.constants import (
    MAX_SLOTS_PER_DAY,
    MAX_SLOTS_PER_UPDATE,
    MAX_SLOTS_PER_WEEK,
    STANDARD_TIME_SLOTS,
    TIME_PATTERN,
    WEEKLY_DAY_KEYS,
)


class AvailableSlotInput(BaseModel):
    """Một khung giờ rảnh, giờ được chuẩn hóa về dạng HH:MM."""
    weekday: int = Field(..., ge=0, le=6, description="0-6, Chủ nhật = 0")
    start_time: str = Field(..., example="09:00")
    end_time: str = Field(..., example="10:00")
    is_active: bool = True

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_time(cls, value: str) -> str:
        match = re.match(TIME_PATTERN, value)
        if not match:
            raise ValueError("Giờ phải có định dạng HH:MM")
        # "9:00" và "09:00" là cùng một giờ
        return f"{int(match.group(1)):02d}:{match.group(2)}"

    @field_validator("end_time")
    @classmethod
    def check_end_after_start(cls, value: str, info: ValidationInfo) -> str:
        start_time = info.data.get("start_time")
        if start_time and value <= start_time:
            raise ValueError("Giờ kết thúc phải sau giờ bắt đầu")
        return value


class ScheduleUpdateRequest(BaseModel):
    available_slots: List[AvailableSlotInput] = Field(..., max_length=MAX_SLOTS_PER_UPDATE)

    @field_validator("available_slots")
    @classmethod
    def check_duplicates(cls, value: List[AvailableSlotInput]) -> List[AvailableSlotInput]:
        seen = set()
        for index, slot in enumerate(value):
            key = (slot.weekday, slot.start_time, slot.end_time)
            if key in seen:
                raise ValueError(f"Khung giờ thứ {index + 1} bị trùng lặp")
            seen.add(key)
        return value


class SlotRead(BaseModel):
    id: int
    teacher_id: int
    weekday: int
    start_time: time
    end_time: time
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @field_serializer("start_time", "end_time")
    def format_time(self, value: time):
        return value.strftime("%H:%M")


class ScheduleRead(BaseModel):
    available_slots: List[SlotRead]
    total_slots: int


class ScheduleUpdateResult(ScheduleRead):
    updated_count: int
    created_count: int
    deleted_count: int


class ConflictInfo(BaseModel):
    slot_id: int
    reservation_id: int
    reserve_time: datetime
    student_id: int
    reason: str


class CheckPeriod(BaseModel):
    from_date: date
    to_date: date


class ConflictCheckResult(BaseModel):
    has_conflicts: bool
    conflicts: List[ConflictInfo]
    total_conflicts: int
    check_period: CheckPeriod


class WeeklyScheduleRequest(BaseModel):
    """
    Lịch tuần: key "1".."7" (thứ Hai..Chủ nhật), value là các khung giờ chuẩn 1 tiếng.
    """
    weekly_schedule: Dict[str, List[str]]

    @field_validator("weekly_schedule")
    @classmethod
    def check_weekly_schedule(cls, value: Dict[str, List[str]]) -> Dict[str, List[str]]:
        total = 0
        for day, slots in value.items():
            if day not in WEEKLY_DAY_KEYS:
                raise ValueError(f"Thứ trong tuần không hợp lệ: {day}")
            if len(slots) > MAX_SLOTS_PER_DAY:
                raise ValueError(f"Mỗi ngày tối đa {MAX_SLOTS_PER_DAY} khung giờ")
            if len(set(slots)) != len(slots):
                raise ValueError(f"Khung giờ bị trùng trong ngày {day}")
            invalid = [slot for slot in slots if slot not in STANDARD_TIME_SLOTS]
            if invalid:
                raise ValueError(f"Khung giờ không hợp lệ: {', '.join(invalid)}")
            total += len(slots)
        if total > MAX_SLOTS_PER_WEEK:
            raise ValueError(f"Mỗi tuần tối đa {MAX_SLOTS_PER_WEEK} khung giờ")
        return value


class WeeklyScheduleRead(BaseModel):
    weekly_schedule: Dict[str, List[str]]
    total_slots: int
    slots_by_day: Dict[str, int]
    updated_count: int = 0
    created_count: int = 0
    deleted_count: int = 0


class PublicSlot(BaseModel):
    weekday: int
    start_time: time
    end_time: time

    class Config:
        from_attributes = True

    @field_serializer("start_time", "end_time")
    def format_time(self, value: time):
        return value.strftime("%H:%M")
