import re
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.constants import TIME_PATTERN
from app.models.reservation_model import ReservationStatus
from app.schemas.common_schema import PaginationInfo
from app.schemas.user_schema import UserBrief


class ReservationRole(str, Enum):
    student = "student"
    teacher = "teacher"


class StatusType(str, Enum):
    teacher_complete = "teacher-complete"
    student_complete = "student-complete"


class CalendarViewType(str, Enum):
    week = "week"
    month = "month"


class ReservationCreate(BaseModel):
    course_id: int = Field(..., gt=0)
    teacher_id: int = Field(..., gt=0)
    reserve_date: date = Field(..., example="2026-11-02")
    reserve_time: str = Field(..., example="10:00")

    @field_validator("reserve_time")
    @classmethod
    def check_time(cls, value: str) -> str:
        if not re.match(TIME_PATTERN, value):
            raise ValueError("Thời gian phải có định dạng HH:MM")
        return value


class ReservationStatusUpdate(BaseModel):
    status_type: StatusType


class ReservationReason(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class ReservationCourseInfo(BaseModel):
    id: int
    uuid: str
    name: str

    class Config:
        from_attributes = True


class ReservationRead(BaseModel):
    id: int
    uuid: str
    course_id: int
    teacher_id: int
    student_id: int
    reserve_time: datetime
    teacher_status: ReservationStatus
    student_status: ReservationStatus
    response_deadline: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    cancel_reason: Optional[str] = None
    course: Optional[ReservationCourseInfo] = None
    student: Optional[UserBrief] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RemainingLessons(BaseModel):
    total: int
    used: int
    reserved: int
    remaining: int


class ReservationCreateResult(BaseModel):
    reservation: ReservationRead
    remaining_lessons: RemainingLessons


class ReservationListResult(BaseModel):
    reservations: List[ReservationRead]
    pagination: PaginationInfo


class ReservationStatusResult(BaseModel):
    reservation: ReservationRead
    is_fully_completed: bool


class ReservationCancelResult(BaseModel):
    reservation: ReservationRead
    refunded_lessons: int


class CalendarReservation(BaseModel):
    id: int
    uuid: str
    time: str
    duration: int
    status: str
    course_id: int
    course_name: Optional[str] = None
    participant_id: int
    participant_name: Optional[str] = None


class CalendarDay(BaseModel):
    date: date
    weekday: int
    reservations: List[CalendarReservation]


class CalendarPeriod(BaseModel):
    start_date: date
    end_date: date
    year: Optional[int] = None
    month: Optional[int] = None


class CalendarSummary(BaseModel):
    total_reservations: int
    completed_reservations: int
    upcoming_reservations: int


class CalendarView(BaseModel):
    view: CalendarViewType
    period: CalendarPeriod
    calendar_data: List[CalendarDay]
    summary: Optional[CalendarSummary] = None
