from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

MIN_WORK_YEAR = 1970
MIN_LEARNING_YEAR = 1900

WORK_TEXT_FIELDS = ("company_name", "workplace", "job_category", "job_title")
LEARNING_TEXT_FIELDS = ("degree", "school_name", "department")
CERTIFICATE_TEXT_FIELDS = (
    "verifying_institution", "license_name", "holder_name", "license_number", "file_path", "category_id", "subject",
)


def _strip_required(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise ValueError("Trường này không được để trống")
    return value.strip()


def _check_year(value: Optional[int], min_year: int) -> Optional[int]:
    if value is not None and not min_year <= value <= date.today().year:
        raise ValueError(f"Năm phải nằm trong khoảng {min_year}-{date.today().year}")
    return value


# ---------------------------------------------------------
# KINH NGHIỆM LÀM VIỆC
# ---------------------------------------------------------

class WorkExperienceCreate(BaseModel):
    is_working: bool
    company_name: str = Field(..., max_length=200)
    workplace: str = Field(..., max_length=200)
    job_category: str = Field(..., max_length=100)
    job_title: str = Field(..., max_length=100)
    start_year: int
    start_month: int = Field(..., ge=1, le=12)
    end_year: Optional[int] = None
    end_month: Optional[int] = Field(None, ge=1, le=12)

    @field_validator(*WORK_TEXT_FIELDS)
    @classmethod
    def check_text(cls, value: str) -> str:
        return _strip_required(value)

    @field_validator("start_year", "end_year")
    @classmethod
    def check_year(cls, value: Optional[int]) -> Optional[int]:
        return _check_year(value, MIN_WORK_YEAR)


class WorkExperienceUpdate(BaseModel):
    is_working: Optional[bool] = None
    company_name: Optional[str] = Field(None, max_length=200)
    workplace: Optional[str] = Field(None, max_length=200)
    job_category: Optional[str] = Field(None, max_length=100)
    job_title: Optional[str] = Field(None, max_length=100)
    start_year: Optional[int] = None
    start_month: Optional[int] = Field(None, ge=1, le=12)
    end_year: Optional[int] = None
    end_month: Optional[int] = Field(None, ge=1, le=12)

    @field_validator(*WORK_TEXT_FIELDS)
    @classmethod
    def check_text(cls, value: Optional[str]) -> str:
        return _strip_required(value)

    @field_validator("is_working", "start_year", "start_month")
    @classmethod
    def check_not_null(cls, value):
        if value is None:
            raise ValueError("Trường này không được để trống")
        return value

    @field_validator("start_year", "end_year")
    @classmethod
    def check_year(cls, value: Optional[int]) -> Optional[int]:
        return _check_year(value, MIN_WORK_YEAR)


class WorkExperienceRead(BaseModel):
    id: int
    teacher_id: int
    is_working: bool
    company_name: str
    workplace: str
    job_category: str
    job_title: str
    start_year: int
    start_month: int
    end_year: Optional[int] = None
    end_month: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ---------------------------------------------------------
# QUÁ TRÌNH HỌC TẬP
# ---------------------------------------------------------

class LearningExperienceCreate(BaseModel):
    is_in_school: bool
    degree: str = Field(..., max_length=50)
    school_name: str = Field(..., max_length=200)
    department: str = Field(..., max_length=200)
    region: bool = Field(..., description="True: trong nước, False: nước ngoài")
    start_year: int
    start_month: int = Field(..., ge=1, le=12)
    end_year: Optional[int] = None
    end_month: Optional[int] = Field(None, ge=1, le=12)
    file_path: Optional[str] = None

    @field_validator(*LEARNING_TEXT_FIELDS)
    @classmethod
    def check_text(cls, value: str) -> str:
        return _strip_required(value)

    @field_validator("start_year", "end_year")
    @classmethod
    def check_year(cls, value: Optional[int]) -> Optional[int]:
        return _check_year(value, MIN_LEARNING_YEAR)


class LearningExperienceUpdate(BaseModel):
    is_in_school: Optional[bool] = None
    degree: Optional[str] = Field(None, max_length=50)
    school_name: Optional[str] = Field(None, max_length=200)
    department: Optional[str] = Field(None, max_length=200)
    region: Optional[bool] = None
    start_year: Optional[int] = None
    start_month: Optional[int] = Field(None, ge=1, le=12)
    end_year: Optional[int] = None
    end_month: Optional[int] = Field(None, ge=1, le=12)
    file_path: Optional[str] = None

    @field_validator(*LEARNING_TEXT_FIELDS)
    @classmethod
    def check_text(cls, value: Optional[str]) -> str:
        return _strip_required(value)

    @field_validator("is_in_school", "region", "start_year", "start_month")
    @classmethod
    def check_not_null(cls, value):
        if value is None:
            raise ValueError("Trường này không được để trống")
        return value

    @field_validator("start_year", "end_year")
    @classmethod
    def check_year(cls, value: Optional[int]) -> Optional[int]:
        return _check_year(value, MIN_LEARNING_YEAR)


class LearningExperienceRead(BaseModel):
    id: int
    teacher_id: int
    is_in_school: bool
    degree: str
    school_name: str
    department: str
    region: bool
    start_year: int
    start_month: int
    end_year: Optional[int] = None
    end_month: Optional[int] = None
    file_path: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ---------------------------------------------------------
# CHỨNG CHỈ
# ---------------------------------------------------------

class CertificateCreate(BaseModel):
    verifying_institution: str = Field(..., max_length=200)
    license_name: str = Field(..., max_length=200)
    holder_name: str = Field(..., max_length=100)
    license_number: str = Field(..., max_length=100)
    file_path: str
    category_id: str = Field(..., max_length=50)
    subject: str = Field(..., max_length=100)

    @field_validator(*CERTIFICATE_TEXT_FIELDS)
    @classmethod
    def check_text(cls, value: str) -> str:
        return _strip_required(value)


class CertificateUpdate(BaseModel):
    verifying_institution: Optional[str] = Field(None, max_length=200)
    license_name: Optional[str] = Field(None, max_length=200)
    holder_name: Optional[str] = Field(None, max_length=100)
    license_number: Optional[str] = Field(None, max_length=100)
    file_path: Optional[str] = None
    category_id: Optional[str] = Field(None, max_length=50)
    subject: Optional[str] = Field(None, max_length=100)

    @field_validator(*CERTIFICATE_TEXT_FIELDS)
    @classmethod
    def check_text(cls, value: Optional[str]) -> str:
        return _strip_required(value)


class CertificateRead(BaseModel):
    id: int
    teacher_id: int
    verifying_institution: str
    license_name: str
    holder_name: str
    license_number: str
    file_path: str
    category_id: str
    subject: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

