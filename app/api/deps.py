# app/api/deps.py
from fastapi import Query
from pydantic import BaseModel

from app.constants import DEFAULT_PAGE, DEFAULT_PER_PAGE, MAX_PER_PAGE
from app.database import get_db

__all__ = ["get_db", "Pagination", "pagination_params"]


class Pagination(BaseModel):
    page: int
    per_page: int


def pagination_params(
    page: int = Query(DEFAULT_PAGE, ge=1, description="Trang hiện tại"),
    per_page: int = Query(DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE, description="Số bản ghi mỗi trang"),
) -> Pagination:
    """Tham số phân trang dùng chung cho các endpoint danh sách."""
    return Pagination(page=page, per_page=per_page)
