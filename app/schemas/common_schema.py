from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Khung phản hồi thành công thống nhất."""
    status: str = "success"
    message: str = ""
    data: Optional[T] = None


class PaginationInfo(BaseModel):
    current_page: int
    per_page: int
    total: int
    total_pages: int


class MessageResponse(BaseModel):
    status: str = "success"
    message: str


def success(data=None, message: str = "") -> dict:
    return {"status": "success", "message": message, "data": data}
