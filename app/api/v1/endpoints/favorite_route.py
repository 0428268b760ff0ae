# app/api/v1/endpoints/favorite_route.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api import deps
from app.api.auth.auth import get_current_active_user
from app.schemas import favorite_schema
from app.schemas.auth_schema import AuthenticatedUser
from app.schemas.common_schema import ApiResponse, MessageResponse, success
from app.services import favorite_service

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[favorite_schema.FavoriteRead],
    status_code=status.HTTP_201_CREATED,
    summary="Lưu khóa học vào danh sách yêu thích",
)
def add_favorite(
    data: favorite_schema.FavoriteAdd,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    """
    Chỉ lưu được khóa học đã xuất bản và không phải của chính mình.
    """
    favorite = favorite_service.add_favorite(db, current_user.user_id, data.course_id)
    return success(favorite, "Đã thêm vào danh sách yêu thích")


@router.get("", response_model=ApiResponse[favorite_schema.FavoriteListResult], summary="Danh sách yêu thích")
def list_favorites(
    pagination: deps.Pagination = Depends(deps.pagination_params),
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    result = favorite_service.list_favorites(db, current_user.user_id, pagination.page, pagination.per_page)
    return success(result, "Lấy danh sách yêu thích thành công")


@router.get(
    "/status/{course_id}",
    response_model=ApiResponse[favorite_schema.FavoriteStatus],
    summary="Kiểm tra khóa học đã được lưu chưa",
)
def get_favorite_status(
    course_id: int,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    return success(favorite_service.get_favorite_status(db, current_user.user_id, course_id))


@router.delete("/{course_id}", response_model=MessageResponse, summary="Bỏ khóa học khỏi danh sách yêu thích")
def remove_favorite(
    course_id: int,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    favorite_service.remove_favorite(db, current_user.user_id, course_id)
    return {"status": "success", "message": "Đã xóa khỏi danh sách yêu thích"}
