# app/api/v1/endpoints/review_route.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api import deps
from app.api.auth.auth import get_current_active_user, has_roles
from app.schemas import review_schema
from app.schemas.auth_schema import AuthenticatedUser
from app.schemas.common_schema import ApiResponse, success
from app.services import review_service

router = APIRouter()

TEACHER_ONLY = has_roles(["teacher"])


@router.post(
    "",
    response_model=ApiResponse[review_schema.ReviewRead],
    status_code=status.HTTP_201_CREATED,
    summary="Đánh giá buổi học",
)
def submit_review(
    data: review_schema.ReviewCreate,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    review = review_service.submit_review(db, current_user.user_id, data)
    return success(review_schema.ReviewRead.model_validate(review), "Đánh giá thành công")


@router.get(
    "/courses/{course_uuid}",
    response_model=ApiResponse[review_schema.CourseReviewsResult],
    summary="Đánh giá của một khóa học",
)
def get_course_reviews(
    course_uuid: str,
    rating: Optional[int] = Query(None, ge=1, le=5),
    sort_by: review_schema.ReviewSortBy = Query(review_schema.ReviewSortBy.created_at),
    sort_order: review_schema.SortOrder = Query(review_schema.SortOrder.desc),
    pagination: deps.Pagination = Depends(deps.pagination_params),
    db: Session = Depends(deps.get_db),
):
    """
    Quyền truy cập: **công khai**, chỉ với khóa học đã xuất bản.
    """
    result = review_service.get_course_reviews(
        db, course_uuid, rating, sort_by.value, sort_order.value, pagination.page, pagination.per_page
    )
    return success(result, "Lấy đánh giá khóa học thành công")


@router.get("/my-reviews", response_model=ApiResponse[review_schema.ReviewListResult], summary="Đánh giá của tôi")
def get_my_reviews(
    course_id: Optional[int] = Query(None, gt=0),
    sort_by: review_schema.ReviewSortBy = Query(review_schema.ReviewSortBy.created_at),
    sort_order: review_schema.SortOrder = Query(review_schema.SortOrder.desc),
    pagination: deps.Pagination = Depends(deps.pagination_params),
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    result = review_service.get_my_reviews(
        db, current_user.user_id, course_id, sort_by.value, sort_order.value, pagination.page, pagination.per_page
    )
    return success(result, "Lấy danh sách đánh giá thành công")


@router.get(
    "/received",
    response_model=ApiResponse[review_schema.ReviewListResult],
    summary="Đánh giá giáo viên nhận được",
)
def get_received_reviews(
    course_id: Optional[int] = Query(None, gt=0),
    rating: Optional[int] = Query(None, ge=1, le=5),
    sort_by: review_schema.ReviewSortBy = Query(review_schema.ReviewSortBy.created_at),
    sort_order: review_schema.SortOrder = Query(review_schema.SortOrder.desc),
    pagination: deps.Pagination = Depends(deps.pagination_params),
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(TEACHER_ONLY),
):
    result = review_service.get_received_reviews(
        db, current_user.user_id, course_id, rating, sort_by.value, sort_order.value,
        pagination.page, pagination.per_page,
    )
    return success(result, "Lấy danh sách đánh giá thành công")
