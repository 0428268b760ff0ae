# app/api/v1/endpoints/purchase_route.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api import deps
from app.api.auth.auth import get_current_active_user
from app.schemas import purchase_schema
from app.schemas.auth_schema import AuthenticatedUser
from app.schemas.common_schema import ApiResponse, success
from app.services import purchase_service

router = APIRouter()


@router.get("", response_model=ApiResponse[List[purchase_schema.PurchaseRead]], summary="Các khóa học đã mua")
def list_purchases(
    course_id: Optional[int] = Query(None, gt=0),
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    purchases = purchase_service.list_purchases(db, current_user.user_id, course_id)
    return success(purchases, "Lấy danh sách khóa học đã mua thành công")


@router.get(
    "/courses/{course_id}",
    response_model=ApiResponse[purchase_schema.PurchaseRead],
    summary="Số buổi học đã mua của một khóa học",
)
def get_course_purchase(
    course_id: int,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    purchase = purchase_service.get_course_purchase(db, current_user.user_id, course_id)
    return success(purchase, "Lấy thông tin mua khóa học thành công")
