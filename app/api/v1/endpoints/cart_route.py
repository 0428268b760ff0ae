# app/api/v1/endpoints/cart_route.py
from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api import deps
from app.api.auth.auth import get_current_active_user
from app.schemas import cart_schema
from app.schemas.auth_schema import AuthenticatedUser
from app.schemas.common_schema import ApiResponse, MessageResponse, success
from app.services import cart_service

router = APIRouter()


@router.post(
    "/items",
    response_model=ApiResponse[cart_schema.CartItemRead],
    status_code=status.HTTP_201_CREATED,
    summary="Thêm khóa học vào giỏ hàng",
)
def add_cart_item(
    data: cart_schema.CartItemAdd,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    """
    Nếu sản phẩm đã có trong giỏ, số lượng được cộng dồn và trả về 200.
    """
    item, is_update = cart_service.add_item(db, current_user.user_id, data)
    if is_update:
        body = success(
            cart_schema.CartItemRead.model_validate(item, from_attributes=True),
            "Đã cập nhật số lượng trong giỏ hàng",
        )
        return JSONResponse(status_code=status.HTTP_200_OK, content=jsonable_encoder(body))
    return success(item, "Đã thêm vào giỏ hàng")


@router.get("", response_model=ApiResponse[cart_schema.CartRead], summary="Xem giỏ hàng")
def get_cart(
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    return success(cart_service.get_cart(db, current_user.user_id), "Lấy giỏ hàng thành công")


@router.put("/items/{item_id}", response_model=ApiResponse[cart_schema.CartItemRead], summary="Cập nhật số lượng")
def update_cart_item(
    item_id: int,
    data: cart_schema.CartItemUpdate,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    item = cart_service.update_item(db, current_user.user_id, item_id, data.quantity)
    return success(item, "Cập nhật giỏ hàng thành công")


@router.delete("/items/{item_id}", response_model=MessageResponse, summary="Xóa sản phẩm khỏi giỏ hàng")
def remove_cart_item(
    item_id: int,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    cart_service.remove_item(db, current_user.user_id, item_id)
    return {"status": "success", "message": "Đã xóa sản phẩm khỏi giỏ hàng"}


@router.delete("", response_model=MessageResponse, summary="Xóa toàn bộ giỏ hàng")
def clear_cart(
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    cart_service.clear_cart(db, current_user.user_id)
    return {"status": "success", "message": "Đã xóa toàn bộ giỏ hàng"}
