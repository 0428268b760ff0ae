from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api import deps
from app.crud import catalog_crud
from app.schemas import catalog_schema
from app.schemas.common_schema import ApiResponse, success

router = APIRouter()


@router.get(
    "/categories",
    response_model=ApiResponse[List[catalog_schema.MainCategoryRead]],
    summary="Danh sách danh mục chính và danh mục con",
)
def get_categories(db: Session = Depends(deps.get_db)):
    """
    Quyền truy cập: **công khai**
    """
    return success(catalog_crud.get_main_categories(db), "Lấy danh mục thành công")


@router.get(
    "/cities",
    response_model=ApiResponse[List[catalog_schema.CityRead]],
    summary="Danh sách thành phố",
)
def get_cities(db: Session = Depends(deps.get_db)):
    return success(
        [catalog_schema.CityRead.model_validate(city) for city in catalog_crud.get_cities(db)],
        "Lấy danh sách thành phố thành công",
    )
