from typing import List, Optional

from pydantic import BaseModel


class SubCategoryRead(BaseModel):
    id: int
    main_category_id: int
    name: str
    display_order: int

    class Config:
        from_attributes = True


class MainCategoryRead(BaseModel):
    id: int
    name: str
    icon_url: Optional[str] = None
    display_order: int
    sub_categories: List[SubCategoryRead] = []

    class Config:
        from_attributes = True


class CityRead(BaseModel):
    id: int
    city_code: str
    city_name: str

    class Config:
        from_attributes = True
