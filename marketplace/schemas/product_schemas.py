from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime


def _clean_list(values):
    if values is None:
        return values
    if isinstance(values, str):
        values = values.split(",")
    return [v.strip() for v in values if v and v.strip()]


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    compare_at_price: Optional[float] = Field(None, ge=0)
    category_id: Optional[int] = None
    image_url: Optional[str] = None
    images: List[str] = []
    sizes: List[str] = []
    colors: List[str] = []
    stock: int = Field(default=0, ge=0)
    is_featured: bool = False

    @field_validator("sizes", "colors", "images", mode="before")
    @classmethod
    def clean_lists(cls, values):
        return _clean_list(values)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    compare_at_price: Optional[float] = Field(None, ge=0)
    category_id: Optional[int] = None
    image_url: Optional[str] = None
    images: Optional[List[str]] = None
    sizes: Optional[List[str]] = None
    colors: Optional[List[str]] = None
    stock: Optional[int] = Field(None, ge=0)
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None

    @field_validator("sizes", "colors", "images", mode="before")
    @classmethod
    def clean_lists(cls, values):
        return _clean_list(values)

    # omitted means "leave as is"; only compare_at_price, category_id,
    # description and image_url may be cleared with null
    @field_validator("name", "price", "stock", "is_featured", "is_active", "images", "sizes", "colors")
    @classmethod
    def reject_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class StockUpdate(BaseModel):
    stock: int = Field(..., ge=0)


class CategoryResponse(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None

    model_config = {"from_attributes": True}


class ProductResponse(BaseModel):
    id: int
    seller_id: str
    name: str
    description: Optional[str] = None
    price: float
    compare_at_price: Optional[float] = None
    image_url: Optional[str] = None
    images: List[str] = []
    sizes: List[str] = []
    colors: List[str] = []
    stock: int
    is_active: bool
    is_featured: bool
    category: Optional[CategoryResponse] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
