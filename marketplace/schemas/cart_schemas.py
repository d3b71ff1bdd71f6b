from typing import List, Optional
from pydantic import BaseModel, Field

from marketplace.schemas.checkout_schemas import QuoteResponse

class CartAddRequest(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)
    size: Optional[str] = "M"
    color: Optional[str] = None

class CartUpdateRequest(BaseModel):
    quantity: int

class CartLineResponse(BaseModel):
    item_id: int
    product_id: int
    product_name: str
    image_url: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    price: float
    quantity: int
    stock: int
    line_total: float

class CartResponse(BaseModel):
    items: List[CartLineResponse]
    item_count: int
    summary: QuoteResponse
