from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)

class ReviewRead(BaseModel):
    id: int
    product_id: int
    customer_id: str
    customer_name: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    created_at: datetime
