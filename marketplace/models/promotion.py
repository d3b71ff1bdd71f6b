from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal


class Promotion(SQLModel, table=True):
    __tablename__ = "promotions"

    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(index=True, unique=True)  # stored uppercase
    description: Optional[str] = None
    discount_type: str  # percentage | fixed
    discount_value: Decimal = Field(max_digits=10, decimal_places=2)
    min_order_amount: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    is_active: bool = True
    usage_count: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
