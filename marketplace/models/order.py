from sqlmodel import SQLModel, Field, Relationship
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from marketplace.constants.order_status import OrderStatus
from marketplace.models.order_item import OrderItem

class Order(SQLModel, table=True):
    __tablename__ = "orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    customer_id: str = Field(foreign_key="profiles.id", index=True)

    status: str = Field(default=OrderStatus.pending.value, index=True)

    subtotal: Decimal = Field(max_digits=10, decimal_places=2)
    tax_rate: Decimal = Field(max_digits=6, decimal_places=4)
    tax_amount: Decimal = Field(max_digits=10, decimal_places=2)
    shipping_type: str = Field(default="regular")  # regular | expedited
    shipping_cost: Decimal = Field(max_digits=10, decimal_places=2)
    discount_amount: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    promotion_id: Optional[int] = Field(default=None, foreign_key="promotions.id")
    total: Decimal = Field(max_digits=10, decimal_places=2)

    # fulfillment
    carrier_id: Optional[int] = Field(default=None, foreign_key="carriers.id")
    tracking_number: Optional[str] = None

    shipping_address: str
    shipping_city: str
    shipping_state: str
    shipping_zip: str
    estimated_delivery: Optional[str] = None
    notes: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    # relationships
    items: List["OrderItem"] = Relationship(back_populates="order")
