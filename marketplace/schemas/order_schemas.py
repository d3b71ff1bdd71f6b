from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from marketplace.constants.order_status import OrderStatus


class OrderItemResponse(BaseModel):
    id: int
    product_id: int
    product_name: Optional[str] = None
    seller_id: str
    quantity: int
    size: Optional[str] = None
    color: Optional[str] = None
    unit_price: float
    total_price: float


class CarrierResponse(BaseModel):
    id: int
    name: str
    tracking_url_template: Optional[str] = None

    model_config = {"from_attributes": True}


class OrderEventResponse(BaseModel):
    event_type: str
    label: str
    created_by: str
    created_at: datetime
    meta: Optional[dict] = None


class OrderResponse(BaseModel):
    id: int
    status: str
    subtotal: float
    tax_rate: float
    tax_amount: float
    shipping_type: str
    shipping_cost: float
    discount_amount: float
    promotion_id: Optional[int] = None
    total: float
    shipping_address: str
    shipping_city: str
    shipping_state: str
    shipping_zip: str
    estimated_delivery: Optional[str] = None
    notes: Optional[str] = None
    carrier: Optional[CarrierResponse] = None
    tracking_number: Optional[str] = None
    tracking_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemResponse] = []


class OrderDetailResponse(OrderResponse):
    events: List[OrderEventResponse] = []


class ShipOrderRequest(BaseModel):
    carrier_id: int
    tracking_number: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    status: OrderStatus
    carrier_id: Optional[int] = None
    tracking_number: Optional[str] = None
