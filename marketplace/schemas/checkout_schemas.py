# marketplace/schemas/checkout_schemas.py
from typing import List, Optional
from pydantic import BaseModel, Field

from marketplace.constants.shipping import ShippingType


class QuoteRequest(BaseModel):
    shipping_type: ShippingType = ShippingType.regular
    promo_code: Optional[str] = None


class PromoRequest(BaseModel):
    code: str
    shipping_type: ShippingType = ShippingType.regular


class PromotionResponse(BaseModel):
    id: int
    code: str
    discount_type: str
    discount_value: float
    min_order_amount: float


class QuoteResponse(BaseModel):
    subtotal: float
    tax_rate: float
    tax_amount: float
    shipping_type: ShippingType
    shipping_cost: float
    discount_amount: float
    total: float
    estimated_delivery: str
    promotion: Optional[PromotionResponse] = None


class QuoteLine(BaseModel):
    product_id: int
    product_name: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    quantity: int
    price: float
    line_total: float


class CheckoutQuoteResponse(BaseModel):
    items: List[QuoteLine]
    summary: QuoteResponse


class PlaceOrderRequest(BaseModel):
    shipping_type: ShippingType = ShippingType.regular
    promo_code: Optional[str] = None
    # blank values are reported together by the checkout service
    shipping_address: str = ""
    shipping_city: str = ""
    shipping_state: str = ""
    shipping_zip: str = ""
    notes: Optional[str] = Field(default=None, max_length=500)
