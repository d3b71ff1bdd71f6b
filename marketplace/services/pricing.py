# marketplace/services/pricing.py

"""
Order pricing.

Everything here is a pure function of its inputs: the cart lines, the shipping
method and (optionally) an already validated promotion snapshot. Nothing is
read from or written to the database, so the quote can be recomputed on every
cart change.

Rounding is half-up to cents and is applied where each amount is computed
(tax, discount, total), never only once at the end.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Union

from marketplace.constants.shipping import ESTIMATED_DELIVERY, SHIPPING_COSTS, ShippingType

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
TAX_RATE = Decimal("0.0825")

PERCENTAGE = "percentage"
FIXED = "fixed"


def to_decimal(value) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round2(value) -> Decimal:
    return to_decimal(value).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CartLine:
    product_id: int
    quantity: int
    price: Decimal
    size: Optional[str] = None
    color: Optional[str] = None
    seller_id: Optional[str] = None
    product_name: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return to_decimal(self.price) * self.quantity


@dataclass(frozen=True)
class PromotionSnapshot:
    """Discount fields of a promotion, frozen at validation time."""

    id: int
    code: str
    discount_type: str
    discount_value: Decimal
    min_order_amount: Decimal


@dataclass(frozen=True)
class OrderQuote:
    subtotal: Decimal
    tax_amount: Decimal
    shipping_cost: Decimal
    discount_amount: Decimal
    total: Decimal


def calculate_subtotal(lines: Iterable[CartLine]) -> Decimal:
    return sum((line.line_total for line in lines), Decimal("0"))


def calculate_tax(subtotal: Decimal) -> Decimal:
    return round2(to_decimal(subtotal) * TAX_RATE)


def shipping_cost_for(shipping_method: Union[ShippingType, str]) -> Decimal:
    return SHIPPING_COSTS[ShippingType(shipping_method)]


def estimated_delivery(shipping_method: Union[ShippingType, str]) -> str:
    return ESTIMATED_DELIVERY[ShippingType(shipping_method)]


def calculate_discount(subtotal: Decimal, promotion: Optional[PromotionSnapshot]) -> Decimal:
    """Discount for ``promotion`` on ``subtotal``, never more than the subtotal."""
    if promotion is None:
        return Decimal("0.00")

    subtotal = to_decimal(subtotal)
    value = to_decimal(promotion.discount_value)

    if promotion.discount_type == PERCENTAGE:
        discount = round2(subtotal * value / 100)
    else:
        discount = round2(value)

    if discount > subtotal:
        logger.warning(
            f"Promotion {promotion.code} discount {discount:.2f} exceeds subtotal {subtotal:.2f}, clamping"
        )
        discount = round2(subtotal)
    return discount


def compute_quote(
    lines: Iterable[CartLine],
    shipping_method: Union[ShippingType, str] = ShippingType.regular,
    applied_promotion: Optional[PromotionSnapshot] = None,
) -> OrderQuote:
    subtotal = calculate_subtotal(lines)
    tax_amount = calculate_tax(subtotal)
    shipping_cost = shipping_cost_for(shipping_method)
    discount_amount = calculate_discount(subtotal, applied_promotion)

    total = round2(subtotal + tax_amount + shipping_cost - discount_amount)

    return OrderQuote(
        subtotal=subtotal,
        tax_amount=tax_amount,
        shipping_cost=shipping_cost,
        discount_amount=discount_amount,
        total=total,
    )
