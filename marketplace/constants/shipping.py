from decimal import Decimal
from enum import Enum


class ShippingType(str, Enum):
    regular = "regular"
    expedited = "expedited"


SHIPPING_COSTS = {
    ShippingType.regular: Decimal("0.00"),
    ShippingType.expedited: Decimal("12.00"),
}

ESTIMATED_DELIVERY = {
    ShippingType.regular: "5-7 business days",
    ShippingType.expedited: "1-2 business days",
}
