from enum import Enum


class OrderStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    shipped = "shipped"
    delivered = "delivered"
    cancelled = "cancelled"


ALLOWED_TRANSITIONS = {
    "pending": ["approved", "cancelled"],
    "approved": ["shipped", "cancelled"],
    "shipped": ["delivered"],
    "delivered": [],
    "cancelled": []
}
