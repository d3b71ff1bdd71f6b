# marketplace/exceptions.py

"""
Domain errors raised by the marketplace services.

Each error carries the HTTP status it maps to; the handler registered in
``marketplace.main`` renders them as ``{"detail": ...}`` plus any extra fields.
"""

from decimal import Decimal


class MarketplaceError(Exception):
    """Base exception for all marketplace service failures."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message}


class ShippingDetailsMissing(MarketplaceError):
    """Raised when an order is placed without a full shipping address."""

    def __init__(self, missing_fields):
        super().__init__("Please fill in all shipping details")
        self.missing_fields = list(missing_fields)

    def to_dict(self) -> dict:
        return {"detail": self.message, "missing_fields": self.missing_fields}


class EmptyCart(MarketplaceError):
    def __init__(self):
        super().__init__("Your cart is empty")


class PromotionError(MarketplaceError):
    """A promotion code could not be applied."""


class PromotionNotFound(PromotionError):
    def __init__(self, code: str):
        super().__init__("Invalid or expired promo code")
        self.code = code


class PromotionMinimumNotMet(PromotionError):
    def __init__(self, code: str, min_order_amount: Decimal):
        super().__init__(f"Minimum order of ${min_order_amount:.2f} required")
        self.code = code
        self.min_order_amount = min_order_amount

    def to_dict(self) -> dict:
        return {"detail": self.message, "min_order_amount": float(self.min_order_amount)}


class InsufficientStock(MarketplaceError):
    status_code = 409

    def __init__(self, product_name: str, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for {product_name}. Available: {available}, Requested: {requested}"
        )
        self.available = available
        self.requested = requested


class InvalidStatusTransition(MarketplaceError):
    status_code = 409

    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot move order from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class CarrierRequired(MarketplaceError):
    def __init__(self):
        super().__init__("A carrier is required to ship an order")


class CarrierNotFound(MarketplaceError):
    status_code = 404

    def __init__(self, carrier_id):
        super().__init__("Carrier not found")
        self.carrier_id = carrier_id


class OrderPlacementError(MarketplaceError):
    """Raised when the order transaction fails for a non-domain reason."""

    status_code = 500

    def __init__(self):
        super().__init__("Failed to place order")
