# marketplace/services/checkout_service.py

"""
Checkout: quoting a customer's cart and turning it into an order.

Order placement runs as one database transaction:
order row -> order items -> stock decrement -> promotion usage -> cart clear
-> "placed" event. Any failure rolls all of it back; nothing is left half
written.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from marketplace.constants.order_status import OrderStatus
from marketplace.constants.shipping import ShippingType
from marketplace.exceptions import EmptyCart, MarketplaceError, OrderPlacementError, ShippingDetailsMissing
from marketplace.models.order import Order
from marketplace.models.order_item import OrderItem
from marketplace.models.profile import Profile
from marketplace.services import pricing
from marketplace.services.cart_service import clear_cart, load_cart_lines
from marketplace.services.inventory_service import reduce_stock
from marketplace.services.order_event_service import record_status_event
from marketplace.services.promotion_service import increment_usage, validate_promotion

logger = logging.getLogger(__name__)

REQUIRED_SHIPPING_FIELDS = ("shipping_address", "shipping_city", "shipping_state", "shipping_zip")


@dataclass(frozen=True)
class CheckoutQuote:
    lines: List[pricing.CartLine]
    shipping_type: ShippingType
    promotion: Optional[pricing.PromotionSnapshot]
    quote: pricing.OrderQuote

    @property
    def estimated_delivery(self) -> str:
        return pricing.estimated_delivery(self.shipping_type)


def build_quote(
    session: Session,
    customer_id: str,
    shipping_type: ShippingType = ShippingType.regular,
    promo_code: Optional[str] = None,
) -> CheckoutQuote:
    """Quote the customer's current cart, validating ``promo_code`` if given."""
    lines = load_cart_lines(session, customer_id)
    shipping_type = ShippingType(shipping_type)

    promotion = None
    if promo_code and promo_code.strip():
        subtotal = pricing.calculate_subtotal(lines)
        promotion = validate_promotion(session, promo_code, subtotal)

    return CheckoutQuote(
        lines=lines,
        shipping_type=shipping_type,
        promotion=promotion,
        quote=pricing.compute_quote(lines, shipping_type, promotion),
    )


def check_shipping_details(details) -> None:
    missing = [
        field for field in REQUIRED_SHIPPING_FIELDS
        if not (getattr(details, field, None) or "").strip()
    ]
    if missing:
        raise ShippingDetailsMissing(missing)


def place_order(session: Session, customer: Profile, request) -> Order:
    """
    Create an order from the customer's cart.

    ``request`` carries shipping_type, promo_code and the shipping address
    fields. The promotion is validated again here against the live record, so
    a code deactivated after it was applied in the UI is rejected.
    """
    check_shipping_details(request)

    checkout = build_quote(session, customer.id, request.shipping_type, request.promo_code)
    if not checkout.lines:
        raise EmptyCart()

    quote = checkout.quote
    promotion = checkout.promotion

    try:
        order = Order(
            customer_id=customer.id,
            status=OrderStatus.pending.value,
            subtotal=quote.subtotal,
            tax_rate=pricing.TAX_RATE,
            tax_amount=quote.tax_amount,
            shipping_type=checkout.shipping_type.value,
            shipping_cost=quote.shipping_cost,
            discount_amount=quote.discount_amount,
            promotion_id=promotion.id if promotion else None,
            total=quote.total,
            shipping_address=request.shipping_address.strip(),
            shipping_city=request.shipping_city.strip(),
            shipping_state=request.shipping_state.strip(),
            shipping_zip=request.shipping_zip.strip(),
            estimated_delivery=checkout.estimated_delivery,
            notes=getattr(request, "notes", None),
        )
        session.add(order)
        session.flush()  # need order.id for the items

        for line in checkout.lines:
            session.add(OrderItem(
                order_id=order.id,
                product_id=line.product_id,
                seller_id=line.seller_id,
                quantity=line.quantity,
                size=line.size,
                color=line.color,
                unit_price=line.price,
                total_price=line.line_total,
            ))

        reduce_stock(session, checkout.lines)

        if promotion:
            increment_usage(session, promotion.id)

        clear_cart(session, customer.id, commit=False)

        record_status_event(
            session,
            order_id=order.id,
            status=OrderStatus.pending,
            actor=customer.id,
            meta={"total": f"{quote.total:.2f}", "promotion": promotion.code if promotion else None},
        )

        session.commit()

    except MarketplaceError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"Order placement failed for customer {customer.id}: {e}")
        raise OrderPlacementError() from e

    session.refresh(order)
    logger.info(
        f"Order {order.id} placed by {customer.id}: subtotal={quote.subtotal:.2f} "
        f"tax={quote.tax_amount:.2f} shipping={quote.shipping_cost:.2f} "
        f"discount={quote.discount_amount:.2f} total={quote.total:.2f}"
    )
    return order
