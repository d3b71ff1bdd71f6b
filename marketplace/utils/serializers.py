from typing import Dict, Optional

from sqlmodel import Session, select

from marketplace.models.carrier import Carrier
from marketplace.models.order import Order
from marketplace.models.order_item import OrderItem
from marketplace.models.product import Product
from marketplace.services import pricing
from marketplace.services.order_event_service import list_order_events


def quote_summary(checkout) -> dict:
    quote = checkout.quote
    promotion = checkout.promotion
    return {
        "subtotal": float(quote.subtotal),
        "tax_rate": float(pricing.TAX_RATE),
        "tax_amount": float(quote.tax_amount),
        "shipping_type": checkout.shipping_type,
        "shipping_cost": float(quote.shipping_cost),
        "discount_amount": float(quote.discount_amount),
        "total": float(quote.total),
        "estimated_delivery": checkout.estimated_delivery,
        "promotion": promotion_to_dict(promotion) if promotion else None,
    }


def promotion_to_dict(promotion: pricing.PromotionSnapshot) -> dict:
    return {
        "id": promotion.id,
        "code": promotion.code,
        "discount_type": promotion.discount_type,
        "discount_value": float(promotion.discount_value),
        "min_order_amount": float(promotion.min_order_amount),
    }


def order_item_to_dict(item: OrderItem, product_name: Optional[str] = None) -> dict:
    return {
        "id": item.id,
        "product_id": item.product_id,
        "product_name": product_name,
        "seller_id": item.seller_id,
        "quantity": item.quantity,
        "size": item.size,
        "color": item.color,
        "unit_price": float(item.unit_price),
        "total_price": float(item.total_price),
    }


def order_to_dict(
    session: Session,
    order: Order,
    seller_id: Optional[str] = None,
    include_events: bool = False,
) -> dict:
    """Order with its items; ``seller_id`` limits the items to that seller's."""
    query = (
        select(OrderItem, Product.name)
        .join(Product, Product.id == OrderItem.product_id)
        .where(OrderItem.order_id == order.id)
        .order_by(OrderItem.id)
    )
    if seller_id:
        query = query.where(OrderItem.seller_id == seller_id)
    items = session.exec(query).all()

    carrier: Optional[Carrier] = session.get(Carrier, order.carrier_id) if order.carrier_id else None

    data: Dict = {
        "id": order.id,
        "status": order.status,
        "subtotal": float(order.subtotal),
        "tax_rate": float(order.tax_rate),
        "tax_amount": float(order.tax_amount),
        "shipping_type": order.shipping_type,
        "shipping_cost": float(order.shipping_cost),
        "discount_amount": float(order.discount_amount),
        "promotion_id": order.promotion_id,
        "total": float(order.total),
        "shipping_address": order.shipping_address,
        "shipping_city": order.shipping_city,
        "shipping_state": order.shipping_state,
        "shipping_zip": order.shipping_zip,
        "estimated_delivery": order.estimated_delivery,
        "notes": order.notes,
        "carrier": {
            "id": carrier.id,
            "name": carrier.name,
            "tracking_url_template": carrier.tracking_url_template,
        } if carrier else None,
        "tracking_number": order.tracking_number,
        "tracking_url": carrier.tracking_url(order.tracking_number) if carrier else None,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "items": [order_item_to_dict(item, name) for item, name in items],
    }

    if include_events:
        data["events"] = [
            {
                "event_type": e.event_type,
                "label": e.label,
                "created_by": e.created_by,
                "created_at": e.created_at,
                "meta": e.meta,
            }
            for e in list_order_events(session, order.id)
        ]
    return data
