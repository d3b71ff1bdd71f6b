from decimal import Decimal

from sqlalchemy import func
from sqlmodel import Session, select

from marketplace.constants.order_status import OrderStatus
from marketplace.models.order import Order
from marketplace.models.order_item import OrderItem
from marketplace.models.product import LOW_STOCK_THRESHOLD, Product
from marketplace.models.profile import Profile
from marketplace.models.review import Review

RECENT_ORDERS_LIMIT = 5


def get_dashboard_stats(session: Session, seller_id: str) -> dict:
    """Headline numbers for the seller dashboard."""
    total_products = session.exec(
        select(func.count(Product.id)).where(Product.seller_id == seller_id)
    ).one()

    low_stock = session.exec(
        select(func.count(Product.id)).where(
            Product.seller_id == seller_id,
            Product.stock <= LOW_STOCK_THRESHOLD,
        )
    ).one()

    rows = session.exec(
        select(OrderItem, Order)
        .join(Order, Order.id == OrderItem.order_id)
        .where(OrderItem.seller_id == seller_id)
    ).all()

    orders = {}
    revenue = Decimal("0")
    for item, order in rows:
        orders[order.id] = order
        revenue += item.total_price
    pending = sum(1 for o in orders.values() if o.status == OrderStatus.pending.value)

    review_count, rating_sum = session.exec(
        select(func.count(Review.id), func.coalesce(func.sum(Review.rating), 0))
        .join(Product, Product.id == Review.product_id)
        .where(Product.seller_id == seller_id)
    ).one()

    return {
        "total_products": total_products,
        "total_orders": len(orders),
        "total_revenue": float(revenue),
        "pending_orders": pending,
        "low_stock_products": low_stock,
        "total_reviews": review_count,
        "avg_rating": round(rating_sum / review_count, 1) if review_count else 0.0,
        "recent_orders": recent_orders(session, seller_id),
    }


def recent_orders(session: Session, seller_id: str, limit: int = RECENT_ORDERS_LIMIT) -> list:
    rows = session.exec(
        select(Order, Profile)
        .join(Profile, Profile.id == Order.customer_id)
        .where(
            Order.id.in_(
                select(OrderItem.order_id).where(OrderItem.seller_id == seller_id)
            )
        )
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(limit)
    ).all()

    return [
        {
            "order_id": o.id,
            "customer_name": c.full_name,
            "status": o.status,
            "total": float(o.total),
            "created_at": o.created_at,
        }
        for o, c in rows
    ]
