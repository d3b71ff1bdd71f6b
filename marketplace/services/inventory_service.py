# marketplace/services/inventory_service.py
import logging
from datetime import datetime
from typing import Iterable

from sqlmodel import Session, select

from marketplace.exceptions import InsufficientStock
from marketplace.models.order_item import OrderItem
from marketplace.models.product import Product

logger = logging.getLogger(__name__)


def reduce_stock(session: Session, lines: Iterable) -> None:
    """
    Take each line's quantity out of its product's stock.

    Does not commit; runs inside the order placement transaction so a
    shortfall on any line leaves every product untouched.
    """
    for line in lines:
        product = session.get(Product, line.product_id)
        if product is None:
            raise InsufficientStock(f"product {line.product_id}", 0, line.quantity)

        if product.stock < line.quantity:
            raise InsufficientStock(product.name, product.stock, line.quantity)

        product.stock -= line.quantity
        product.updated_at = datetime.utcnow()
        session.add(product)
        logger.debug(f"Product {product.id} stock now {product.stock}")


def restock_order_items(session: Session, order_id: int) -> int:
    """Put a cancelled order's quantities back on the shelf. Does not commit."""
    order_items = session.exec(
        select(OrderItem).where(OrderItem.order_id == order_id)
    ).all()

    for item in order_items:
        product = session.get(Product, item.product_id)
        if product:
            product.stock += item.quantity
            product.updated_at = datetime.utcnow()
            session.add(product)

    logger.info(f"Restocked {len(order_items)} items for order {order_id}")
    return len(order_items)


def set_stock(session: Session, product: Product, stock: int) -> Product:
    product.stock = stock
    product.updated_at = datetime.utcnow()
    session.add(product)
    session.commit()
    session.refresh(product)
    return product
