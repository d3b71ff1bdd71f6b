from typing import List, Optional

from sqlmodel import Session, select

from marketplace.models.cart import CartItem
from marketplace.models.product import Product
from marketplace.services.pricing import CartLine, to_decimal

DEFAULT_SIZE = "M"


def get_cart_rows(session: Session, customer_id: str):
    # lines for deactivated products stay in the cart but are never quoted or ordered
    return session.exec(
        select(CartItem, Product)
        .join(Product, CartItem.product_id == Product.id)
        .where(
            CartItem.customer_id == customer_id,
            Product.is_active == True,  # noqa: E712
        )
        .order_by(CartItem.created_at, CartItem.id)
    ).all()


def to_cart_line(cart_item: CartItem, product: Product) -> CartLine:
    # price is read from the product now, never stored on the cart row
    return CartLine(
        product_id=product.id,
        quantity=cart_item.quantity,
        price=to_decimal(product.price),
        size=cart_item.size,
        color=cart_item.color,
        seller_id=product.seller_id,
        product_name=product.name,
    )


def load_cart_lines(session: Session, customer_id: str) -> List[CartLine]:
    return [to_cart_line(item, product) for item, product in get_cart_rows(session, customer_id)]


def find_matching_item(
    session: Session,
    customer_id: str,
    product_id: int,
    size: Optional[str],
    color: Optional[str],
) -> Optional[CartItem]:
    return session.exec(
        select(CartItem).where(
            CartItem.customer_id == customer_id,
            CartItem.product_id == product_id,
            CartItem.size == size if size is not None else CartItem.size.is_(None),
            CartItem.color == color if color is not None else CartItem.color.is_(None),
        )
    ).first()


def add_item(
    session: Session,
    customer_id: str,
    product: Product,
    quantity: int,
    size: Optional[str] = DEFAULT_SIZE,
    color: Optional[str] = None,
) -> CartItem:
    existing = find_matching_item(session, customer_id, product.id, size, color)

    if existing:
        existing.quantity += quantity
        session.add(existing)
        session.commit()
        session.refresh(existing)
        return existing

    item = CartItem(
        customer_id=customer_id,
        product_id=product.id,
        quantity=quantity,
        size=size,
        color=color,
    )
    session.add(item)
    session.commit()
    session.refresh(item)
    return item


def clear_cart(session: Session, customer_id: str, commit: bool = True) -> int:
    items = session.exec(
        select(CartItem).where(CartItem.customer_id == customer_id)
    ).all()

    for item in items:
        session.delete(item)

    if commit:
        session.commit()
    return len(items)
