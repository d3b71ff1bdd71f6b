from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from marketplace.constants.shipping import ShippingType
from marketplace.database import get_session
from marketplace.models.cart import CartItem
from marketplace.models.product import Product
from marketplace.models.profile import Profile
from marketplace.schemas.cart_schemas import CartAddRequest, CartResponse, CartUpdateRequest
from marketplace.services import cart_service
from marketplace.services.checkout_service import build_quote
from marketplace.utils.serializers import quote_summary
from marketplace.utils.token import get_current_customer


router = APIRouter()


def get_own_item(session: Session, item_id: int, customer_id: str) -> CartItem:
    item = session.get(CartItem, item_id)
    if not item or item.customer_id != customer_id:
        raise HTTPException(404, "Cart item not found")
    return item


# View Cart

@router.get("", response_model=CartResponse)
def get_cart(
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_customer)
):
    rows = cart_service.get_cart_rows(session, current_user.id)
    checkout = build_quote(session, current_user.id, ShippingType.regular)

    items = []
    for cart_item, product in rows:
        line = cart_service.to_cart_line(cart_item, product)
        items.append({
            "item_id": cart_item.id,
            "product_id": product.id,
            "product_name": product.name,
            "image_url": product.image_url,
            "size": cart_item.size,
            "color": cart_item.color,
            "price": float(line.price),
            "quantity": cart_item.quantity,
            "stock": product.stock,
            "line_total": float(line.line_total),
        })

    return {
        "items": items,
        "item_count": sum(i["quantity"] for i in items),
        "summary": quote_summary(checkout),
    }

# Add to Cart

@router.post("/add", status_code=201)
def add_to_cart(
    data: CartAddRequest,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_customer)
):
    product = session.get(Product, data.product_id)
    if not product or not product.is_active:
        raise HTTPException(status_code=404, detail="Product not found")

    item = cart_service.add_item(
        session,
        current_user.id,
        product,
        quantity=data.quantity,
        size=data.size,
        color=data.color,
    )
    return {"message": "Added to cart", "item": item}

# Update Cart

@router.put("/update/{item_id}")
def update_cart_item(
    item_id: int,
    data: CartUpdateRequest,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_customer)
):
    item = get_own_item(session, item_id, current_user.id)

    if data.quantity <= 0:
        session.delete(item)
        session.commit()
        return {"message": "Item removed"}

    item.quantity = data.quantity
    session.add(item)
    session.commit()
    session.refresh(item)

    return {"message": "Quantity updated", "item": item}

# Remove Cart

@router.delete("/remove/{item_id}")
def remove_item(
    item_id: int,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_customer)
):
    item = get_own_item(session, item_id, current_user.id)

    session.delete(item)
    session.commit()

    return {"message": "Item removed from cart"}

# Clear Cart

@router.delete("/clear")
def clear_cart_endpoint(
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_customer)
):
    removed = cart_service.clear_cart(session, current_user.id)
    return {"message": "Cart cleared", "removed": removed}
