from fastapi import APIRouter, Depends
from sqlmodel import Session

from marketplace.database import get_session
from marketplace.exceptions import PromotionNotFound
from marketplace.models.profile import Profile
from marketplace.schemas.checkout_schemas import (
    CheckoutQuoteResponse,
    PlaceOrderRequest,
    PromoRequest,
    QuoteRequest,
)
from marketplace.schemas.order_schemas import OrderResponse
from marketplace.services.checkout_service import build_quote, place_order
from marketplace.utils.serializers import order_to_dict, quote_summary
from marketplace.utils.token import get_current_customer

router = APIRouter()


def _quote_response(checkout) -> dict:
    return {
        "items": [
            {
                "product_id": line.product_id,
                "product_name": line.product_name,
                "size": line.size,
                "color": line.color,
                "quantity": line.quantity,
                "price": float(line.price),
                "line_total": float(line.line_total),
            }
            for line in checkout.lines
        ],
        "summary": quote_summary(checkout),
    }


@router.post("/quote", response_model=CheckoutQuoteResponse)
def quote(
    data: QuoteRequest,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_customer)
):
    """Price breakdown for the cart with the chosen shipping and promo code."""
    checkout = build_quote(session, current_user.id, data.shipping_type, data.promo_code)
    return _quote_response(checkout)


@router.post("/promo", response_model=CheckoutQuoteResponse)
def apply_promo(
    data: PromoRequest,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_customer)
):
    if not data.code.strip():
        raise PromotionNotFound(data.code)
    checkout = build_quote(session, current_user.id, data.shipping_type, data.code)
    return _quote_response(checkout)


@router.post("/place-order", response_model=OrderResponse, status_code=201)
def place_order_endpoint(
    data: PlaceOrderRequest,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_customer)
):
    order = place_order(session, current_user, data)
    return order_to_dict(session, order)
