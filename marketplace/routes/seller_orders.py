from collections import Counter
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from marketplace.constants.order_status import OrderStatus
from marketplace.database import get_session
from marketplace.models.order import Order
from marketplace.models.order_item import OrderItem
from marketplace.models.profile import Profile
from marketplace.schemas.order_schemas import ShipOrderRequest, StatusUpdateRequest
from marketplace.services.order_workflow import seller_has_items, transition_order
from marketplace.utils.serializers import order_to_dict
from marketplace.utils.token import get_current_seller

router = APIRouter()


def get_seller_order(session: Session, order_id: int, seller_id: str, lock: bool = False) -> Order:
    query = select(Order).where(Order.id == order_id)
    if lock:
        query = query.with_for_update()
    order = session.exec(query).first()
    if not order or not seller_has_items(session, order_id, seller_id):
        raise HTTPException(404, "Order not found")
    return order


def seller_order_view(session: Session, order: Order, seller_id: str) -> dict:
    customer = session.get(Profile, order.customer_id)
    data = order_to_dict(session, order, seller_id=seller_id)
    data["customer"] = {
        "full_name": customer.full_name if customer else None,
        "email": customer.email if customer else None,
        "phone": customer.phone if customer else None,
    }
    return data


@router.get("")
def list_seller_orders(
    status: Optional[OrderStatus] = None,
    session: Session = Depends(get_session),
    seller: Profile = Depends(get_current_seller)
):
    """Orders that contain at least one of the seller's products, grouped per order."""
    orders = session.exec(
        select(Order)
        .where(
            Order.id.in_(
                select(OrderItem.order_id).where(OrderItem.seller_id == seller.id)
            )
        )
        .order_by(Order.created_at.desc(), Order.id.desc())
    ).all()

    counts = Counter(o.status for o in orders)
    if status:
        orders = [o for o in orders if o.status == status.value]

    return {
        "counts": {s.value: counts.get(s.value, 0) for s in OrderStatus},
        "total": sum(counts.values()),
        "results": [seller_order_view(session, o, seller.id) for o in orders],
    }


@router.get("/{order_id}")
def seller_order_detail(
    order_id: int,
    session: Session = Depends(get_session),
    seller: Profile = Depends(get_current_seller)
):
    order = get_seller_order(session, order_id, seller.id)
    data = seller_order_view(session, order, seller.id)
    data["events"] = order_to_dict(session, order, include_events=True)["events"]
    return data


def _move(session: Session, order_id: int, seller: Profile, new_status: OrderStatus, **kwargs) -> dict:
    order = get_seller_order(session, order_id, seller.id, lock=True)
    order = transition_order(session, order, new_status, actor=seller.id, **kwargs)
    return seller_order_view(session, order, seller.id)


@router.post("/{order_id}/approve")
def approve_order(
    order_id: int,
    session: Session = Depends(get_session),
    seller: Profile = Depends(get_current_seller)
):
    return _move(session, order_id, seller, OrderStatus.approved)


@router.post("/{order_id}/cancel")
def cancel_order(
    order_id: int,
    session: Session = Depends(get_session),
    seller: Profile = Depends(get_current_seller)
):
    return _move(session, order_id, seller, OrderStatus.cancelled)


@router.post("/{order_id}/ship")
def ship_order(
    order_id: int,
    data: ShipOrderRequest,
    session: Session = Depends(get_session),
    seller: Profile = Depends(get_current_seller)
):
    return _move(
        session, order_id, seller, OrderStatus.shipped,
        carrier_id=data.carrier_id,
        tracking_number=data.tracking_number,
    )


@router.post("/{order_id}/deliver")
def deliver_order(
    order_id: int,
    session: Session = Depends(get_session),
    seller: Profile = Depends(get_current_seller)
):
    return _move(session, order_id, seller, OrderStatus.delivered)


@router.patch("/{order_id}/status")
def update_status(
    order_id: int,
    data: StatusUpdateRequest,
    session: Session = Depends(get_session),
    seller: Profile = Depends(get_current_seller)
):
    """Generic status change; the same transition rules apply."""
    return _move(
        session, order_id, seller, data.status,
        carrier_id=data.carrier_id,
        tracking_number=data.tracking_number,
    )
