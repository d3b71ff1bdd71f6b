from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from marketplace.constants.order_status import OrderStatus
from marketplace.database import get_session
from marketplace.models.order import Order
from marketplace.models.profile import Profile
from marketplace.schemas.order_schemas import OrderDetailResponse, OrderResponse
from marketplace.services.order_workflow import transition_order
from marketplace.utils.serializers import order_to_dict
from marketplace.utils.token import get_current_customer

router = APIRouter()


def get_own_order(session: Session, order_id: int, customer_id: str, lock: bool = False) -> Order:
    query = select(Order).where(Order.id == order_id)
    if lock:
        query = query.with_for_update()
    order = session.exec(query).first()
    if not order or order.customer_id != customer_id:
        raise HTTPException(404, "Order not found")
    return order


@router.get("", response_model=List[OrderResponse])
def my_orders(
    status: Optional[OrderStatus] = None,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_customer)
):
    query = select(Order).where(Order.customer_id == current_user.id)
    if status:
        query = query.where(Order.status == status.value)

    orders = session.exec(query.order_by(Order.created_at.desc(), Order.id.desc())).all()
    return [order_to_dict(session, o) for o in orders]


@router.get("/{order_id}", response_model=OrderDetailResponse)
def order_detail(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_customer)
):
    order = get_own_order(session, order_id, current_user.id)
    return order_to_dict(session, order, include_events=True)


@router.post("/{order_id}/cancel", response_model=OrderResponse)
def cancel_order(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_customer)
):
    """Customers can withdraw an order until a seller approves it."""
    order = get_own_order(session, order_id, current_user.id, lock=True)

    if order.status != OrderStatus.pending.value:
        raise HTTPException(409, "Only pending orders can be cancelled")

    order = transition_order(session, order, OrderStatus.cancelled, actor=current_user.id)
    return order_to_dict(session, order)
