# marketplace/services/order_workflow.py

"""
Order status state machine.

    pending  -> approved | cancelled
    approved -> shipped  | cancelled
    shipped  -> delivered

Every status change goes through ``transition_order`` so the rules hold no
matter which route (seller or customer) triggers it.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlmodel import Session, select

from marketplace.constants.order_status import ALLOWED_TRANSITIONS, OrderStatus
from marketplace.exceptions import CarrierNotFound, CarrierRequired, InvalidStatusTransition
from marketplace.models.carrier import Carrier
from marketplace.models.order import Order
from marketplace.models.order_item import OrderItem
from marketplace.services.inventory_service import restock_order_items
from marketplace.services.order_event_service import record_status_event

logger = logging.getLogger(__name__)


def can_transition(current: str, new_status: str) -> bool:
    return new_status in ALLOWED_TRANSITIONS.get(current, [])


def seller_has_items(session: Session, order_id: int, seller_id: str) -> bool:
    return session.exec(
        select(OrderItem.id).where(
            OrderItem.order_id == order_id,
            OrderItem.seller_id == seller_id,
        )
    ).first() is not None


def claim_status(session: Session, order: Order, current: str, new_status: OrderStatus) -> None:
    """
    Move the stored status from ``current`` to ``new_status`` in one UPDATE.

    Matches no row when another request already moved the order on; that
    request wins and this one fails with the status it lost to.
    """
    result = session.connection().execute(
        update(Order)
        .where(Order.id == order.id, Order.status == current)
        .values(status=new_status.value, updated_at=datetime.utcnow())
    )
    if result.rowcount == 0:
        session.rollback()
        session.refresh(order)
        logger.warning(
            f"Order {order.id}: {current} -> {new_status.value} lost to a concurrent change ({order.status})"
        )
        raise InvalidStatusTransition(order.status, new_status.value)


def transition_order(
    session: Session,
    order: Order,
    new_status: OrderStatus,
    actor: str,
    carrier_id: Optional[int] = None,
    tracking_number: Optional[str] = None,
) -> Order:
    new_status = OrderStatus(new_status)
    current = order.status

    if not can_transition(current, new_status.value):
        raise InvalidStatusTransition(current, new_status.value)

    meta = {"from": current, "to": new_status.value}

    carrier = None
    if new_status == OrderStatus.shipped:
        if carrier_id is None:
            raise CarrierRequired()
        carrier = session.get(Carrier, carrier_id)
        if carrier is None or not carrier.is_active:
            raise CarrierNotFound(carrier_id)

    claim_status(session, order, current, new_status)

    if carrier is not None:
        order.carrier_id = carrier.id
        tracking_number = (tracking_number or "").strip() or None
        if tracking_number:
            order.tracking_number = tracking_number
        meta.update({"carrier": carrier.name, "tracking_number": tracking_number})

    if new_status == OrderStatus.cancelled:
        restock_order_items(session, order.id)

    order.status = new_status.value
    order.updated_at = datetime.utcnow()
    session.add(order)

    record_status_event(session, order.id, new_status, actor=actor, meta=meta)

    session.commit()
    session.refresh(order)

    logger.info(f"Order {order.id}: {current} -> {new_status.value} by {actor}")
    return order
