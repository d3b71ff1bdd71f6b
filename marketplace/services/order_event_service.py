# marketplace/services/order_event_service.py

from typing import List, Optional

from sqlmodel import Session, select

from marketplace.constants.order_status import OrderStatus
from marketplace.models.order_event import OrderEvent

STATUS_LABELS = {
    OrderStatus.pending: "Order placed",
    OrderStatus.approved: "Order approved by seller",
    OrderStatus.shipped: "Order shipped",
    OrderStatus.delivered: "Order delivered",
    OrderStatus.cancelled: "Order cancelled",
}


def record_status_event(
    session: Session,
    order_id: int,
    status: OrderStatus,
    actor: str,
    meta: Optional[dict] = None,
) -> OrderEvent:
    """
    Append a timeline entry for an order entering ``status``.

    Only adds to the session; the caller commits together with the status
    change it describes.
    """
    status = OrderStatus(status)
    event = OrderEvent(
        order_id=order_id,
        event_type=status.value,
        label=STATUS_LABELS[status],
        meta=meta,
        created_by=actor,
    )
    session.add(event)
    return event


def list_order_events(session: Session, order_id: int) -> List[OrderEvent]:
    return session.exec(
        select(OrderEvent)
        .where(OrderEvent.order_id == order_id)
        .order_by(OrderEvent.created_at, OrderEvent.id)
    ).all()
