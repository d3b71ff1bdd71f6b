"""Tests for the order status state machine."""

from decimal import Decimal

import pytest
from sqlmodel import Session, select

from marketplace.constants.order_status import ALLOWED_TRANSITIONS, OrderStatus
from marketplace.exceptions import CarrierNotFound, CarrierRequired, InvalidStatusTransition
from marketplace.models.carrier import Carrier
from marketplace.models.order import Order
from marketplace.models.order_event import OrderEvent
from marketplace.models.product import Product
from marketplace.schemas.checkout_schemas import PlaceOrderRequest
from marketplace.services import cart_service
from marketplace.services.checkout_service import place_order
from marketplace.services.order_workflow import can_transition, seller_has_items, transition_order


@pytest.fixture
def order(session, customer, seller, make_product, shipping_details):
    product = make_product(seller, "Wool Coat", "120.00", stock=4)
    cart_service.add_item(session, customer.id, product, 3)
    return place_order(session, customer, PlaceOrderRequest(**shipping_details))


@pytest.mark.parametrize(
    "current,new_status",
    [
        ("pending", "approved"),
        ("pending", "cancelled"),
        ("approved", "shipped"),
        ("approved", "cancelled"),
        ("shipped", "delivered"),
    ],
)
def test_allowed_transitions(current, new_status) -> None:
    assert can_transition(current, new_status)


@pytest.mark.parametrize(
    "current,new_status",
    [
        ("pending", "shipped"),
        ("pending", "delivered"),
        ("approved", "pending"),
        ("shipped", "cancelled"),
        ("delivered", "cancelled"),
        ("cancelled", "approved"),
    ],
)
def test_forbidden_transitions(current, new_status) -> None:
    assert not can_transition(current, new_status)


def test_terminal_states_have_no_exits() -> None:
    assert ALLOWED_TRANSITIONS["delivered"] == []
    assert ALLOWED_TRANSITIONS["cancelled"] == []


def test_full_happy_path(session, order, seller, carrier) -> None:
    transition_order(session, order, OrderStatus.approved, actor=seller.id)
    transition_order(
        session, order, OrderStatus.shipped, actor=seller.id,
        carrier_id=carrier.id, tracking_number=" 1Z999 ",
    )
    order = transition_order(session, order, OrderStatus.delivered, actor=seller.id)

    assert order.status == "delivered"
    assert order.carrier_id == carrier.id
    assert order.tracking_number == "1Z999"

    events = session.exec(
        select(OrderEvent).where(OrderEvent.order_id == order.id).order_by(OrderEvent.id)
    ).all()
    assert [e.event_type for e in events] == ["pending", "approved", "shipped", "delivered"]
    assert events[2].meta["carrier"] == "UPS"


def test_illegal_transition_leaves_order_untouched(session, order, seller) -> None:
    with pytest.raises(InvalidStatusTransition) as exc_info:
        transition_order(session, order, OrderStatus.delivered, actor=seller.id)

    assert exc_info.value.current == "pending"
    session.refresh(order)
    assert order.status == "pending"


def test_shipping_requires_carrier(session, order, seller) -> None:
    transition_order(session, order, OrderStatus.approved, actor=seller.id)

    with pytest.raises(CarrierRequired):
        transition_order(session, order, OrderStatus.shipped, actor=seller.id)


def test_shipping_rejects_inactive_carrier(session, order, seller) -> None:
    retired = Carrier(name="Pony Express", is_active=False)
    session.add(retired)
    session.commit()
    transition_order(session, order, OrderStatus.approved, actor=seller.id)

    with pytest.raises(CarrierNotFound):
        transition_order(session, order, OrderStatus.shipped, actor=seller.id, carrier_id=retired.id)


def test_cancelling_restocks_items(session, order, seller) -> None:
    product = session.exec(select(Product).where(Product.name == "Wool Coat")).one()
    assert product.stock == 1

    transition_order(session, order, OrderStatus.cancelled, actor=seller.id)

    session.refresh(product)
    assert product.stock == 4
    assert order.status == "cancelled"
    assert order.total == Decimal("389.70")


def test_seller_has_items(session, order, seller, make_profile) -> None:
    other = make_profile("seller-2", "seller")
    assert seller_has_items(session, order.id, seller.id)
    assert not seller_has_items(session, order.id, other.id)


def test_concurrent_cancels_restock_once(engine, order, customer, seller) -> None:
    with Session(engine) as by_customer, Session(engine) as by_seller:
        # both requests load the order while it is still pending
        customer_view = by_customer.get(Order, order.id)
        seller_view = by_seller.get(Order, order.id)
        assert customer_view.status == seller_view.status == "pending"

        transition_order(by_customer, customer_view, OrderStatus.cancelled, actor=customer.id)

        with pytest.raises(InvalidStatusTransition) as exc_info:
            transition_order(by_seller, seller_view, OrderStatus.cancelled, actor=seller.id)

        assert exc_info.value.current == "cancelled"

    with Session(engine) as check:
        product = check.exec(select(Product).where(Product.name == "Wool Coat")).one()
        assert product.stock == 4
        events = check.exec(
            select(OrderEvent).where(OrderEvent.order_id == order.id).order_by(OrderEvent.id)
        ).all()
        assert [e.event_type for e in events] == ["pending", "cancelled"]


def test_losing_a_race_to_approval_blocks_cancel(engine, order, seller) -> None:
    with Session(engine) as first, Session(engine) as second:
        approving = first.get(Order, order.id)
        cancelling = second.get(Order, order.id)

        transition_order(first, approving, OrderStatus.approved, actor=seller.id)

        # approved -> cancelled is legal, but this request still believes
        # the order is pending, so its claim must not go through blindly
        with pytest.raises(InvalidStatusTransition):
            transition_order(second, cancelling, OrderStatus.cancelled, actor=seller.id)
        assert cancelling.status == "approved"
