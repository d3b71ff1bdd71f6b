"""Tests for promotion lookup and eligibility."""

from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from marketplace.exceptions import PromotionMinimumNotMet, PromotionNotFound
from marketplace.models.promotion import Promotion
from marketplace.services.pricing import compute_quote, CartLine
from marketplace.services.promotion_service import (
    increment_usage,
    normalize_code,
    validate_promotion,
)


def test_normalize_code_trims_and_uppercases() -> None:
    assert normalize_code("  save20 ") == "SAVE20"
    assert normalize_code(None) == ""


def test_valid_code_returns_snapshot(session, make_promotion) -> None:
    promotion = make_promotion("SAVE20", "percentage", "20", "25")

    snapshot = validate_promotion(session, " save20", Decimal("100.00"))

    assert snapshot.id == promotion.id
    assert snapshot.code == "SAVE20"
    assert snapshot.discount_type == "percentage"
    assert snapshot.discount_value == Decimal("20")
    assert snapshot.min_order_amount == Decimal("25")


def test_unknown_code_is_not_found(session, make_promotion) -> None:
    make_promotion("SAVE20")

    with pytest.raises(PromotionNotFound):
        validate_promotion(session, "SAVE99", Decimal("100.00"))


def test_blank_code_is_not_found(session) -> None:
    with pytest.raises(PromotionNotFound):
        validate_promotion(session, "   ", Decimal("100.00"))


def test_inactive_code_is_not_found(session, make_promotion) -> None:
    make_promotion("SPRING25", "fixed", "25", is_active=False)

    with pytest.raises(PromotionNotFound):
        validate_promotion(session, "spring25", Decimal("500.00"))


def test_minimum_not_met_carries_the_minimum(session, make_promotion) -> None:
    make_promotion("WELCOME10", "fixed", "10", "25")

    with pytest.raises(PromotionMinimumNotMet) as exc_info:
        validate_promotion(session, "welcome10", Decimal("10.00"))

    assert exc_info.value.min_order_amount == Decimal("25")
    assert "$25.00" in exc_info.value.message

    # nothing was applied, so the quote carries no discount
    quote = compute_quote([CartLine(product_id=1, quantity=1, price=Decimal("10.00"))])
    assert quote.discount_amount == Decimal("0.00")


def test_subtotal_equal_to_minimum_qualifies(session, make_promotion) -> None:
    make_promotion("WELCOME10", "fixed", "10", "25")
    snapshot = validate_promotion(session, "WELCOME10", Decimal("25.00"))
    assert snapshot.code == "WELCOME10"


def test_snapshot_is_not_affected_by_later_edits(session, make_promotion) -> None:
    promotion = make_promotion("SAVE20", "percentage", "20")
    snapshot = validate_promotion(session, "SAVE20", Decimal("100.00"))

    promotion.discount_value = Decimal("50")
    session.add(promotion)
    session.commit()

    assert snapshot.discount_value == Decimal("20")


def test_lookup_failure_surfaces_as_not_found(session, monkeypatch) -> None:
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    monkeypatch.setattr(
        "marketplace.services.promotion_service.find_active_promotion", broken
    )

    with pytest.raises(PromotionNotFound):
        validate_promotion(session, "SAVE20", Decimal("100.00"))


def test_increment_usage(session, make_promotion) -> None:
    promotion = make_promotion("SAVE20")

    increment_usage(session, promotion.id)
    increment_usage(session, promotion.id)
    session.commit()

    assert session.get(Promotion, promotion.id).usage_count == 2


def test_concurrent_increments_are_not_lost(engine, make_promotion) -> None:
    promotion = make_promotion("SAVE20")

    with Session(engine) as first, Session(engine) as second:
        # both placements read the promotion before either commits
        assert first.get(Promotion, promotion.id).usage_count == 0
        assert second.get(Promotion, promotion.id).usage_count == 0

        increment_usage(first, promotion.id)
        increment_usage(second, promotion.id)
        first.commit()
        second.commit()

    with Session(engine) as check:
        assert check.get(Promotion, promotion.id).usage_count == 2


def test_increment_unknown_promotion(session) -> None:
    with pytest.raises(PromotionNotFound):
        increment_usage(session, 404)
