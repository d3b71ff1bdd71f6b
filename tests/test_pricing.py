"""Tests for the pure pricing functions."""

from decimal import Decimal

import pytest

from marketplace.constants.shipping import ShippingType
from marketplace.services.pricing import (
    CartLine,
    PromotionSnapshot,
    calculate_discount,
    calculate_subtotal,
    calculate_tax,
    compute_quote,
    estimated_delivery,
    round2,
    shipping_cost_for,
)


def line(price: str, quantity: int, product_id: int = 1) -> CartLine:
    return CartLine(product_id=product_id, quantity=quantity, price=Decimal(price))


def promo(discount_type: str, value: str, minimum: str = "0") -> PromotionSnapshot:
    return PromotionSnapshot(
        id=1,
        code="TEST",
        discount_type=discount_type,
        discount_value=Decimal(value),
        min_order_amount=Decimal(minimum),
    )


class TestSubtotal:
    def test_sums_price_times_quantity(self) -> None:
        lines = [line("29.99", 2), line("15.00", 1), line("0.01", 7)]
        assert calculate_subtotal(lines) == Decimal("75.05")

    def test_independent_of_line_order(self) -> None:
        lines = [line("19.95", 3, 1), line("4.10", 2, 2), line("120.00", 1, 3)]
        assert calculate_subtotal(lines) == calculate_subtotal(list(reversed(lines)))

    def test_empty_cart_is_zero(self) -> None:
        assert calculate_subtotal([]) == Decimal("0")

    def test_float_prices_do_not_pick_up_binary_noise(self) -> None:
        lines = [CartLine(product_id=1, quantity=3, price=0.1)]
        assert calculate_subtotal(lines) == Decimal("0.3")


class TestTax:
    def test_zero_subtotal_has_zero_tax(self) -> None:
        assert calculate_tax(Decimal("0")) == Decimal("0.00")

    def test_half_cent_rounds_up(self) -> None:
        # 50.00 * 0.0825 = 4.125
        assert calculate_tax(Decimal("50.00")) == Decimal("4.13")

    def test_rounds_to_cents(self) -> None:
        # 74.98 * 0.0825 = 6.18585
        assert calculate_tax(Decimal("74.98")) == Decimal("6.19")


class TestShipping:
    def test_regular_is_free(self) -> None:
        assert shipping_cost_for(ShippingType.regular) == Decimal("0.00")

    def test_expedited_costs_twelve(self) -> None:
        assert shipping_cost_for("expedited") == Decimal("12.00")

    def test_shipping_ignores_cart_contents(self) -> None:
        small = compute_quote([line("1.00", 1)], ShippingType.expedited)
        large = compute_quote([line("900.00", 5)], ShippingType.expedited)
        assert small.shipping_cost == large.shipping_cost == Decimal("12.00")

    def test_estimated_delivery(self) -> None:
        assert estimated_delivery("expedited") == "1-2 business days"
        assert estimated_delivery(ShippingType.regular) == "5-7 business days"

    def test_unknown_method_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            shipping_cost_for("overnight")


class TestDiscount:
    def test_no_promotion_means_no_discount(self) -> None:
        assert calculate_discount(Decimal("100.00"), None) == Decimal("0.00")

    def test_percentage_discount(self) -> None:
        quote = compute_quote([line("100.00", 1)], ShippingType.regular, promo("percentage", "20"))
        assert quote.discount_amount == Decimal("20.00")
        assert quote.total == Decimal("88.25")

    def test_percentage_discount_rounds_to_cents(self) -> None:
        # 33.33 * 15% = 4.9995
        assert calculate_discount(Decimal("33.33"), promo("percentage", "15")) == Decimal("5.00")

    def test_fixed_discount(self) -> None:
        quote = compute_quote([line("50.00", 1)], ShippingType.regular, promo("fixed", "15", "25"))
        assert quote.tax_amount == Decimal("4.13")
        assert quote.discount_amount == Decimal("15.00")
        assert quote.total == Decimal("39.13")

    def test_fixed_discount_is_clamped_to_subtotal(self) -> None:
        quote = compute_quote([line("30.00", 1)], ShippingType.regular, promo("fixed", "50"))
        assert quote.discount_amount == Decimal("30.00")
        # 30.00 * 0.0825 = 2.475 -> 2.48, nothing left but the tax
        assert quote.total == Decimal("2.48")
        assert quote.total >= 0


class TestComputeQuote:
    def test_two_lines_expedited_no_promotion(self) -> None:
        quote = compute_quote([line("29.99", 2, 1), line("15.00", 1, 2)], ShippingType.expedited)

        assert quote.subtotal == Decimal("74.98")
        assert quote.tax_amount == Decimal("6.19")
        assert quote.shipping_cost == Decimal("12.00")
        assert quote.discount_amount == Decimal("0.00")
        assert quote.total == Decimal("93.17")

    def test_is_idempotent(self) -> None:
        lines = [line("12.49", 3, 1), line("7.77", 2, 2)]
        promotion = promo("percentage", "10")

        first = compute_quote(lines, "expedited", promotion)
        second = compute_quote(lines, "expedited", promotion)

        assert first == second

    def test_empty_cart_quotes_only_shipping(self) -> None:
        quote = compute_quote([], ShippingType.expedited)
        assert quote.subtotal == Decimal("0")
        assert quote.total == Decimal("12.00")

    def test_total_rounds_each_step_independently(self) -> None:
        # tax and discount are rounded before the total is summed
        quote = compute_quote([line("10.10", 1)], ShippingType.regular, promo("percentage", "5"))
        # tax: 0.83325 -> 0.83, discount: 0.505 -> 0.51
        assert quote.tax_amount == Decimal("0.83")
        assert quote.discount_amount == Decimal("0.51")
        assert quote.total == Decimal("10.42")


def test_round2_is_half_up() -> None:
    assert round2(Decimal("0.005")) == Decimal("0.01")
    assert round2(Decimal("2.675")) == Decimal("2.68")
    assert round2("1.004") == Decimal("1.00")
