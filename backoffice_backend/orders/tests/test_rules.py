# orders/tests/test_rules.py

from __future__ import annotations

from datetime import date, datetime, timedelta
from datetime import timezone as dt_timezone
from decimal import Decimal

from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, override_settings

from orders.models import Order, OrderStatus
from orders.services import order_lifecycle as lifecycle
from orders.services.exceptions import (
    EmptyOrderError,
    InvalidDeliveryDateError,
    InvalidLineItemError,
    InvalidPaymentTypeError,
    InvalidStatusError,
    InvalidTransitionError,
    MissingFieldError,
    PastDeliveryDateError,
)
from orders.services.order_validation import (
    ensure_not_past,
    normalize_payment_type,
    parse_delivery_date,
    parse_line_items,
    require_fields,
    require_line_items,
    requested_quantities,
)
from orders.services.pricing import money, order_total, price_matches

PID = "6f1c1c4e-6a0b-4c39-9d1a-5d0d1f0b2a11"


# =====================================================
# Pricing
# =====================================================
class PricingTests(SimpleTestCase):
    """
    GUARANTEES:
    - totals are rounded once, half-up, on the exact sum
    - submitted prices pass within one cent of the catalog price
    """

    def test_total_rounds_half_up_on_the_sum(self):
        total = order_total([(Decimal("10.00"), 2), (Decimal("5.005"), 1)])

        self.assertEqual(total, Decimal("25.01"))

    def test_total_of_sub_cent_lines(self):
        # 3 x 0.3333 = 0.9999 -> 1.00 (per-line rounding would give 0.99)
        self.assertEqual(order_total([(Decimal("0.3333"), 3)]), Decimal("1.00"))

    def test_money(self):
        self.assertEqual(money("2.345"), Decimal("2.35"))
        self.assertEqual(money(None), Decimal("0.00"))

    def test_price_tolerance(self):
        self.assertTrue(price_matches(Decimal("10.01"), Decimal("10.00")))
        self.assertTrue(price_matches("9.99", Decimal("10.00")))
        self.assertFalse(price_matches("10.02", Decimal("10.00")))


# =====================================================
# Lifecycle
# =====================================================
class LifecycleTests(SimpleTestCase):
    """
    GUARANTEES:
    - strict graph: Pending -> Confirmed -> Delivered, Pending/Confirmed -> Cancelled
    - permissive graph: any known status to any other
    - only Cancelled is outside the reservation
    """

    def _order(self, status):
        return Order(status=status)

    def test_strict_allowed(self):
        for src, dst in (
            ("Pending", "Confirmed"),
            ("Pending", "Cancelled"),
            ("Confirmed", "Delivered"),
            ("Confirmed", "Cancelled"),
        ):
            self.assertTrue(lifecycle.can_transition(from_status=src, to_status=dst, policy="strict"))

    def test_strict_rejected(self):
        for src, dst in (
            ("Pending", "Delivered"),
            ("Delivered", "Pending"),
            ("Cancelled", "Pending"),
            ("Delivered", "Cancelled"),
        ):
            self.assertFalse(lifecycle.can_transition(from_status=src, to_status=dst, policy="strict"))

    def test_same_status_always_allowed(self):
        self.assertTrue(
            lifecycle.can_transition(from_status="Delivered", to_status="Delivered", policy="strict")
        )

    def test_permissive_allows_any(self):
        self.assertTrue(
            lifecycle.can_transition(from_status="Delivered", to_status="Pending", policy="permissive")
        )
        self.assertTrue(
            lifecycle.can_transition(from_status="Cancelled", to_status="Confirmed", policy="permissive")
        )

    def test_validate_transition_raises(self):
        with self.assertRaises(InvalidTransitionError) as ctx:
            lifecycle.validate_transition(
                order=self._order(OrderStatus.PENDING.value),
                target_status=OrderStatus.DELIVERED.value,
                policy="strict",
            )

        self.assertEqual(ctx.exception.details["fromStatus"], "Pending")
        self.assertEqual(ctx.exception.details["toStatus"], "Delivered")

    def test_reservation_effect(self):
        self.assertEqual(
            lifecycle.reservation_effect(from_status="Pending", to_status="Cancelled"),
            lifecycle.RELEASE,
        )
        self.assertEqual(
            lifecycle.reservation_effect(from_status="Cancelled", to_status="Confirmed"),
            lifecycle.RESERVE,
        )
        self.assertIsNone(lifecycle.reservation_effect(from_status="Pending", to_status="Delivered"))

    def test_locked_for_edit(self):
        self.assertTrue(lifecycle.is_locked_for_edit("Delivered", policy="strict"))
        self.assertTrue(lifecycle.is_locked_for_edit("Cancelled", policy="strict"))
        self.assertFalse(lifecycle.is_locked_for_edit("Confirmed", policy="strict"))
        self.assertFalse(lifecycle.is_locked_for_edit("Delivered", policy="permissive"))

    def test_normalize_status_is_case_insensitive(self):
        self.assertEqual(lifecycle.normalize_status(" confirmed "), "Confirmed")

    def test_normalize_status_rejects_unknown_and_blank(self):
        with self.assertRaises(InvalidStatusError):
            lifecycle.normalize_status("Shipped")
        with self.assertRaises(InvalidStatusError):
            lifecycle.normalize_status("")

    @override_settings(ORDER_STATUS_POLICY="lenient")
    def test_unknown_policy_is_a_configuration_error(self):
        with self.assertRaises(ImproperlyConfigured):
            lifecycle.get_policy()


# =====================================================
# Payload validation
# =====================================================
class PayloadValidationTests(SimpleTestCase):
    def test_line_items_required(self):
        for value in (None, [], "abc", {}):
            with self.assertRaises(EmptyOrderError):
                require_line_items(value)

    def test_missing_fields_listed(self):
        with self.assertRaises(MissingFieldError) as ctx:
            require_fields(client_id=" ", delivery_date=None, payment_type="Cash")

        self.assertEqual(ctx.exception.fields, ["clientId", "deliveryDate"])
        self.assertEqual(
            ctx.exception.message, "Client, delivery date, and payment type are required"
        )

    def test_payment_type_normalization(self):
        self.assertEqual(normalize_payment_type("Cash"), "Cash")
        self.assertEqual(normalize_payment_type("Credit Card"), "CreditCard")
        self.assertEqual(normalize_payment_type("bank transfer"), "BankTransfer")
        with self.assertRaises(InvalidPaymentTypeError):
            normalize_payment_type("Bitcoin")

    def test_delivery_date_formats(self):
        self.assertEqual(parse_delivery_date("2031-05-04"), date(2031, 5, 4))
        self.assertEqual(parse_delivery_date(date(2031, 5, 4)), date(2031, 5, 4))
        self.assertEqual(
            parse_delivery_date(datetime(2031, 5, 4, 12, 0, tzinfo=dt_timezone.utc)),
            date(2031, 5, 4),
        )
        self.assertEqual(parse_delivery_date("2031-05-04T12:00:00Z"), date(2031, 5, 4))

    def test_delivery_date_invalid(self):
        for value in ("tomorrow", "2031-13-40", "04/05/2031"):
            with self.assertRaises(InvalidDeliveryDateError):
                parse_delivery_date(value)

    def test_past_delivery_date(self):
        today = date(2031, 5, 4)

        self.assertEqual(ensure_not_past(today, today=today), today)
        with self.assertRaises(PastDeliveryDateError):
            ensure_not_past(today - timedelta(days=1), today=today)

    def test_line_items_parsed(self):
        items = parse_line_items([{"productId": PID, "quantity": "2", "price": "9.50"}])

        self.assertEqual(items[0].quantity, 2)
        self.assertEqual(items[0].price, Decimal("9.50"))
        self.assertEqual(str(items[0].product_id), PID)

    def test_invalid_line_items(self):
        cases = [
            "not-an-object",
            {"quantity": 1, "price": 1},
            {"productId": "nope", "quantity": 1, "price": 1},
            {"productId": PID, "quantity": 0, "price": 1},
            {"productId": PID, "quantity": 1.5, "price": 1},
            {"productId": PID, "quantity": True, "price": 1},
            {"productId": PID, "quantity": 1},
            {"productId": PID, "quantity": 1, "price": "abc"},
            {"productId": PID, "quantity": 1, "price": "NaN"},
            {"productId": PID, "quantity": 1, "price": -1},
        ]
        for raw in cases:
            with self.subTest(raw=raw):
                with self.assertRaises(InvalidLineItemError) as ctx:
                    parse_line_items([{"productId": PID, "quantity": 1, "price": 1}, raw])
                self.assertEqual(ctx.exception.index, 1)

    def test_repeated_products_are_summed(self):
        items = parse_line_items(
            [
                {"productId": PID, "quantity": 2, "price": 1},
                {"productId": PID, "quantity": 3, "price": 1},
            ]
        )

        self.assertEqual(list(requested_quantities(items).values()), [5])
