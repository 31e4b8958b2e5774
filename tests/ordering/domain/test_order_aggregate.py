"""Tests for the Order aggregate: placement, totals and events."""

import json

from medistock.identity.address import Address
from medistock.ordering.events import OrderPlaced
from medistock.ordering.order import Order, OrderStatus


def _place(lines=None):
    return Order.place(
        user_id="user-1",
        lines=lines or [("prod-1", 2, 2.5), ("prod-2", 1, 6.75)],
        shipping_address=Address(street="12 Harbour Rd", city="Springfield"),
    )


class TestPlacement:
    def test_new_order_is_pending(self):
        assert _place().status == OrderStatus.PENDING.value

    def test_total_is_sum_of_lines(self):
        assert _place().total_amount == 11.75

    def test_total_keeps_sub_cent_prices(self):
        order = _place([("prod-1", 1, 0.125), ("prod-2", 3, 0.1)])

        assert order.total_amount == sum(item.price * item.quantity for item in order.ordered_items())
        assert order.total_amount != round(order.total_amount, 2)

    def test_items_keep_cart_order(self):
        order = _place([("prod-b", 1, 1.0), ("prod-a", 1, 1.0), ("prod-c", 1, 1.0)])
        assert [item.product_id for item in order.ordered_items()] == ["prod-b", "prod-a", "prod-c"]

    def test_item_prices_are_captured(self):
        order = _place()
        assert [item.price for item in order.ordered_items()] == [2.5, 6.75]

    def test_shipping_address_is_copied(self):
        order = _place()
        assert order.shipping_address.street == "12 Harbour Rd"
        assert order.shipping_address.city == "Springfield"


class TestPlacedEvent:
    def test_order_placed_raised(self):
        order = _place()

        events = [event for event in order._events if isinstance(event, OrderPlaced)]
        assert len(events) == 1

        event = events[0]
        assert event.order_id == str(order.id)
        assert event.user_id == "user-1"
        assert event.total_amount == 11.75

    def test_event_items_carry_prices(self):
        order = _place()
        event = order._events[0]

        assert json.loads(event.items) == [
            {"product_id": "prod-1", "quantity": 2, "price": 2.5},
            {"product_id": "prod-2", "quantity": 1, "price": 6.75},
        ]


class TestItemLines:
    def test_without_prices(self):
        assert _place().item_lines() == [
            {"product_id": "prod-1", "quantity": 2},
            {"product_id": "prod-2", "quantity": 1},
        ]
