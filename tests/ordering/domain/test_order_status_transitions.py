"""Tests for the Order status state machine."""

import json

import pytest
from medistock.identity.address import Address
from medistock.ordering.events import OrderCancelled, OrderStatusChanged
from medistock.ordering.order import Order
from protean.exceptions import ValidationError


def _order_in(status="pending"):
    order = Order.place(
        user_id="user-1",
        lines=[("prod-1", 2, 2.5)],
        shipping_address=Address(street="12 Harbour Rd", city="Springfield"),
    )
    order._events.clear()
    if status != "pending":
        order.change_status(status)
        order._events.clear()
    return order


class TestForwardMoves:
    @pytest.mark.parametrize(
        "start, target",
        [
            ("pending", "processing"),
            ("pending", "shipped"),
            ("pending", "completed"),
            ("processing", "shipped"),
            ("processing", "completed"),
            ("shipped", "completed"),
        ],
    )
    def test_allowed(self, start, target):
        order = _order_in(start)

        assert order.change_status(target) is False
        assert order.status == target

    def test_status_changed_event(self):
        order = _order_in("pending")
        order.change_status("processing")

        [event] = order._events
        assert isinstance(event, OrderStatusChanged)
        assert event.from_status == "pending"
        assert event.to_status == "processing"

    @pytest.mark.parametrize(
        "start, target",
        [("processing", "pending"), ("shipped", "processing"), ("completed", "shipped")],
    )
    def test_backward_moves_refused(self, start, target):
        order = _order_in(start)

        with pytest.raises(ValidationError) as exc:
            order.change_status(target)

        assert exc.value.messages == {"status": [f"Cannot transition from {start} to {target}"]}
        assert order.status == start


class TestCancellation:
    @pytest.mark.parametrize("start", ["pending", "processing", "shipped"])
    def test_cancel_releases_stock(self, start):
        order = _order_in(start)

        assert order.change_status("cancelled") is True
        assert order.is_cancelled

    def test_cancel_raises_cancelled_event(self):
        order = _order_in("pending")
        order.change_status("cancelled")

        cancelled = [event for event in order._events if isinstance(event, OrderCancelled)]
        assert len(cancelled) == 1
        assert json.loads(cancelled[0].items) == [{"product_id": "prod-1", "quantity": 2}]

    def test_completed_order_cannot_be_cancelled(self):
        order = _order_in("completed")
        with pytest.raises(ValidationError):
            order.change_status("cancelled")

    def test_cancelled_is_terminal(self):
        order = _order_in("cancelled")
        with pytest.raises(ValidationError):
            order.change_status("processing")


class TestNoOpAndInvalid:
    def test_same_status_changes_nothing(self):
        order = _order_in("processing")
        before = order.updated_at

        assert order.change_status("processing") is False
        assert order._events == []
        assert order.updated_at == before

    def test_cancelling_twice_releases_once(self):
        order = _order_in("cancelled")

        assert order.change_status("cancelled") is False
        assert order._events == []

    def test_unknown_status(self):
        order = _order_in("pending")

        with pytest.raises(ValidationError) as exc:
            order.change_status("lost")
        assert exc.value.messages == {"status": ["Invalid status value"]}
