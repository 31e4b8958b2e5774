"""Order aggregate: what was bought, at which price, and where it ships.

State machine:
    pending → processing → shipped → completed
    cancelled (from pending, processing or shipped)

Forward moves may skip steps. ``completed`` and ``cancelled`` are terminal.
"""

import json
from datetime import datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from medistock.domain import medistock
from medistock.identity.address import Address
from medistock.ordering.events import OrderCancelled, OrderPlaced, OrderStatusChanged


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {
        OrderStatus.PROCESSING,
        OrderStatus.SHIPPED,
        OrderStatus.COMPLETED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.PROCESSING: {
        OrderStatus.SHIPPED,
        OrderStatus.COMPLETED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.SHIPPED: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# Statuses whose totals count as revenue
REVENUE_STATUSES = {OrderStatus.SHIPPED, OrderStatus.COMPLETED}


@medistock.entity(part_of="Order", limit=-1)
class OrderItem:
    """One cart line, with the unit price captured when the order was placed."""

    line_no = Integer(required=True, min_value=1)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)


@medistock.aggregate(limit=-1)
class Order:
    user_id = Identifier(required=True)
    items = HasMany(OrderItem)
    total_amount = Float(default=0.0, min_value=0.0)
    shipping_address = ValueObject(Address)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    created_at = DateTime(default=datetime.now)
    updated_at = DateTime(default=datetime.now)

    @classmethod
    def place(cls, user_id, lines, shipping_address):
        """Record a checkout.

        ``lines`` is a sequence of ``(product_id, quantity, unit_price)``. The
        total is computed here once and never recomputed.
        """
        now = datetime.now()
        items = []
        total = 0.0
        for line_no, (product_id, quantity, unit_price) in enumerate(lines, start=1):
            items.append(
                OrderItem(
                    line_no=line_no,
                    product_id=str(product_id),
                    quantity=quantity,
                    price=unit_price,
                )
            )
            total += unit_price * quantity

        order = cls(
            user_id=str(user_id),
            items=items,
            total_amount=total,
            shipping_address=shipping_address,
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                items=json.dumps(order.item_lines(with_price=True)),
                total_amount=order.total_amount,
                placed_at=now,
            )
        )
        return order

    def ordered_items(self) -> list:
        return sorted(self.items, key=lambda item: item.line_no)

    def item_lines(self, with_price=False) -> list[dict]:
        lines = []
        for item in self.ordered_items():
            line = {"product_id": str(item.product_id), "quantity": item.quantity}
            if with_price:
                line["price"] = item.price
            lines.append(line)
        return lines

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED.value

    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError(
                {"status": [f"Cannot transition from {current.value} to {target_status.value}"]}
            )

    def change_status(self, status) -> bool:
        """Move to ``status``. Returns True when the move releases reserved stock.

        Setting the current status again changes nothing.
        """
        try:
            target = OrderStatus(status)
        except ValueError:
            raise ValidationError({"status": ["Invalid status value"]}) from None

        current = OrderStatus(self.status)
        if target is current:
            return False

        self._assert_can_transition(target)

        now = datetime.now()
        self.status = target.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                from_status=current.value,
                to_status=target.value,
                changed_at=now,
            )
        )

        if target is OrderStatus.CANCELLED:
            self.raise_(
                OrderCancelled(
                    order_id=str(self.id),
                    user_id=str(self.user_id),
                    items=json.dumps(self.item_lines()),
                    cancelled_at=now,
                )
            )
            return True
        return False
