"""Domain events raised by the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from medistock.domain import medistock


@medistock.event(part_of="Order")
class OrderPlaced:
    """Checkout succeeded: stock was reserved and a pending order recorded."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity, price}
    total_amount = Float(required=True)
    placed_at = DateTime(required=True)


@medistock.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    from_status = String(required=True)
    to_status = String(required=True)
    changed_at = DateTime(required=True)


@medistock.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled and its reserved stock is due back on the shelves."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    cancelled_at = DateTime(required=True)
