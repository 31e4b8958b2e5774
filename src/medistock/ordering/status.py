"""Admin status changes, releasing reserved stock when an order is cancelled."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from medistock.catalogue.product import Product
from medistock.domain import medistock
from medistock.ordering.order import Order

logger = structlog.get_logger(__name__)


def load_order(repo, order_id) -> Order:
    order = repo.get_or_none(order_id)
    if order is None:
        raise ObjectNotFoundError("Order not found")
    return order


def restore_order_stock(order) -> list[str]:
    """Put every item's quantity back on its product. Returns the products restored.

    Items whose product has since been deleted are skipped.
    """
    repo = current_domain.repository_for(Product)
    restored = {}
    for item in order.ordered_items():
        product_id = str(item.product_id)
        product = restored.get(product_id) or repo.get_or_none(product_id)
        if product is None:
            continue
        product.restore_stock(item.quantity)
        restored[product_id] = product

    for product in restored.values():
        repo.add(product)
    return sorted(restored)


@medistock.command(part_of="Order")
class ChangeOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@medistock.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(ChangeOrderStatus)
    def change_status(self, command):
        repo = current_domain.repository_for(Order)
        order = load_order(repo, command.order_id)

        previous = order.status
        releases_stock = order.change_status(command.status)
        if order.status == previous:
            return str(order.id)

        restored = restore_order_stock(order) if releases_stock else []
        repo.add(order)

        logger.info(
            "order.status_changed",
            order_id=str(order.id),
            from_status=previous,
            to_status=order.status,
            restored_products=restored,
        )
        return str(order.id)
