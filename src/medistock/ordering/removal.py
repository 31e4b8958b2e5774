"""Hard deletion of orders by an admin."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from medistock.domain import medistock
from medistock.ordering.order import Order, OrderItem
from medistock.ordering.status import load_order, restore_order_stock

logger = structlog.get_logger(__name__)


@medistock.command(part_of="Order")
class RemoveOrder:
    order_id = Identifier(required=True)


@medistock.command_handler(part_of=Order)
class OrderRemovalHandler:
    @handle(RemoveOrder)
    def remove_order(self, command):
        repo = current_domain.repository_for(Order)
        order = load_order(repo, command.order_id)

        # A cancelled order already gave its stock back
        restored = [] if order.is_cancelled else restore_order_stock(order)

        item_dao = current_domain.repository_for(OrderItem)._dao
        for item in order.ordered_items():
            item_dao.delete(item)
        repo._dao.delete(order)

        logger.info("order.removed", order_id=str(command.order_id), restored_products=restored)
