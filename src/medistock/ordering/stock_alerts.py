"""Low-stock warnings after checkout.

Listens for OrderPlaced and logs one structured warning for every ordered
product that is now at or below the low-stock threshold.
"""

import json

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from medistock.catalogue.product import LOW_STOCK_THRESHOLD, Product
from medistock.domain import medistock
from medistock.ordering.events import OrderPlaced
from medistock.ordering.order import Order

logger = structlog.get_logger(__name__)


@medistock.event_handler(part_of=Order)
class StockAlertHandler:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        product_ids = sorted({line["product_id"] for line in json.loads(event.items)})
        repo = current_domain.repository_for(Product)

        for product_id in product_ids:
            product = repo.get_or_none(product_id)
            if product is None or product.stock > LOW_STOCK_THRESHOLD:
                continue
            logger.warning(
                "product.low_stock",
                product_id=product_id,
                name=product.name,
                stock=product.stock,
                rack_no=product.rack_no,
                order_id=str(event.order_id),
            )
