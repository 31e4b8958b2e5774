"""Checkout: turn a cart into a pending order while reserving stock.

The whole cart is checked before any product is touched, and every stock
change plus the new order are committed in a single unit of work. Products are
saved with their version, so two checkouts racing for the same stock cannot
both succeed.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer, List, ValueObject
from protean.utils.globals import current_domain

from medistock.catalogue.product import Product
from medistock.domain import medistock
from medistock.exceptions import AddressRequiredError
from medistock.identity.profile import load_user
from medistock.identity.user import User
from medistock.ordering.order import Order

logger = structlog.get_logger(__name__)


@medistock.value_object
class CartLine:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@medistock.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    items = List(content_type=ValueObject(CartLine))


def _load_products(lines) -> dict:
    repo = current_domain.repository_for(Product)
    products = {}
    for line in lines:
        product_id = str(line.product_id)
        if product_id in products:
            continue
        product = repo.get_or_none(product_id)
        if product is None:
            raise ObjectNotFoundError(f"Product not found: {product_id}")
        products[product_id] = product
    return products


def _check_demand(lines, products) -> None:
    demand = {}
    for line in lines:
        product_id = str(line.product_id)
        demand[product_id] = demand.get(product_id, 0) + line.quantity

    for product_id, quantity in demand.items():
        product = products[product_id]
        if product.stock < quantity:
            raise ValidationError({"stock": [f"Insufficient stock for {product.name}"]})


@medistock.command_handler(part_of=Order)
class OrderPlacementHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        user = load_user(current_domain.repository_for(User), command.user_id)
        if not user.has_complete_address:
            raise AddressRequiredError()

        lines = command.items or []
        if not lines:
            raise ValidationError({"items": ["Order must contain at least one item"]})

        products = _load_products(lines)
        _check_demand(lines, products)

        priced_lines = []
        for line in lines:
            product = products[str(line.product_id)]
            product.reserve_stock(line.quantity)
            priced_lines.append((product.id, line.quantity, product.price))

        product_repo = current_domain.repository_for(Product)
        for product in products.values():
            product_repo.add(product)

        order = Order.place(
            user_id=user.id,
            lines=priced_lines,
            shipping_address=user.address.replace(),
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "order.placed",
            order_id=str(order.id),
            user_id=str(user.id),
            lines=len(priced_lines),
            total=order.total_amount,
        )
        return str(order.id)
