"""Read side of ordering: populated order views, listings and statistics."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from medistock.catalogue.product import Product
from medistock.catalogue.views import product_summary
from medistock.domain import medistock
from medistock.identity.policy import Action, Caller, authorize
from medistock.identity.user import User
from medistock.identity.views import address_view, user_summary
from medistock.ordering.order import REVENUE_STATUSES, Order, OrderStatus

DELETED_PRODUCT = "Deleted Product"
NOT_AVAILABLE = "N/A"


@medistock.repository(part_of=Order)
class OrderRepository:
    def newest_first(self) -> list[Order]:
        return self.query.order_by("-created_at").all().items

    def placed_by(self, user_id) -> list[Order]:
        return self.query.filter(user_id=str(user_id)).order_by("-created_at").all().items


class _Lookup:
    """Loads each referenced product or user at most once per view."""

    def __init__(self):
        self._products = {}
        self._users = {}

    def product(self, product_id):
        key = str(product_id)
        if key not in self._products:
            self._products[key] = current_domain.repository_for(Product).get_or_none(key)
        return self._products[key]

    def user(self, user_id):
        key = str(user_id)
        if key not in self._users:
            self._users[key] = current_domain.repository_for(User).get_or_none(key)
        return self._users[key]


def _deleted_product(product_id, price) -> dict:
    return {
        "_id": str(product_id),
        "id": str(product_id),
        "name": DELETED_PRODUCT,
        "category": NOT_AVAILABLE,
        "manufacturer": NOT_AVAILABLE,
        "rackNo": NOT_AVAILABLE,
        "price": price,
    }


def order_view(order: Order, lookup: _Lookup | None = None) -> dict:
    """The order with its products and customer expanded."""
    lookup = lookup or _Lookup()

    items = []
    for item in order.ordered_items():
        product = lookup.product(item.product_id)
        items.append(
            {
                "_id": str(item.id),
                "product": product_summary(product)
                if product is not None
                else _deleted_product(item.product_id, item.price),
                "quantity": item.quantity,
                "price": item.price,
            }
        )

    user = lookup.user(order.user_id)
    order_id = str(order.id)
    return {
        "_id": order_id,
        "id": order_id,
        "user": user_summary(user) if user is not None else None,
        "items": items,
        "totalAmount": order.total_amount,
        "shippingAddress": address_view(order.shipping_address),
        "status": order.status,
        "createdAt": order.created_at.isoformat() if order.created_at else None,
        "updatedAt": order.updated_at.isoformat() if order.updated_at else None,
    }


def get_order(caller: Caller, order_id) -> dict:
    order = current_domain.repository_for(Order).get_or_none(order_id)
    if order is None:
        raise ObjectNotFoundError("Order not found")

    authorize(caller, Action.ORDER_VIEW, owner_id=order.user_id)
    return order_view(order)


def list_orders(caller: Caller) -> list[dict]:
    """Every order for an admin, otherwise only the caller's own. Newest first."""
    authorize(caller, Action.ORDER_LIST)

    repo = current_domain.repository_for(Order)
    orders = repo.newest_first() if caller.is_admin else repo.placed_by(caller.user_id)

    lookup = _Lookup()
    return [order_view(order, lookup) for order in orders]


def order_stats(caller: Caller) -> dict:
    authorize(caller, Action.ORDER_STATS)

    orders = current_domain.repository_for(Order).newest_first()
    counts = {status: 0 for status in OrderStatus}
    revenue = 0.0
    for order in orders:
        status = OrderStatus(order.status)
        counts[status] += 1
        if status in REVENUE_STATUSES:
            revenue += order.total_amount or 0.0

    return {
        "totalOrders": len(orders),
        "pendingOrders": counts[OrderStatus.PENDING],
        "processingOrders": counts[OrderStatus.PROCESSING],
        "shippedOrders": counts[OrderStatus.SHIPPED],
        "completedOrders": counts[OrderStatus.COMPLETED],
        "cancelledOrders": counts[OrderStatus.CANCELLED],
        "totalRevenue": revenue,
    }
