"""FastAPI endpoints for checkout and order administration."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from medistock.api.dependencies import require
from medistock.api.schemas import MessageResponse, OrderStatusRequest, PlaceOrderRequest
from medistock.identity.policy import Action, Caller
from medistock.ordering.placement import CartLine, PlaceOrder
from medistock.ordering.removal import RemoveOrder
from medistock.ordering.status import ChangeOrderStatus
from medistock.ordering.views import get_order, list_orders, order_stats

order_router = APIRouter(prefix="/api/orders", tags=["orders"])


@order_router.post("", status_code=201)
async def place_order(
    body: PlaceOrderRequest,
    caller: Caller = Depends(require(Action.ORDER_PLACE)),
) -> dict:
    command = PlaceOrder(
        user_id=caller.user_id,
        items=[CartLine(product_id=line.product_id, quantity=line.quantity) for line in body.items],
    )
    order_id = current_domain.process(command, asynchronous=False)
    return get_order(caller, order_id)


@order_router.get("")
async def my_orders(caller: Caller = Depends(require(Action.ORDER_LIST))) -> list[dict]:
    return list_orders(caller)


@order_router.get("/stats")
async def stats(caller: Caller = Depends(require(Action.ORDER_STATS))) -> dict:
    return order_stats(caller)


@order_router.get("/{order_id}")
async def order_details(order_id: str, caller: Caller = Depends(require(Action.ORDER_LIST))) -> dict:
    return get_order(caller, order_id)


@order_router.put("/{order_id}/status")
async def update_status(
    order_id: str,
    body: OrderStatusRequest,
    caller: Caller = Depends(require(Action.ORDER_MANAGE)),
) -> dict:
    current_domain.process(ChangeOrderStatus(order_id=order_id, status=body.status), asynchronous=False)
    return get_order(caller, order_id)


@order_router.delete("/{order_id}", response_model=MessageResponse)
async def delete_order(
    order_id: str,
    caller: Caller = Depends(require(Action.ORDER_MANAGE)),
) -> MessageResponse:
    current_domain.process(RemoveOrder(order_id=order_id), asynchronous=False)
    return MessageResponse(msg="Order removed and stock restored")
