"""BDD tests for checkout and the order lifecycle."""

import pytest
from medistock.catalogue.product import Product
from medistock.ordering.order import Order
from medistock.ordering.placement import CartLine, PlaceOrder
from medistock.ordering.status import ChangeOrderStatus
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/checkout.feature")


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def shelf():
    """Products by name."""
    return {}


@pytest.fixture()
def placed():
    """The id of the order under test."""
    return {"order_id": None}


def _place(shopper, product, quantity):
    return current_domain.process(
        PlaceOrder(user_id=shopper.id, items=[CartLine(product_id=product.id, quantity=quantity)]),
        asynchronous=False,
    )


def _move(order_id, status):
    current_domain.process(ChangeOrderStatus(order_id=order_id, status=status), asynchronous=False)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a shopper with a delivery address", target_fixture="shopper")
def shopper_with_address(make_user):
    return make_user(address={"street": "12 Harbour Rd", "city": "Springfield"})


@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} units in stock'))
def product_on_shelf(make_product, shelf, name, price, stock):
    shelf[name] = make_product(name=name, price=price, stock=stock)


@given(parsers.cfparse('the shopper has ordered {quantity:d} units of "{name}"'))
def existing_order(shopper, shelf, placed, quantity, name):
    placed["order_id"] = _place(shopper, shelf[name], quantity)


@given(parsers.cfparse('an admin has moved the order to "{status}"'))
def order_already_moved(placed, status):
    _move(placed["order_id"], status)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the shopper orders {quantity:d} units of "{name}"'))
def order_units(shopper, shelf, placed, error, quantity, name):
    try:
        placed["order_id"] = _place(shopper, shelf[name], quantity)
    except ValidationError as exc:
        error["exc"] = exc


@when(parsers.cfparse('an admin moves the order to "{status}"'))
def move_order(placed, error, status):
    try:
        _move(placed["order_id"], status)
    except ValidationError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is "{status}" with a total of {total:f}'))
def order_state(placed, status, total):
    order = current_domain.repository_for(Order).get(placed["order_id"])
    assert order.status == status
    assert order.total_amount == pytest.approx(total)


@then(parsers.cfparse('"{name}" has {stock:d} units in stock'))
def units_in_stock(shelf, name, stock):
    assert current_domain.repository_for(Product).get(shelf[name].id).stock == stock


@then("the request is refused")
def request_refused(error):
    assert isinstance(error["exc"], ValidationError)
