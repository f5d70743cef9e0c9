"""Shared BDD fixtures and step definitions for the Orders domain."""

import json

import pytest
from orders.cart.items import AddToCart
from orders.order.assembly import AssembleOrderFromCart, checkout
from orders.order.lifecycle import UpdateOrderStatus
from orders.order.order import Order
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then

_FULFILMENT_PATH = ["pending", "confirmed", "preparing", "ready", "out_for_delivery", "delivered"]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for the exception raised by a When step, if any."""
    return {"exc": None}


@pytest.fixture()
def attempt(error):
    """Run an action, capturing a ``ValidationError`` instead of raising it."""

    def _attempt(action):
        try:
            return action()
        except ValidationError as exc:
            error["exc"] = exc
            return None

    return _attempt


def load_order(order_id) -> Order:
    return current_domain.repository_for(Order).get(order_id)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the customer has {quantity:d} "{name}" at {price:g} in the cart'))
def _(customer, restaurant, quantity, name, price):
    current_domain.process(
        AddToCart(
            customer_id=customer.id,
            restaurant_id=restaurant.id,
            item_id=f"item-{name.lower().replace(' ', '-')}",
            name=name,
            price=float(price),
            quantity=quantity,
        ),
        asynchronous=False,
    )


@given("the customer has placed the order", target_fixture="order_id")
def _(customer, restaurant):
    summary = checkout(
        AssembleOrderFromCart(
            customer_id=customer.id,
            restaurant_id=restaurant.id,
            delivery_address=json.dumps({"street": "MG Road", "city": "Pune"}),
        )
    )
    return summary["order_id"]


@given(parsers.cfparse('the order has moved to "{status}"'))
def _(order_id, status):
    current = load_order(order_id).status
    start = _FULFILMENT_PATH.index(current) + 1
    for step in _FULFILMENT_PATH[start : _FULFILMENT_PATH.index(status) + 1]:
        current_domain.process(UpdateOrderStatus(order_id=order_id, status=step), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _(order_id, status):
    assert load_order(order_id).status == status


@then("the action fails with a validation error")
def _(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then("no order is placed")
def _():
    assert current_domain.repository_for(Order)._dao.query.all().items == []
