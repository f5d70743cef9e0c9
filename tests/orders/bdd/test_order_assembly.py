"""BDD tests for assembling an order from a cart."""

import json

from orders.cart.cart import Cart
from orders.order.assembly import AssembleOrderFromCart, checkout
from orders.order.order import Order
from protean.utils.globals import current_domain
from pytest_bdd import parsers, scenarios, then, when

scenarios("features/order_assembly.feature")


def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


def _cart(customer, restaurant):
    return current_domain.repository_for(Cart).find_active_cart(customer.id, restaurant.id)


def _checkout(customer, restaurant, attempt, address):
    command = AssembleOrderFromCart(
        customer_id=customer.id,
        restaurant_id=restaurant.id,
        delivery_address=json.dumps(address),
    )
    summary = attempt(lambda: checkout(command))
    return summary["order_id"] if summary else None


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the customer checks out to "{street}" in "{city}"'), target_fixture="order_id")
def _(customer, restaurant, attempt, street, city):
    return _checkout(customer, restaurant, attempt, {"street": street, "city": city})


@when(parsers.cfparse('the customer checks out to "{street}" with no city'), target_fixture="order_id")
def _(customer, restaurant, attempt, street):
    return _checkout(customer, restaurant, attempt, {"street": street})


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("an order is placed with a total of {total:g}"))
def _(order_id, total):
    order = _order(order_id)
    assert order.subtotal == total
    assert order.total_amount == total


@then(parsers.cfparse('the order number starts with "{prefix}"'))
def _(order_id, prefix):
    assert _order(order_id).order_number.startswith(prefix)


@then(parsers.cfparse('the order line "{name}" has an item total of {item_total:g}'))
def _(order_id, name, item_total):
    line = next(item for item in _order(order_id).items if item.name == name)
    assert line.item_total == item_total


@then("the cart is empty")
def _(customer, restaurant):
    assert _cart(customer, restaurant).is_empty


@then(parsers.cfparse("the cart still holds {count:d} items"))
def _(customer, restaurant, count):
    assert _cart(customer, restaurant).item_count == count
