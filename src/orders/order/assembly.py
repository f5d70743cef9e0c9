"""Order assembly: turning a cart, or an explicit item list, into an order.

Assembly from a cart writes two aggregates: the new order and the emptied
cart. Both happen in the one command handler, so they commit together in a
single Unit of Work. ``checkout`` holds the cart's lock around the whole
command so two concurrent checkouts of one cart cannot both succeed.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from orders.cart.cart import Cart
from orders.cart.locks import checkout_lock
from orders.directory.customer import Customer
from orders.directory.restaurant import Restaurant
from orders.domain import orders
from orders.order.numbering import next_order_number
from orders.order.order import Order, build_delivery_address

logger = structlog.get_logger(__name__)


@orders.command(part_of="Order")
class AssembleOrderFromCart:
    customer_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    delivery_address = Text(required=True)  # JSON: address dict
    special_instructions = String(max_length=500)


@orders.command(part_of="Order")
class AssembleCustomOrder:
    customer_id = Identifier(required=True)
    customer_name = String(max_length=100)
    restaurant_id = Identifier(required=True)
    restaurant_name = String(max_length=100)
    items = Text(required=True)  # JSON: list of item dicts
    delivery_address = Text(required=True)  # JSON: address dict
    special_instructions = String(max_length=500)
    estimated_delivery = String(max_length=50)


def _cart_line(line) -> dict:
    return {
        "item_id": str(line.item_id),
        "name": line.name,
        "description": line.description,
        "price": line.price,
        "quantity": line.quantity,
        "image": line.image,
        "category": line.category,
    }


def _restaurant_name(restaurant: Restaurant) -> str:
    name = restaurant.display_name()
    if not name:
        raise ValidationError({"restaurant_name": ["Restaurant has no business or owner name"]})
    return name


def _summary(order: Order) -> dict:
    return {
        "order_id": str(order.id),
        "order_number": order.order_number,
        "status": order.status,
        "total_amount": order.total_amount,
    }


def checkout(command: AssembleOrderFromCart) -> dict:
    """Process ``command`` while holding the checkout lock for its cart."""
    with checkout_lock(command.customer_id, command.restaurant_id):
        return current_domain.process(command, asynchronous=False)


@orders.command_handler(part_of=Order)
class AssembleOrderHandler:
    @handle(AssembleOrderFromCart)
    def assemble_from_cart(self, command):
        address = build_delivery_address(command.delivery_address)

        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.find_active_cart(command.customer_id, command.restaurant_id)
        if cart is None or cart.is_empty:
            raise ValidationError({"cart": ["Cart is empty"]})

        customer = current_domain.repository_for(Customer).get(command.customer_id)
        restaurant = current_domain.repository_for(Restaurant).get(command.restaurant_id)

        order_repo = current_domain.repository_for(Order)
        order = Order.place(
            order_number=next_order_number(order_repo.order_number_exists),
            customer_id=command.customer_id,
            customer_name=customer.display_name(),
            restaurant_id=command.restaurant_id,
            restaurant_name=_restaurant_name(restaurant),
            items_data=[_cart_line(line) for line in cart.items],
            delivery_address=address,
            special_instructions=command.special_instructions,
        )
        order_repo.add(order)

        cart.clear()
        cart_repo.add(cart)

        logger.info(
            "order_assembled_from_cart",
            order_id=str(order.id),
            order_number=order.order_number,
            cart_id=str(cart.id),
            total_amount=order.total_amount,
        )
        return _summary(order)

    @handle(AssembleCustomOrder)
    def assemble_custom(self, command):
        address = build_delivery_address(command.delivery_address)
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items

        customer_name = (command.customer_name or "").strip()
        if not customer_name:
            customer_name = current_domain.repository_for(Customer).get(command.customer_id).display_name()
        restaurant_name = (command.restaurant_name or "").strip()
        if not restaurant_name:
            restaurant_name = _restaurant_name(current_domain.repository_for(Restaurant).get(command.restaurant_id))

        order_repo = current_domain.repository_for(Order)
        order = Order.place(
            order_number=next_order_number(order_repo.order_number_exists),
            customer_id=command.customer_id,
            customer_name=customer_name,
            restaurant_id=command.restaurant_id,
            restaurant_name=restaurant_name,
            items_data=items_data,
            delivery_address=address,
            special_instructions=command.special_instructions,
            estimated_delivery=command.estimated_delivery,
        )
        order_repo.add(order)

        logger.info("custom_order_assembled", order_id=str(order.id), order_number=order.order_number)
        return _summary(order)
