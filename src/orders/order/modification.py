"""Item revision on pending orders: commands and handler."""

import json

from protean import handle
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from orders.domain import orders
from orders.order.order import Order


@orders.command(part_of="Order")
class AddOrderItem:
    order_id = Identifier(required=True)
    item = Text(required=True)  # JSON: {item_id, name, price, quantity, ...}
    expected_revision = Integer()


@orders.command(part_of="Order")
class RemoveOrderItem:
    order_id = Identifier(required=True)
    line_id = Identifier(required=True)
    expected_revision = Integer()


@orders.command(part_of="Order")
class UpdateOrderItemQuantity:
    order_id = Identifier(required=True)
    line_id = Identifier(required=True)
    quantity = Integer(required=True)
    expected_revision = Integer()


@orders.command_handler(part_of=Order)
class ModifyOrderHandler:
    @handle(AddOrderItem)
    def add_item(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        item_data = json.loads(command.item) if isinstance(command.item, str) else command.item
        line = order.add_item(item_data, expected_revision=command.expected_revision)
        repo.add(order)
        return str(line.id)

    @handle(RemoveOrderItem)
    def remove_item(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.remove_item(command.line_id, expected_revision=command.expected_revision)
        repo.add(order)

    @handle(UpdateOrderItemQuantity)
    def update_item_quantity(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_item_quantity(
            command.line_id,
            command.quantity,
            expected_revision=command.expected_revision,
        )
        repo.add(order)
