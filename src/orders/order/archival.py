"""Soft deletion of orders: command and handler."""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from orders.domain import orders
from orders.order.order import Order


@orders.command(part_of="Order")
class ArchiveOrder:
    order_id = Identifier(required=True)
    expected_revision = Integer()


@orders.command_handler(part_of=Order)
class ArchiveOrderHandler:
    @handle(ArchiveOrder)
    def archive_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.archive(expected_revision=command.expected_revision)
        repo.add(order)
