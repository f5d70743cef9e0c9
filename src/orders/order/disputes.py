"""Dispute handling: command and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from orders.domain import orders
from orders.order.order import Order


@orders.command(part_of="Order")
class HandleDispute:
    order_id = Identifier(required=True)
    action = String(required=True, max_length=20)  # resolve | escalate | close
    resolution = String(required=True, max_length=1000)
    admin_note = String(max_length=1000)
    resolved_by = Identifier()
    expected_revision = Integer()


@orders.command_handler(part_of=Order)
class DisputeHandler:
    @handle(HandleDispute)
    def handle_dispute(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.handle_dispute(
            action=command.action,
            resolution=command.resolution,
            admin_note=command.admin_note,
            resolved_by=command.resolved_by,
            expected_revision=command.expected_revision,
        )
        repo.add(order)
        return order.status
