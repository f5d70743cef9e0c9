"""Order status updates and cancellation: commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from orders.domain import orders
from orders.order.order import Order


@orders.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    # Only used when moving to cancelled
    reason = String(max_length=500)
    cancelled_by = String(max_length=20)
    expected_revision = Integer()


@orders.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    reason = String(max_length=500)
    cancelled_by = String(required=True, max_length=20)
    expected_revision = Integer()


@orders.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_status(
            command.status,
            reason=command.reason,
            expected_revision=command.expected_revision,
            cancelled_by=command.cancelled_by,
        )
        repo.add(order)
        return order.status

    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.cancel(
            reason=command.reason,
            cancelled_by=command.cancelled_by,
            expected_revision=command.expected_revision,
        )
        repo.add(order)
        return order.status
