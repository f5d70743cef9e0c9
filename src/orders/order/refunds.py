"""Refunds on delivered orders: command and handler.

Only the order record changes; moving money is the payment provider's job.
"""

from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from orders.domain import orders
from orders.order.order import Order


@orders.command(part_of="Order")
class ProcessRefund:
    order_id = Identifier(required=True)
    refund_amount = Float(required=True)
    reason = String(required=True, max_length=500)
    admin_note = String(max_length=1000)
    refunded_by = Identifier()
    expected_revision = Integer()


@orders.command_handler(part_of=Order)
class RefundHandler:
    @handle(ProcessRefund)
    def process_refund(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.refund(
            refund_amount=command.refund_amount,
            reason=command.reason,
            admin_note=command.admin_note,
            refunded_by=command.refunded_by,
            expected_revision=command.expected_revision,
        )
        repo.add(order)
        return order.status
