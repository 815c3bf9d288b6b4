"""Order status changes — command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.account.user import User
from marketplace.domain import logger, marketplace
from marketplace.ordering.order import Order
from marketplace.utils.repository import load


@marketplace.command(part_of="Order")
class UpdateOrderStatus:
    actor_id = Identifier(required=True)
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@marketplace.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        actor = load(User, command.actor_id, "User")
        order = load(Order, command.order_id, "Order")

        previous = order.status
        order.change_status(actor, command.status)
        current_domain.repository_for(Order).add(order)

        logger.info("order_status_changed", order_id=str(order.id), previous=previous, status=order.status)
