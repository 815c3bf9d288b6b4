"""Shopkeeper's order board with optimistic status changes."""

import copy
from dataclasses import dataclass

import structlog

from shared.order_lifecycle import OrderStatus, check_transition, next_status
from storefront.optimistic import optimistic

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class BoardAction:
    name: str
    target: str


class OrderBoard:
    def __init__(self, api, shop_id):
        self.api = api
        self.shop_id = shop_id
        self.orders = []

    async def refresh(self, *, signal=None):
        data = await self.api.orders.by_shop(self.shop_id, signal=signal)
        self.orders = copy.deepcopy(data["orders"])
        return self.orders

    def find(self, order_id):
        for order in self.orders:
            if str(order["id"]) == str(order_id):
                return order
        raise KeyError(order_id)

    def actions(self, order_id):
        """Actions offered for an order: advance to the next status, and cancel while pending."""
        status = self.find(order_id)["status"]
        offered = []
        successor = next_status(status)
        if successor is not None:
            offered.append(BoardAction("advance", successor.value))
        if status == OrderStatus.PENDING.value:
            offered.append(BoardAction("cancel", OrderStatus.CANCELLED.value))
        return offered

    async def advance(self, order_id, *, signal=None):
        successor = next_status(self.find(order_id)["status"])
        if successor is None:
            raise ValueError(f"Order {order_id} cannot be advanced")
        return await self._change_status(order_id, successor.value, signal)

    async def cancel(self, order_id, *, signal=None):
        return await self._change_status(order_id, OrderStatus.CANCELLED.value, signal)

    async def _change_status(self, order_id, target, signal):
        order = self.find(order_id)
        decision = check_transition(order["status"], target)
        if not decision:
            raise ValueError(decision.message)

        def restore(saved):
            self.orders = saved
            logger.info("order_status_rolled_back", order_id=order_id, target=target)

        data = await optimistic(
            snapshot=lambda: copy.deepcopy(self.orders),
            apply=lambda: order.update(status=target),
            commit=lambda: self.api.orders.update_status(order_id, target, signal=signal),
            restore=restore,
        )

        updated = data.get("order")
        if updated:
            self.orders = [updated if str(o["id"]) == str(order_id) else o for o in self.orders]
        return self.find(order_id)
