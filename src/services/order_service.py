"""
Order Services - Application Layer

These services translate order intents into authenticated requests against
the venue's order endpoints and decode the responses into typed models.

Key Responsibilities:
1. Query active and historical orders, and the trades of a single order
2. Submit, update and cancel individual orders
3. Build multi-op batches ([tag, payload] arrays) and cancel-multi filters

Architecture:
- RequestExecutor (clients layer) builds, signs and sends requests
- OrderCodec (models layer) decodes raw responses
- Services hold nothing but these two collaborators, so a single instance
  can be shared between threads

Every call is one request/response round trip. Errors from the executor
or codec propagate unchanged; nothing is retried.
"""

import logging
from typing import Iterable, Sequence

from ..models.errors import OrderNotFoundError
from ..models.orders import Notification, Order, OrderSnapshot, TradeSnapshot
from ..models.requests import (
    CancelOrderMultiRequest,
    CancelOrderOp,
    CancelOrdersOp,
    NewOrderOp,
    OrderCancelRequest,
    OrderMultiOpsRequest,
    OrderNewRequest,
    OrderOp,
    OrderUpdateRequest,
    Permission,
    UpdateOrderOp,
)
from ..utils.paths import join_path
from .protocols import OrderCodec, RequestExecutor

logger = logging.getLogger(__name__)


class _OrderEndpoint:
    """Shared plumbing: holds the collaborators and runs one round trip."""

    def __init__(self, executor: RequestExecutor, codec: OrderCodec):
        self._executor = executor
        self._codec = codec

    def _read(self, path: str) -> bytes:
        logger.debug(f"Requesting {path} (read)")
        request = self._executor.new_authenticated_request(Permission.READ, path)
        return self._executor.execute(request)

    def _write(self, path: str, body: bytes) -> bytes:
        logger.debug(f"Posting {len(body)} bytes to {path} (write)")
        request = self._executor.new_authenticated_request_with_body(Permission.WRITE, path, body)
        return self._executor.execute(request)


class OrderQueryService(_OrderEndpoint):
    """
    Read-only order queries.

    Usage:
        service = OrderQueryService(executor, codec)
        snapshot = service.list_active("tBTCUSD")
        order = service.get_historical_by_id(1234)
    """

    def list_active(self, symbol: str = "") -> OrderSnapshot:
        """
        Fetch active orders, optionally restricted to one symbol.

        Args:
            symbol: Trading pair; empty string means all symbols

        Returns:
            OrderSnapshot, empty if there are no active orders
        """
        return self._fetch_orders(join_path("orders", symbol))

    def list_historical(self, symbol: str = "") -> OrderSnapshot:
        """
        Fetch past orders, optionally restricted to one symbol.

        Args:
            symbol: Trading pair; empty string means all symbols

        Returns:
            OrderSnapshot, empty if there are no past orders
        """
        return self._fetch_orders(join_path("orders", symbol, "hist"))

    def get_active_by_id(self, order_id: int) -> Order:
        """
        Look up an active order by ID.

        Raises:
            OrderNotFoundError: If no active order has this ID
        """
        return self._find(self.list_active(), order_id)

    def get_historical_by_id(self, order_id: int) -> Order:
        """
        Look up a past order by ID.

        Raises:
            OrderNotFoundError: If no past order has this ID
        """
        return self._find(self.list_historical(), order_id)

    def list_trades_for_order(self, symbol: str, order_id: int) -> TradeSnapshot:
        """
        Fetch the trades generated by an order.

        The venue addresses the order by the composite key "{symbol}:{id}".
        """
        key = f"{symbol}:{order_id}"
        raw = self._read(join_path("order", key, "trades"))
        return self._codec.decode_trade_snapshot(raw)

    def _fetch_orders(self, path: str) -> OrderSnapshot:
        raw = self._read(path)
        snapshot = self._codec.decode_order_snapshot(raw)
        if snapshot is None:
            return OrderSnapshot()
        return snapshot

    @staticmethod
    def _find(snapshot: OrderSnapshot, order_id: int) -> Order:
        order = snapshot.find(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order


class OrderCommandService(_OrderEndpoint):
    """
    Single-order writes: submit, update, cancel.

    Each call is attempted exactly once. A failed write is not retried
    because the venue may already have applied it.
    """

    def submit_new(self, order: OrderNewRequest) -> Notification:
        """Place a new order."""
        body = order.to_json()
        logger.info(f"Submitting {order.type} order on {order.symbol}")
        return self._codec.decode_notification(self._write(join_path("order", "submit"), body))

    def submit_update(self, order: OrderUpdateRequest) -> Notification:
        """Update an existing order."""
        body = order.to_json()
        logger.info(f"Updating order {order.id}")
        return self._codec.decode_notification(self._write(join_path("order", "update"), body))

    def submit_cancel(self, request: OrderCancelRequest) -> Notification:
        """
        Cancel a single order.

        Returns:
            The venue's notification; callers that only need confirmation
            may ignore it, a missing exception already means success.
        """
        body = request.to_json()
        logger.info(f"Cancelling order {request.id if request.id is not None else request.cid}")
        return self._codec.decode_notification(self._write(join_path("order", "cancel"), body))


class OrderBatchService(_OrderEndpoint):
    """
    Multi-order writes.

    The multi-op endpoint takes an ordered list of [tag, payload] pairs and
    executes them in that order. The helpers below each send a single-op
    batch; submit_ops() sends an arbitrary mix.
    """

    def cancel_multi(self, filters: CancelOrderMultiRequest) -> Notification:
        """
        Cancel orders by ID, group ID, client ID/date, or all at once.

        The filter is posted as-is (not wrapped in an ops array).
        """
        body = filters.to_json()
        logger.info(f"Submitting cancel-multi: {body.decode('utf-8')}")
        raw = self._write(join_path("order", "cancel", "multi"), body)
        return self._codec.decode_notification(raw)

    def cancel_many_by_id(self, order_ids: Sequence[int]) -> Notification:
        """Cancel several orders by ID in one "oc_multi" operation."""
        return self.submit_ops([CancelOrdersOp(order_ids=list(order_ids))])

    def cancel_one_by_id(self, order_id: int) -> Notification:
        """Cancel one order by ID via the multi-op endpoint ("oc")."""
        return self.submit_ops([CancelOrderOp(order_id=order_id)])

    def new_order_op(self, order: OrderNewRequest) -> Notification:
        """Place one order via the multi-op endpoint ("on")."""
        return self.submit_ops([NewOrderOp(order=order)])

    def update_order_op(self, order: OrderUpdateRequest) -> Notification:
        """Update one order via the multi-op endpoint ("ou")."""
        return self.submit_ops([UpdateOrderOp(order=order)])

    def submit_ops(self, ops: Iterable[OrderOp]) -> Notification:
        """
        Send a caller-ordered batch of operations as one multi-op request.

        Args:
            ops: Operations in the order the venue should execute them

        Raises:
            ValueError: If ops is empty
        """
        ops = list(ops)
        if not ops:
            raise ValueError("Multi-op request needs at least one operation")

        body = OrderMultiOpsRequest(ops=ops).to_json()
        tags = [op.tag for op in ops]
        logger.info(f"Submitting multi-op batch of {len(ops)} operations: {tags}")
        raw = self._write(join_path("order", "multi"), body)
        return self._codec.decode_notification(raw)


class OrderService(OrderQueryService, OrderCommandService, OrderBatchService):
    """
    Facade exposing every order operation over one executor/codec pair.

    Usage:
        client = RestClient(RestConfig.from_env())
        orders = OrderService(client, JsonCodec())

        for order in orders.list_active():
            print(order)

        orders.submit_ops([
            CancelOrderOp(order_id=1),
            NewOrderOp(order=OrderNewRequest(symbol="tBTCUSD", amount="0.01", price="30000")),
        ])
    """
