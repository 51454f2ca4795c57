"""
Domain Layer

This module contains the order, trade and notification models, the outbound
request models, and the codec that decodes venue responses.
"""

from .codec import JsonCodec
from .errors import DecodeError, OrderNotFoundError, SerializationError
from .orders import Notification, Order, OrderSnapshot, TradeExecution, TradeSnapshot
from .requests import (
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

__all__ = [
    "JsonCodec",
    "DecodeError",
    "OrderNotFoundError",
    "SerializationError",
    "Notification",
    "Order",
    "OrderSnapshot",
    "TradeExecution",
    "TradeSnapshot",
    "CancelOrderMultiRequest",
    "CancelOrderOp",
    "CancelOrdersOp",
    "NewOrderOp",
    "OrderCancelRequest",
    "OrderMultiOpsRequest",
    "OrderNewRequest",
    "OrderOp",
    "OrderUpdateRequest",
    "Permission",
    "UpdateOrderOp",
]
