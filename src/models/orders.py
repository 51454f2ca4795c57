"""
Order Models: Type-safe representations of authenticated order responses

The venue encodes every record as a positional JSON array rather than a
keyed object. This module defines dataclasses for the three record kinds
returned by the order endpoints:
- Order / OrderSnapshot: active or historical orders
- TradeExecution / TradeSnapshot: fills generated by an order
- Notification: acknowledgment envelope returned by every write

Each dataclass exposes a from_raw() constructor that takes the already
parsed JSON array and raises DecodeError if the shape is wrong.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Iterator, List, Optional
import logging

from .errors import DecodeError

logger = logging.getLogger(__name__)


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise DecodeError(f"Invalid numeric value: {value!r}") from e


def _to_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Invalid integer value: {value!r}") from e


def _at(raw: list, index: int) -> Any:
    """Return raw[index] or None when the array is shorter."""
    return raw[index] if len(raw) > index else None


@dataclass
class Order:
    """
    A single order as reported by the venue.

    Orders are never mutated locally; a fresh instance is decoded from each
    response.

    Attributes:
        id: Venue-assigned order ID
        gid: Group order ID (None if not grouped)
        cid: Client order ID
        symbol: Trading pair (e.g., "tBTCUSD")
        mts_create: Creation timestamp in milliseconds
        mts_update: Last update timestamp in milliseconds
        amount: Remaining amount (negative for sells)
        amount_orig: Original amount
        type: Order type (e.g., "EXCHANGE LIMIT")
        status: Order status string (e.g., "ACTIVE", "EXECUTED @ 100.0(1.0)")
        price: Order price
        price_avg: Average execution price
    """
    id: int
    gid: Optional[int]
    cid: Optional[int]
    symbol: str
    mts_create: Optional[int]
    mts_update: Optional[int]
    amount: Optional[Decimal]
    amount_orig: Optional[Decimal]
    type: Optional[str]
    type_prev: Optional[str] = None
    mts_tif: Optional[int] = None
    flags: Optional[int] = None
    status: Optional[str] = None
    price: Optional[Decimal] = None
    price_avg: Optional[Decimal] = None
    price_trailing: Optional[Decimal] = None
    price_aux_limit: Optional[Decimal] = None
    notify: bool = False
    hidden: bool = False
    placed_id: Optional[int] = None
    routing: Optional[str] = None
    meta: Optional[dict] = None

    @classmethod
    def from_raw(cls, raw: list) -> "Order":
        """
        Create an Order from the venue's positional array.

        Args:
            raw: Parsed JSON array with at least 26 elements

        Returns:
            Order instance

        Raises:
            DecodeError: If the array is too short or a field has the wrong type
        """
        if not isinstance(raw, list) or len(raw) < 26:
            raise DecodeError(f"Data slice too short for order: {raw!r}")

        meta = _at(raw, 31)
        return cls(
            id=_to_int(raw[0]),
            gid=_to_int(raw[1]),
            cid=_to_int(raw[2]),
            symbol=raw[3],
            mts_create=_to_int(raw[4]),
            mts_update=_to_int(raw[5]),
            amount=_to_decimal(raw[6]),
            amount_orig=_to_decimal(raw[7]),
            type=raw[8],
            type_prev=raw[9],
            mts_tif=_to_int(raw[10]),
            flags=_to_int(raw[12]),
            status=raw[13],
            price=_to_decimal(raw[16]),
            price_avg=_to_decimal(raw[17]),
            price_trailing=_to_decimal(raw[18]),
            price_aux_limit=_to_decimal(raw[19]),
            notify=bool(raw[23]),
            hidden=bool(raw[24]),
            placed_id=_to_int(raw[25]),
            routing=_at(raw, 28),
            meta=meta if isinstance(meta, dict) else None,
        )

    @property
    def client_order_date(self) -> Optional[str]:
        """UTC creation date (YYYY-MM-DD), the date half of a client ID pair."""
        if self.mts_create is None:
            return None
        created = datetime.fromtimestamp(self.mts_create / 1000, tz=timezone.utc)
        return created.strftime("%Y-%m-%d")

    def __repr__(self) -> str:
        return (
            f"Order(id={self.id}, {self.symbol}, "
            f"amount={self.amount}, price={self.price}, status={self.status})"
        )


@dataclass
class OrderSnapshot:
    """
    All orders matching a query at a point in time.

    An empty snapshot (not None) is the canonical "no orders" result.
    """
    orders: List[Order] = field(default_factory=list)

    @classmethod
    def from_raw(cls, raw: list) -> Optional["OrderSnapshot"]:
        """
        Create an OrderSnapshot from a parsed JSON array.

        A list of arrays yields one order per element. A flat array is
        treated as a single order.

        Returns:
            OrderSnapshot, or None if the array is empty (no data)

        Raises:
            DecodeError: If the payload is not an array or an order is malformed
        """
        if not isinstance(raw, list):
            raise DecodeError(f"Expected order snapshot array, got {type(raw).__name__}")
        if len(raw) == 0:
            return None

        if isinstance(raw[0], list):
            return cls(orders=[Order.from_raw(item) for item in raw])
        return cls(orders=[Order.from_raw(raw)])

    def find(self, order_id: int) -> Optional[Order]:
        """Return the order with the given ID, or None."""
        for order in self.orders:
            if order.id == order_id:
                return order
        return None

    def __iter__(self) -> Iterator[Order]:
        return iter(self.orders)

    def __len__(self) -> int:
        return len(self.orders)


@dataclass
class TradeExecution:
    """
    A fill generated by an order.

    Attributes:
        id: Trade ID
        symbol: Trading pair
        mts_create: Execution timestamp in milliseconds
        order_id: ID of the order that generated the trade
        exec_amount: Executed amount (negative for sells)
        exec_price: Execution price
        maker: True if the fill was on the maker side
        fee: Fee charged (negative for charges)
        fee_currency: Currency of the fee
    """
    id: int
    symbol: str
    mts_create: Optional[int]
    order_id: int
    exec_amount: Optional[Decimal]
    exec_price: Optional[Decimal]
    order_type: Optional[str] = None
    order_price: Optional[Decimal] = None
    maker: bool = False
    fee: Optional[Decimal] = None
    fee_currency: Optional[str] = None
    cid: Optional[int] = None

    @classmethod
    def from_raw(cls, raw: list) -> "TradeExecution":
        """
        Create a TradeExecution from the venue's positional array.

        Raises:
            DecodeError: If the array has fewer than 11 elements
        """
        if not isinstance(raw, list) or len(raw) < 11:
            raise DecodeError(f"Data slice too short for trade execution: {raw!r}")

        return cls(
            id=_to_int(raw[0]),
            symbol=raw[1],
            mts_create=_to_int(raw[2]),
            order_id=_to_int(raw[3]),
            exec_amount=_to_decimal(raw[4]),
            exec_price=_to_decimal(raw[5]),
            order_type=raw[6],
            order_price=_to_decimal(raw[7]),
            maker=_to_int(raw[8]) == 1,
            fee=_to_decimal(raw[9]),
            fee_currency=raw[10],
            cid=_to_int(_at(raw, 11)),
        )


@dataclass
class TradeSnapshot:
    """Trades generated by a single order, oldest first as returned by the venue."""
    trades: List[TradeExecution] = field(default_factory=list)

    @classmethod
    def from_raw(cls, raw: list) -> "TradeSnapshot":
        """
        Create a TradeSnapshot from a parsed JSON array of trade arrays.

        An empty array yields an empty snapshot.
        """
        if not isinstance(raw, list):
            raise DecodeError(f"Expected trade snapshot array, got {type(raw).__name__}")
        return cls(trades=[TradeExecution.from_raw(item) for item in raw])

    def __iter__(self) -> Iterator[TradeExecution]:
        return iter(self.trades)

    def __len__(self) -> int:
        return len(self.trades)


# Notification types whose info payload is an order (or list of orders)
ORDER_NOTIFICATION_TYPES = frozenset({"on-req", "ou-req", "oc-req", "uca"})
MULTI_CANCEL_NOTIFICATION_TYPE = "oc_multi-req"
MULTI_OP_NOTIFICATION_TYPE = "ox_multi-req"


def _decode_notify_info(notification_type: str, info: Any) -> Any:
    if not isinstance(info, list) or len(info) == 0:
        return info

    if notification_type in ORDER_NOTIFICATION_TYPES:
        if isinstance(info[0], list):
            return OrderSnapshot.from_raw(info)
        return Order.from_raw(info)

    if notification_type == MULTI_CANCEL_NOTIFICATION_TYPE:
        return OrderSnapshot.from_raw(info)

    if notification_type == MULTI_OP_NOTIFICATION_TYPE:
        return [Notification.from_raw(item) for item in info]

    return info


@dataclass
class Notification:
    """
    Acknowledgment envelope returned by write operations.

    Attributes:
        mts: Server timestamp in milliseconds
        type: Request type being acknowledged (e.g., "on-req", "oc_multi-req")
        message_id: Message ID (usually None)
        notify_info: Decoded payload; an Order, OrderSnapshot, list of
                     nested Notifications (multi-op) or the raw JSON value
        code: Venue status code (usually None)
        status: "SUCCESS", "ERROR" or "FAILURE"; None when the venue omits it
        text: Human readable message, or None
    """
    mts: Optional[int]
    type: str
    message_id: Optional[int]
    notify_info: Any
    code: Optional[int]
    status: Optional[str]
    text: Optional[str]

    @classmethod
    def from_raw(cls, raw: list) -> "Notification":
        """
        Create a Notification from the venue's positional array.

        Raises:
            DecodeError: If the array has fewer than 8 elements or the
                         payload does not match the notification type
        """
        if not isinstance(raw, list) or len(raw) < 8:
            raise DecodeError(f"Data slice too short for notification: {raw!r}")

        notification_type = raw[1]
        return cls(
            mts=_to_int(raw[0]),
            type=notification_type,
            message_id=_to_int(raw[2]),
            notify_info=_decode_notify_info(notification_type, raw[4]),
            code=_to_int(raw[5]),
            status=raw[6],
            text=raw[7],
        )

    @property
    def is_success(self) -> bool:
        return self.status == "SUCCESS"

    def __repr__(self) -> str:
        return f"Notification({self.type}, status={self.status}, text={self.text!r})"
