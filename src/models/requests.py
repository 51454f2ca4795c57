"""
Outbound request models for the order endpoints.

Covers single-order requests (new, update, cancel), the cancel-multi filter,
and the tagged operations carried by the multi-op endpoint. The multi-op
wire format is positional: each operation is a 2-element array
[tag, payload], and the venue executes them in array order.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Tuple, Union
import json
import logging

from .errors import SerializationError

logger = logging.getLogger(__name__)

Number = Union[Decimal, int, float, str]
ClientOrderDate = Union[str, date]

# Order flag bits
FLAG_HIDDEN = 64
FLAG_CLOSE = 512
FLAG_REDUCE_ONLY = 1024
FLAG_POST_ONLY = 4096
FLAG_OCO = 16384


class Permission(Enum):
    """Permission level an authenticated endpoint requires."""
    READ = "r"
    WRITE = "w"


def format_number(value: Number) -> str:
    """
    Format a numeric value as a plain decimal string (no exponent, no
    trailing zeros), the form the venue expects for amounts and prices.

    Raises:
        SerializationError: If the value is not a finite number
    """
    if isinstance(value, float):
        value = repr(value)
    try:
        number = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise SerializationError(f"Invalid numeric value: {value!r}") from e
    if not number.is_finite():
        raise SerializationError(f"Non-finite numeric value: {value!r}")

    normalized = format(number.normalize(), "f")
    if "." in normalized:
        normalized = normalized.rstrip("0").rstrip(".")
    return normalized or "0"


def _format_date(value: ClientOrderDate) -> str:
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    return value


def encode_json(payload: Any) -> bytes:
    """
    Encode an outbound payload as compact JSON bytes.

    Raises:
        SerializationError: If the payload contains values JSON cannot encode
    """
    try:
        return json.dumps(payload, separators=(",", ":"), allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Failed to encode payload: {e}") from e


def _drop_unset(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


@dataclass
class OrderNewRequest:
    """
    Request to place a new order.

    Attributes:
        symbol: Trading pair (e.g., "tBTCUSD")
        amount: Order amount, positive to buy and negative to sell
        type: Order type (e.g., "EXCHANGE LIMIT", "LIMIT", "MARKET")
        price: Limit price (omitted for market orders)
        gid: Optional group ID
        cid: Optional client order ID
        affiliate_code: Carried in meta.aff_code
    """
    symbol: str
    amount: Number
    type: str = "EXCHANGE LIMIT"
    price: Optional[Number] = None
    gid: Optional[int] = None
    cid: Optional[int] = None
    price_trailing: Optional[Number] = None
    price_aux_limit: Optional[Number] = None
    price_oco_stop: Optional[Number] = None
    hidden: bool = False
    post_only: bool = False
    close: bool = False
    reduce_only: bool = False
    oco_order: bool = False
    time_in_force: Optional[str] = None
    leverage: Optional[int] = None
    affiliate_code: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def flags(self) -> int:
        flags = 0
        if self.hidden:
            flags |= FLAG_HIDDEN
        if self.close:
            flags |= FLAG_CLOSE
        if self.reduce_only:
            flags |= FLAG_REDUCE_ONLY
        if self.post_only:
            flags |= FLAG_POST_ONLY
        if self.oco_order:
            flags |= FLAG_OCO
        return flags

    def enriched_payload(self) -> Dict[str, Any]:
        """
        Build the wire payload: the order's own fields plus the metadata
        (affiliate code) the venue expects alongside them.
        """
        meta = dict(self.meta)
        if self.affiliate_code:
            meta["aff_code"] = self.affiliate_code

        return _drop_unset({
            "gid": self.gid,
            "cid": self.cid,
            "type": self.type,
            "symbol": self.symbol,
            "amount": format_number(self.amount),
            "price": format_number(self.price) if self.price is not None else None,
            "price_trailing": format_number(self.price_trailing) if self.price_trailing is not None else None,
            "price_aux_limit": format_number(self.price_aux_limit) if self.price_aux_limit is not None else None,
            "price_oco_stop": format_number(self.price_oco_stop) if self.price_oco_stop is not None else None,
            "flags": self.flags or None,
            "tif": self.time_in_force,
            "lev": self.leverage,
            "meta": meta or None,
        })

    def to_json(self) -> bytes:
        return encode_json(self.enriched_payload())


@dataclass
class OrderUpdateRequest:
    """
    Request to modify an existing order identified by its venue ID.

    Only the fields that are set are sent; everything else is left unchanged
    by the venue.
    """
    id: int
    gid: Optional[int] = None
    cid: Optional[int] = None
    cid_date: Optional[ClientOrderDate] = None
    amount: Optional[Number] = None
    price: Optional[Number] = None
    price_trailing: Optional[Number] = None
    price_aux_limit: Optional[Number] = None
    delta: Optional[Number] = None
    hidden: bool = False
    post_only: bool = False
    time_in_force: Optional[str] = None
    leverage: Optional[int] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def flags(self) -> int:
        flags = 0
        if self.hidden:
            flags |= FLAG_HIDDEN
        if self.post_only:
            flags |= FLAG_POST_ONLY
        return flags

    def enriched_payload(self) -> Dict[str, Any]:
        """Build the wire payload with unset fields omitted."""
        def fmt(value: Optional[Number]) -> Optional[str]:
            return format_number(value) if value is not None else None

        return _drop_unset({
            "id": self.id,
            "gid": self.gid,
            "cid": self.cid,
            "cid_date": _format_date(self.cid_date) if self.cid_date is not None else None,
            "amount": fmt(self.amount),
            "price": fmt(self.price),
            "price_trailing": fmt(self.price_trailing),
            "price_aux_limit": fmt(self.price_aux_limit),
            "delta": fmt(self.delta),
            "flags": self.flags or None,
            "tif": self.time_in_force,
            "lev": self.leverage,
            "meta": dict(self.meta) or None,
        })

    def to_json(self) -> bytes:
        return encode_json(self.enriched_payload())


@dataclass
class OrderCancelRequest:
    """
    Request to cancel a single order, either by venue ID or by the
    (client order ID, client order date) pair.
    """
    id: Optional[int] = None
    cid: Optional[int] = None
    cid_date: Optional[ClientOrderDate] = None

    def __post_init__(self):
        if self.id is None and (self.cid is None or self.cid_date is None):
            raise ValueError("OrderCancelRequest needs either id or both cid and cid_date")

    def to_payload(self) -> Dict[str, Any]:
        if self.id is not None:
            return {"id": self.id}
        return {"cid": self.cid, "cid_date": _format_date(self.cid_date)}

    def to_json(self) -> bytes:
        return encode_json(self.to_payload())


@dataclass
class CancelOrderMultiRequest:
    """
    Filter for the cancel-multi endpoint.

    Fields are alternatives in practice, but nothing prevents combining
    them; the venue decides precedence. Unset (None) and empty fields are
    omitted from the payload. all_orders is tri-state: None omits the key,
    True sends 1 and False sends an explicit 0.

    Attributes:
        order_ids: Venue order IDs to cancel
        group_order_ids: Group IDs whose orders should be cancelled
        client_order_ids: (cid, cid_date) pairs
        all_orders: Cancel every open order
    """
    order_ids: Optional[List[int]] = None
    group_order_ids: Optional[List[int]] = None
    client_order_ids: Optional[List[Tuple[int, ClientOrderDate]]] = None
    all_orders: Optional[bool] = None

    def has_filters(self) -> bool:
        """True if any of the ID-based filters is populated."""
        return bool(self.order_ids or self.group_order_ids or self.client_order_ids)

    def to_payload(self) -> Dict[str, Any]:
        if self.all_orders and self.has_filters():
            logger.warning(
                "Cancel-multi filter combines all=1 with ID filters; "
                "sending unchanged, venue decides precedence"
            )

        payload: Dict[str, Any] = {}
        if self.order_ids:
            payload["id"] = list(self.order_ids)
        if self.group_order_ids:
            payload["gid"] = list(self.group_order_ids)
        if self.client_order_ids:
            payload["cid"] = [[cid, _format_date(cid_date)] for cid, cid_date in self.client_order_ids]
        if self.all_orders is not None:
            payload["all"] = 1 if self.all_orders else 0
        return payload

    def to_json(self) -> bytes:
        return encode_json(self.to_payload())


class OrderOp:
    """
    Base class for operations carried by the multi-op endpoint.

    Subclasses set tag and implement payload(); to_wire() produces the
    positional [tag, payload] pair.
    """
    tag: ClassVar[str]

    def payload(self) -> Any:
        raise NotImplementedError

    def to_wire(self) -> List[Any]:
        return [self.tag, self.payload()]


@dataclass
class NewOrderOp(OrderOp):
    """Place a new order ("on")."""
    tag: ClassVar[str] = "on"
    order: OrderNewRequest

    def payload(self) -> Dict[str, Any]:
        return self.order.enriched_payload()


@dataclass
class UpdateOrderOp(OrderOp):
    """Update an existing order ("ou")."""
    tag: ClassVar[str] = "ou"
    order: OrderUpdateRequest

    def payload(self) -> Dict[str, Any]:
        return self.order.enriched_payload()


@dataclass
class CancelOrderOp(OrderOp):
    """Cancel one order by ID ("oc")."""
    tag: ClassVar[str] = "oc"
    order_id: int

    def payload(self) -> Dict[str, int]:
        return {"id": self.order_id}


@dataclass
class CancelOrdersOp(OrderOp):
    """Cancel several orders by ID ("oc_multi")."""
    tag: ClassVar[str] = "oc_multi"
    order_ids: List[int]

    def payload(self) -> Dict[str, List[int]]:
        return {"id": list(self.order_ids)}


@dataclass
class OrderMultiOpsRequest:
    """
    Envelope for the multi-op endpoint: {"ops": [[tag, payload], ...]}.

    Operation order is preserved exactly as given.
    """
    ops: Sequence[OrderOp]

    def to_payload(self) -> Dict[str, List[List[Any]]]:
        return {"ops": [op.to_wire() for op in self.ops]}

    def to_json(self) -> bytes:
        return encode_json(self.to_payload())
