"""
JsonCodec - decodes raw order endpoint responses into typed models.

The venue answers with JSON arrays; this codec parses the bytes and
delegates to the from_raw() constructors in orders.py. Parsing failures
and shape mismatches both surface as DecodeError.
"""

from typing import Any, Optional
import json
import logging

from .errors import DecodeError
from .orders import Notification, OrderSnapshot, TradeSnapshot

logger = logging.getLogger(__name__)


class JsonCodec:
    """Decoder for order snapshots, trade snapshots and notifications."""

    @staticmethod
    def _parse(raw: bytes) -> Any:
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"Failed to parse JSON response: {e}") from e

    def decode_order_snapshot(self, raw: bytes) -> Optional[OrderSnapshot]:
        """
        Decode an order snapshot.

        Returns:
            OrderSnapshot, or None when the venue returned no data
        """
        snapshot = OrderSnapshot.from_raw(self._parse(raw))
        logger.debug(f"Decoded order snapshot: {len(snapshot) if snapshot else 0} orders")
        return snapshot

    def decode_trade_snapshot(self, raw: bytes) -> TradeSnapshot:
        snapshot = TradeSnapshot.from_raw(self._parse(raw))
        logger.debug(f"Decoded trade snapshot: {len(snapshot)} trades")
        return snapshot

    def decode_notification(self, raw: bytes) -> Notification:
        notification = Notification.from_raw(self._parse(raw))
        logger.debug(f"Decoded notification: {notification!r}")
        return notification
