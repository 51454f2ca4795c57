"""
Collaborator interfaces consumed by the order services.

Services receive a RequestExecutor (builds, signs and sends requests) and an
OrderCodec (turns response bytes into models) at construction, so either can
be swapped for a fake in tests.
"""

from typing import Any, Optional, Protocol

from ..models.orders import Notification, OrderSnapshot, TradeSnapshot
from ..models.requests import Permission


class RequestExecutor(Protocol):
    """Builds signed requests for authenticated endpoints and sends them"""

    def new_authenticated_request(self, permission: Permission, path: str) -> Any:
        """Build a signed request with an empty body"""
        ...

    def new_authenticated_request_with_body(
        self,
        permission: Permission,
        path: str,
        body: bytes,
    ) -> Any:
        """Build a signed request carrying a JSON body"""
        ...

    def execute(self, request: Any) -> bytes:
        """Send the request and return the raw response body"""
        ...


class OrderCodec(Protocol):
    """Decodes raw response bytes into order models"""

    def decode_order_snapshot(self, raw: bytes) -> Optional[OrderSnapshot]:
        """Return the snapshot, or None when the venue returned no data"""
        ...

    def decode_trade_snapshot(self, raw: bytes) -> TradeSnapshot:
        ...

    def decode_notification(self, raw: bytes) -> Notification:
        ...
