"""
Domain-level exceptions raised while decoding venue responses, building
outbound payloads, or looking up orders.
"""


class DecodeError(ValueError):
    """Raised when a venue response has malformed JSON or an unexpected shape."""


class SerializationError(ValueError):
    """Raised when an outbound payload cannot be encoded to JSON."""


class OrderNotFoundError(LookupError):
    """
    Raised when a by-ID lookup finds no matching order in a successfully
    fetched snapshot.

    Attributes:
        order_id: The order ID that was searched for
    """

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")
