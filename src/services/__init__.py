"""
Application layer services.

This module contains the order services that coordinate between the
infrastructure layer (request executor) and the domain layer (models).
"""

from .order_service import OrderBatchService, OrderCommandService, OrderQueryService, OrderService

__all__ = ["OrderService", "OrderQueryService", "OrderCommandService", "OrderBatchService"]
