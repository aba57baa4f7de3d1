"""Payment gateway abstraction for checkout order creation."""

from .base import GatewayOrderResult, OrderGateway
from .factory import get_order_gateway

__all__ = ["GatewayOrderResult", "OrderGateway", "get_order_gateway"]
