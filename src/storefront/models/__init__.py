"""
Service Models Package

Pydantic models for request payloads (input) and the records the service
persists and returns (products, orders).
"""

from .input import CreateProductRequest, LineItemInput
from .order import LineItem, Order, OrderStatus
from .product import Product

__all__ = [
    # Input models
    "CreateProductRequest",
    "LineItemInput",

    # Records
    "LineItem",
    "Order",
    "OrderStatus",
    "Product",
]
