"""
Business Logic Layer Module.

The middle layer between the API dispatcher and the record store: payload
validation, authentication of the order path, record construction.
"""

from storefront.logic.order_service import OrderService
from storefront.logic.product_service import ProductService

__all__ = [
    "OrderService",
    "ProductService",
]
