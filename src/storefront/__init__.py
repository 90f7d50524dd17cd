"""
Storefront API service.

Lambda backend for a small commerce API following a three-layer layout:

- handlers: API Gateway entry point, routing, response shaping
- logic: product and order operations, including the authenticated order workflow
- dal: record store protocol and its DynamoDB implementation
- models: pydantic input models and records
- security: bearer token extraction and verifiers
"""

__version__ = "1.0.0"
__description__ = "Products and orders API on AWS Lambda"

__all__ = [
    "__version__",
    "__description__",
]
