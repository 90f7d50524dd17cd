"""
AWS Lambda Handlers Module.

The handler layer of the storefront service: it parses API Gateway REST
events, routes them to the logic layer and shapes every outcome into an
API Gateway proxy response.
"""

# Re-export handler utilities for convenience
from storefront.handlers.utils.observability import logger, metrics, tracer

__all__ = [
    "logger",
    "tracer",
    "metrics",
]
