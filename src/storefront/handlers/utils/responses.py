"""
API Gateway response builders.

All responses share the same CORS/content-type header set; the preflight
response adds the allowed methods and headers lists.
"""

import json
from typing import Any, Dict, Optional

from storefront.handlers.utils.errors import BaseServiceError

BASE_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Credentials": "true",
    "Content-Type": "application/json",
}

PREFLIGHT_HEADERS: Dict[str, str] = {
    **BASE_HEADERS,
    "Access-Control-Allow-Methods": "GET,POST,PUT,DELETE,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token",
}


def create_api_response(
    status_code: int,
    body: Any,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Create a standardized API Gateway proxy response."""
    return {
        "statusCode": status_code,
        "headers": dict(headers or BASE_HEADERS),
        "body": body if isinstance(body, str) else json.dumps(body),
    }


def create_error_response(error: BaseServiceError) -> Dict[str, Any]:
    """Create the response for a service error."""
    return create_api_response(status_code=error.status_code, body=error.to_body())


def create_preflight_response() -> Dict[str, Any]:
    """Create the CORS preflight response."""
    return create_api_response(status_code=200, body={}, headers=PREFLIGHT_HEADERS)


def create_internal_error_response(error: Exception) -> Dict[str, Any]:
    """Create the 500 response for an unexpected failure."""
    return create_api_response(
        status_code=500,
        body={"error": "Internal server error", "details": str(error)},
    )
