"""Request body parsing shared by the create operations."""

import base64
import binascii
import json
from typing import Any, Optional

from pydantic import ValidationError

from storefront.handlers.utils.errors import RequestValidationError

INVALID_JSON = "Invalid JSON in request body"


def decode_body(raw_body: Optional[str], is_base64_encoded: bool = False) -> Optional[str]:
    """
    Return the request body as text, undoing API Gateway's base64 encoding.

    Raises:
        RequestValidationError: If the body is not valid base64 or not UTF-8
    """
    if raw_body is None or not is_base64_encoded:
        return raw_body
    try:
        return base64.b64decode(raw_body, validate=True).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError) as e:
        raise RequestValidationError(message=INVALID_JSON, details=str(e)) from e


def parse_json_body(raw_body: Optional[str], is_base64_encoded: bool = False) -> Any:
    """
    Parse a JSON request body.

    A missing or blank body parses as an empty object so required-field checks
    report what is missing. Malformed JSON is a request-shape error.
    """
    body = decode_body(raw_body, is_base64_encoded)
    if body is None or not body.strip():
        return {}
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise RequestValidationError(message=INVALID_JSON, details=str(e)) from e


def describe_validation_error(error: ValidationError, root: str = "body") -> str:
    """Flatten pydantic errors into a single readable line."""
    messages = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"])
        messages.append(f"{root}.{location}: {err['msg']}" if location else f"{root}: {err['msg']}")
    return "; ".join(messages)
