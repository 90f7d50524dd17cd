"""
Service error taxonomy and error metrics.

Every expected failure mode of the API is raised as a subclass of
``BaseServiceError``. The dispatcher turns these into structured responses
using ``status_code`` and ``to_body``; anything that is not a service error
is treated as unexpected and reported as a 500.
"""

from enum import Enum
from typing import Any, Dict, Optional

from storefront.handlers.utils.observability import count, logger, tracer


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    VALIDATION = "VALIDATION"
    SECURITY = "SECURITY"
    ROUTING = "ROUTING"
    EXTERNAL_SERVICE = "EXTERNAL_SERVICE"
    INFRASTRUCTURE = "INFRASTRUCTURE"


class BaseServiceError(Exception):
    """Base exception class for service errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.INFRASTRUCTURE,
        details: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message if details is None else f"{message}: {details}")
        self.message = message
        self.category = category
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> Dict[str, Any]:
        """Render the error as the JSON body returned to the caller."""
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body

    def log_context(self) -> Dict[str, Any]:
        """Extra fields logged alongside the error."""
        return {}


class RequestValidationError(BaseServiceError):
    """Raised when the request payload is malformed or missing required fields."""

    status_code = 400

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message=message, category=ErrorCategory.VALIDATION, details=details)


class UnauthorizedError(BaseServiceError):
    """Raised when the caller's credential is missing or cannot be verified."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized", details: Optional[str] = None):
        super().__init__(message=message, category=ErrorCategory.SECURITY, details=details)


class RouteNotFoundError(BaseServiceError):
    """Raised when no operation matches the request method and path."""

    status_code = 404

    def __init__(self, method: str = "", path: str = ""):
        super().__init__(message="Not found", category=ErrorCategory.ROUTING)
        self.method = method
        self.path = path

    def log_context(self) -> Dict[str, Any]:
        return {"http_method": self.method, "path": self.path}


class ExternalServiceError(BaseServiceError):
    """Raised when a collaborator service call fails."""

    def __init__(self, service_name: str, details: Optional[str] = None):
        super().__init__(
            message="Internal server error",
            category=ErrorCategory.EXTERNAL_SERVICE,
            details=details,
        )
        self.service_name = service_name

    def log_context(self) -> Dict[str, Any]:
        return {"service_name": self.service_name}


@tracer.capture_method
def log_error_metrics(error: BaseServiceError) -> None:
    """Log and count a service error."""
    count("ErrorCount")
    count(f"Error{error.category.value.title().replace('_', '')}Count")

    tracer.put_annotation("error_category", error.category.value)
    tracer.put_annotation("error_status", error.status_code)

    log = logger.error if error.status_code >= 500 else logger.warning
    log(
        "Service error occurred",
        extra={
            "error_message": error.message,
            "error_details": error.details,
            "error_category": error.category.value,
            "status_code": error.status_code,
            **error.log_context(),
        },
    )
