"""Errors raised by the order workflows.

Each error carries the HTTP status it maps to and a message that is safe to
show to callers. ``main`` registers the handlers that turn them into JSON.
"""

from typing import Any, Dict, List, Optional


class OrderServiceError(Exception):
    """Base error for the order service."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(OrderServiceError):
    """Malformed or missing input. Raised before anything is written."""

    status_code = 400
    message = "Missing required fields"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(OrderServiceError):
    """A referenced entity does not exist."""

    status_code = 404

    def __init__(self, target: str, identifier: Any = None):
        self.target = target
        self.identifier = identifier
        if identifier is None:
            message = f"{target.capitalize()} not found"
        else:
            message = f"{target.capitalize()} {identifier} not found"
        super().__init__(message)


class ForbiddenError(OrderServiceError):
    status_code = 403
    message = "Only admin can update orders"


class InternalError(OrderServiceError):
    """Storage or unexpected failure. ``detail`` holds the diagnostic text."""

    status_code = 500

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__("Internal server error")
