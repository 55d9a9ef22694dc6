# orderflow/core/errors.py
"""
Domain exceptions.

Raised by services and the auth gate when a request cannot be served.
Each exception knows its HTTP status; the handlers registered in
`orderflow.main` turn them into `{"message": ..., **details}` responses.
"""

from typing import Any

from fastapi import status


class OrderflowError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error"

    def __init__(self, message: str | None = None, **details: Any):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        return {"message": self.message, **self.details}


class AuthenticationError(OrderflowError):
    """
    Missing or invalid credentials.

    401 when no token / bad login, 403 when a token was sent but
    could not be verified.
    """

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        **details: Any,
    ):
        super().__init__(message, **details)
        if status_code is not None:
            self.status_code = status_code


class AuthorizationError(OrderflowError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized"


class ValidationError(OrderflowError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFoundError(OrderflowError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InvalidTransitionError(OrderflowError):
    """Status change not allowed by the transition table."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, current_status: str, attempted_status: str):
        super().__init__(
            f"Cannot transition from {current_status} to {attempted_status}",
            current_status=current_status,
            attempted_status=attempted_status,
        )
        self.current_status = current_status
        self.attempted_status = attempted_status


class InsufficientStockError(OrderflowError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, item_id: int, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for item {item_id} "
            f"(have {available}, requested {requested})",
            item_id=item_id,
            requested=requested,
            available=available,
        )
        self.item_id = item_id
        self.requested = requested
        self.available = available


class InternalError(OrderflowError):
    """Unexpected failure; the message sent to clients stays generic."""
