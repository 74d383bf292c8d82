"""
Exception definitions.
Owns: Application-specific exception classes and their response bodies.

Response bodies follow the message API contract: ``{"error": ...}``,
plus ``"id"`` whenever a correlation token was minted for the request.
"""

from typing import Any


class AppException(Exception):
    error_code: str = "INTERNAL_ERROR"
    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, **self.details}


class CorrelatedException(AppException):
    """An error tied to a minted correlation token; its body carries the id."""

    default_message: str = ""

    def __init__(self, token: str, message: str | None = None):
        self.token = token
        super().__init__(message or self.default_message)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.token, "error": self.message}


class MissingInputException(CorrelatedException):
    """Raised when an admission request carries no input. Answered with 200."""
    error_code = "MISSING_INPUT"
    status_code = 200
    default_message = "No input attribute found in request."


class InvalidMessageException(CorrelatedException):
    """Raised when a request cannot be turned into an inbound message. Answered with 200."""
    error_code = "INVALID_MESSAGE"
    status_code = 200
    default_message = "Invalid message in request."


class TimeoutExpiredException(CorrelatedException):
    """Built when the brain did not reply in time. Answered with 200."""
    error_code = "TIMEOUT_EXPIRED"
    status_code = 200
    default_message = "Timeout contacting brain."


class RouterDispatchException(CorrelatedException):
    """Raised when handing a message to the router fails synchronously."""
    error_code = "ROUTER_DISPATCH_FAILED"
    status_code = 200
    default_message = "Failed to contact brain."


class InvalidCredentialException(AppException):
    error_code = "INVALID_CREDENTIAL"
    status_code = 401

    def __init__(self, message: str = "Invalid accessToken"):
        super().__init__(message)


class UnknownCorrelationException(AppException):
    """Raised to the router when a reply matches no open request."""
    error_code = "UNKNOWN_CORRELATION"
    status_code = 404

    def __init__(self, token: str | None):
        self.token = token
        super().__init__("Uuid not found in list of open requests.")


class DuplicateTokenException(AppException):
    error_code = "DUPLICATE_TOKEN"
    status_code = 500

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Correlation token {token} is already pending")
