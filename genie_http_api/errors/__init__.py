from .exceptions import (
    AppException,
    CorrelatedException,
    DuplicateTokenException,
    InvalidCredentialException,
    InvalidMessageException,
    MissingInputException,
    RouterDispatchException,
    TimeoutExpiredException,
    UnknownCorrelationException,
)
from .handlers import register_exception_handlers

__all__ = [
    "AppException",
    "CorrelatedException",
    "DuplicateTokenException",
    "InvalidCredentialException",
    "InvalidMessageException",
    "MissingInputException",
    "RouterDispatchException",
    "TimeoutExpiredException",
    "UnknownCorrelationException",
    "register_exception_handlers",
]
