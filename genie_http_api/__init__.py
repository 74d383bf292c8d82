"""Synchronous HTTP request/reply API in front of an asynchronous message router."""

__version__ = "1.0.0"
