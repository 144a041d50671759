"""
Middleware package for the Rental Listing API.
"""

from .request_logging import RequestLoggingMiddleware

__all__ = [
    "RequestLoggingMiddleware"
]
