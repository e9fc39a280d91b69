"""
Utility functions and classes.
"""

from .exceptions import setup_exception_handlers
from .logging import setup_logging
from .middleware import AccessLogMiddleware, FixedWindowRateLimiter, RateLimitMiddleware

__all__ = [
    "setup_logging",
    "setup_exception_handlers",
    "AccessLogMiddleware",
    "FixedWindowRateLimiter",
    "RateLimitMiddleware",
]
