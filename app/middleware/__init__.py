"""
Middleware package for authentication, rate limiting and request processing
"""
from .rate_limit import ClientRateLimiter
from .security import (
    AuthenticationMiddleware,
    RateLimitMiddleware,
    RecoverPanicMiddleware,
    RequestLoggingMiddleware,
)

__all__ = [
    "ClientRateLimiter",
    "AuthenticationMiddleware",
    "RateLimitMiddleware",
    "RecoverPanicMiddleware",
    "RequestLoggingMiddleware",
]
