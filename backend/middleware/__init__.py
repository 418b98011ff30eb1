"""
Middleware package for the SunTime exposure API.
"""

from .logging_middleware import (
    RequestLoggingMiddleware,
    RequestStats,
    RequestStatsMiddleware,
)

__all__ = [
    "RequestLoggingMiddleware",
    "RequestStats",
    "RequestStatsMiddleware",
]
