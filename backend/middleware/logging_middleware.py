"""
Request Logging Middleware

Captures all API calls with structured JSON logging:
- Request/response logging with timing
- Request ID tracking and correlation ID propagation
- Request statistics (counts, status codes, latency percentiles)
"""

import time
from datetime import datetime, timezone
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from config import DEBUG
from structured_logging import (
    get_logger,
    LogContext,
    log_request,
    generate_request_id,
)

logger = get_logger("api.middleware")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log all incoming requests and outgoing responses
    using structured JSON logging.
    """

    # Paths to exclude from detailed logging (to reduce noise)
    EXCLUDE_PATHS = {"/health", "/favicon.ico", "/docs", "/redoc", "/openapi.json"}

    def __init__(self, app: ASGIApp, log_headers: bool = False):
        super().__init__(app)
        self.log_headers = log_headers

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        correlation_id = request.headers.get("X-Correlation-ID") or request_id

        method = request.method
        path = request.url.path
        query_params = str(request.query_params) if request.query_params else None
        client_ip = self._get_client_ip(request)

        if path in self.EXCLUDE_PATHS:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response

        with LogContext(
            request_id=request_id,
            correlation_id=correlation_id,
            client_ip=client_ip,
            http_method=method,
            http_path=path
        ):
            start_time = time.time()

            request_log_data = {
                "event": "request_started",
                "query_params": query_params,
                "user_agent": request.headers.get("user-agent"),
                "content_type": request.headers.get("content-type"),
            }
            if self.log_headers and DEBUG:
                request_log_data["headers"] = self._get_safe_headers(request)

            logger.info("Incoming request", extra=request_log_data)

            try:
                response = await call_next(request)
            except Exception as e:
                duration_ms = (time.time() - start_time) * 1000
                logger.error(
                    "Request failed with exception",
                    extra={
                        "event": "request_error",
                        "duration_ms": round(duration_ms, 2),
                        "error_type": type(e).__name__,
                        "error_message": str(e),
                    },
                    exc_info=True
                )
                raise

            duration_ms = (time.time() - start_time) * 1000
            log_request(
                method=method,
                path=path,
                status_code=response.status_code,
                duration_ms=duration_ms,
                request_id=request_id,
                client_ip=client_ip,
                query_params=query_params,
            )

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Correlation-ID"] = correlation_id
            response.headers["X-Process-Time"] = f"{duration_ms:.2f}ms"
            return response

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP, handling proxies."""
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()

        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip

        if request.client:
            return request.client.host

        return "unknown"

    def _get_safe_headers(self, request: Request) -> dict:
        """Get headers excluding sensitive ones."""
        sensitive_headers = {"authorization", "cookie", "x-api-key", "x-auth-token"}
        return {
            k: v for k, v in request.headers.items()
            if k.lower() not in sensitive_headers
        }


class RequestStats:
    """In-process request statistics shared between the middleware and /stats."""

    def __init__(self, max_response_times: int = 1000):
        self._max_response_times = max_response_times
        self.reset()

    def reset(self):
        self.total_requests = 0
        self.total_errors = 0
        self.requests_by_method = {}
        self.requests_by_status = {}
        self.requests_by_path = {}
        self.response_times = []  # last N, for percentiles
        self.total_response_time_ms = 0.0
        self.started_at = datetime.now(timezone.utc)

    def record(self, method: str, path: str, status: int, duration_ms: float):
        self.total_requests += 1
        self.requests_by_method[method] = self.requests_by_method.get(method, 0) + 1
        self.requests_by_status[status] = self.requests_by_status.get(status, 0) + 1
        if status >= 500:
            self.total_errors += 1

        # Track first path segment only
        segment = path.split("/")[1] if path != "/" else "root"
        self.requests_by_path[segment] = self.requests_by_path.get(segment, 0) + 1

        self.response_times.append(duration_ms)
        if len(self.response_times) > self._max_response_times:
            self.response_times.pop(0)
        self.total_response_time_ms += duration_ms

    def snapshot(self) -> dict:
        response_times = sorted(self.response_times)
        return {
            "total_requests": self.total_requests,
            "total_errors": self.total_errors,
            "error_rate_percent": round(self.total_errors / max(self.total_requests, 1) * 100, 2),
            "avg_response_time_ms": round(self.total_response_time_ms / max(self.total_requests, 1), 2),
            "p50_response_time_ms": round(_percentile(response_times, 50), 2),
            "p95_response_time_ms": round(_percentile(response_times, 95), 2),
            "p99_response_time_ms": round(_percentile(response_times, 99), 2),
            "requests_by_method": dict(self.requests_by_method),
            "requests_by_status": {str(k): v for k, v in self.requests_by_status.items()},
            "top_paths": dict(
                sorted(self.requests_by_path.items(), key=lambda x: x[1], reverse=True)[:10]
            ),
            "started_at": self.started_at.isoformat(),
            "uptime_seconds": (datetime.now(timezone.utc) - self.started_at).total_seconds(),
        }


def _percentile(data: list, percentile: int) -> float:
    """Linear-interpolated percentile of sorted data."""
    if not data:
        return 0.0
    index = (percentile / 100) * (len(data) - 1)
    lower = int(index)
    upper = min(lower + 1, len(data) - 1)
    weight = index - lower
    return data[lower] * (1 - weight) + data[upper] * weight


class RequestStatsMiddleware(BaseHTTPMiddleware):
    """Middleware that feeds every request into a RequestStats tracker."""

    def __init__(self, app: ASGIApp, stats: RequestStats):
        super().__init__(app)
        self.stats = stats

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        response = await call_next(request)
        self.stats.record(
            request.method,
            request.url.path,
            response.status_code,
            (time.time() - start_time) * 1000,
        )
        return response
