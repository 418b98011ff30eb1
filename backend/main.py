"""
SunTime Safe Exposure API

Stateless HTTP surface over the safe exposure calculation engine. Every
request carries all of its inputs; nothing is stored.

ROUTERS:
- exposure_router.py - UV categories, skin types, safe time, exposure score
- vitamin_d_router.py - Vitamin D status, report rules, adjustment
- sessions_router.py - Session logs, daily score, user statistics
"""

import time
from datetime import datetime, timezone

import psutil
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from structured_logging import configure_logging, get_logger

# Request logging middleware
from middleware import (
    RequestLoggingMiddleware,
    RequestStats,
    RequestStatsMiddleware,
)

# =============================================================================
# IMPORT ROUTERS
# =============================================================================

# UV, Skin Type, Safe Time, Exposure Score
from routers.exposure_router import router as exposure_router

# Vitamin D Status & Reports
from routers.vitamin_d_router import router as vitamin_d_router

# Session Logs & Statistics
from routers.sessions_router import router as sessions_router

configure_logging()
logger = get_logger(__name__)

# =============================================================================
# APPLICATION SETUP
# =============================================================================

app = FastAPI(
    title="SunTime Safe Exposure API",
    description="Safe sun exposure estimation from UV index, Fitzpatrick skin type, environmental modifiers and vitamin D status.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=config.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add request logging middleware (logs all API calls)
app.add_middleware(RequestLoggingMiddleware, log_headers=config.DEBUG)

# Add request stats middleware (tracks request statistics)
request_stats = RequestStats()
app.add_middleware(RequestStatsMiddleware, stats=request_stats)

# =============================================================================
# REGISTER ROUTERS
# =============================================================================

app.include_router(exposure_router)
app.include_router(vitamin_d_router)
app.include_router(sessions_router)

# =============================================================================
# HEALTH CHECK ENDPOINTS
# =============================================================================

_process_started = time.time()


@app.get("/")
def read_root():
    return {
        "message": "SunTime Safe Exposure API v1.0",
        "status": "healthy",
        "docs": "/docs"
    }


@app.get("/health")
def health_check():
    """
    Basic health check endpoint.
    Returns process memory, uptime and the active configuration summary.
    """
    process = psutil.Process()
    uptime_seconds = time.time() - _process_started

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "memory": {
            "rss_mb": round(process.memory_info().rss / (1024 ** 2), 2),
        },
        "uptime": _format_uptime(uptime_seconds),
        "uptime_seconds": round(uptime_seconds),
        "config": config.get_config_summary(),
    }


@app.get("/stats")
def request_statistics():
    """Request statistics collected by RequestStatsMiddleware."""
    return request_stats.snapshot()


def _format_uptime(seconds: float) -> str:
    """Format uptime seconds to human readable string."""
    days, remainder = divmod(int(seconds), 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, secs = divmod(remainder, 60)

    if days > 0:
        return f"{days}d {hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    return f"{minutes}m {secs}s"


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting SunTime API", extra={"host": config.HOST, "port": config.PORT})
    uvicorn.run("main:app", host=config.HOST, port=config.PORT, reload=config.DEBUG)
