"""
Application Configuration

Loads configuration from environment variables with sensible defaults.
All tunable service settings should be defined here.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file if it exists (override=True means .env takes precedence over system env vars)
load_dotenv(override=True)

# =============================================================================
# BASE PATHS
# =============================================================================

# Base directory (where this config file is located)
BASE_DIR = Path(__file__).resolve().parent

# =============================================================================
# APPLICATION SETTINGS
# =============================================================================

DEBUG = os.getenv("DEBUG", "True").lower() in ("true", "1", "yes")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
SERVICE_NAME = os.getenv("SERVICE_NAME", "suntime-engine")

# =============================================================================
# CORS SETTINGS
# =============================================================================

# Comma-separated list of allowed origins, or "*" for all
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")
CORS_ALLOW_CREDENTIALS = os.getenv("CORS_ALLOW_CREDENTIALS", "True").lower() in ("true", "1", "yes")

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")
LOG_OUTPUT = os.getenv("LOG_OUTPUT", "stdout")
LOG_FILE = os.getenv("LOG_FILE", str(BASE_DIR / "logs" / "suntime.json.log"))

# =============================================================================
# EXPOSURE ENGINE POLICY
# =============================================================================

# Safe-time clamp bounds (reported only, the engine enforces [2, 90])
SAFE_TIME_MIN_MINUTES = 2
SAFE_TIME_MAX_MINUTES = 90

# One vitamin D report upload per rolling window
VITAMIN_D_REPORT_INTERVAL_DAYS = int(os.getenv("VITAMIN_D_REPORT_INTERVAL_DAYS", "30"))

# Ignore positive vitamin D boosts when UV is 7 or higher
HIGH_UV_VITAMIN_D_GUARD = os.getenv("HIGH_UV_VITAMIN_D_GUARD", "False").lower() in ("true", "1", "yes")


# =============================================================================
# HELPER FUNCTION
# =============================================================================

def get_config_summary():
    """Returns a summary of current configuration (for debugging)."""
    return {
        "debug": DEBUG,
        "environment": ENVIRONMENT,
        "host": HOST,
        "port": PORT,
        "log_level": LOG_LEVEL,
        "log_format": LOG_FORMAT,
        "safe_time_bounds": [SAFE_TIME_MIN_MINUTES, SAFE_TIME_MAX_MINUTES],
        "vitamin_d_report_interval_days": VITAMIN_D_REPORT_INTERVAL_DAYS,
        "high_uv_vitamin_d_guard": HIGH_UV_VITAMIN_D_GUARD,
    }
