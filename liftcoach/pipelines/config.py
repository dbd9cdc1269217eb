"""
Configuration constants for the Liftcoach FastAPI backend.

Centralizes project paths, API metadata and environment variable loading.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_PATH = PROJECT_ROOT / ".env"
load_dotenv(_ENV_PATH)

# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------
API_TITLE: str = "Liftcoach Analytics API"
API_VERSION: str = "1.0.0"

# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------
# Optional YAML file overriding the default analysis thresholds
THRESHOLDS_PATH: str = os.environ.get("LIFTCOACH_THRESHOLDS_PATH", "")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL: str = os.environ.get("LIFTCOACH_LOG_LEVEL", "INFO").upper()
LOG_FORMAT: str = "%(levelname)s | %(name)s | %(message)s"
