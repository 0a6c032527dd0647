"""
Shared configuration for the governance query service.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).resolve().parent.parent / ".env")

# Ledger node JSON-RPC
RPC_URL = os.getenv("GOVVIEW_RPC_URL", "http://127.0.0.1:8554")
RPC_USER = os.getenv("GOVVIEW_RPC_USER")
RPC_PASSWORD = os.getenv("GOVVIEW_RPC_PASSWORD")
RPC_TIMEOUT = float(os.getenv("GOVVIEW_RPC_TIMEOUT", "30"))

# API versions and the network segment accepted under /{version}/{network}
API_VERSIONS = ("v0.0", "v0")
NETWORK = os.getenv("GOVVIEW_NETWORK", "regtest")

# Pagination
DEFAULT_PAGE_SIZE = int(os.getenv("GOVVIEW_DEFAULT_PAGE_SIZE", "30"))
MAX_PAGE_SIZE = int(os.getenv("GOVVIEW_MAX_PAGE_SIZE", "200"))

RATE_LIMIT = os.getenv("GOVVIEW_RATE_LIMIT", "120/minute")
LOG_LEVEL = os.getenv("GOVVIEW_LOG_LEVEL", "INFO").upper()

ALLOWED_ORIGINS = [
    o.strip() for o in os.getenv("APP_ALLOW_ORIGINS", "").split(",") if o.strip()
]
