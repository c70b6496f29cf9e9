"""
Demo configuration (env, settings, constants).

Responsibility: Centralize config loading, environment variables, and
constants shared by the client and the CLI. Values can be overridden in a
.env file at the project root.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# ViewEngine API. Local development: http://localhost:5072
API_BASE_URL: str = (
    os.getenv("VIEWENGINE_API_BASE_URL", "https://www.viewengine.io").strip()
    or "https://www.viewengine.io"
)

# Used when no key is given on the command line
VIEWENGINE_API_KEY: str = os.getenv("VIEWENGINE_API_KEY", "").strip()

# Server-side job timeout sent with every retrieval request (not user-configurable)
RETRIEVAL_TIMEOUT_SECONDS: int = 60

# Polling: fixed interval, hard attempt cap
POLL_MAX_ATTEMPTS: int = 60
POLL_INTERVAL_SECONDS: float = 2.0

# Transport timeout for a single HTTP call (seconds)
HTTP_TIMEOUT_SECONDS: float = 30.0

# CLI defaults
DEFAULT_URL: str = "https://example.com"
DEFAULT_MODE: str = "private"
PREVIEW_CHARS: int = 500

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
