"""AWS Lambda handler for API Gateway (REST and HTTP API) proxy events.

Deploy with `api.index.handler` as the function handler; `app` is the same
FastAPI application for local ASGI servers.
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from macro_tracker.api.asgi import app, handler  # noqa: E402

__all__ = ["app", "handler"]
