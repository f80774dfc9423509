"""Serves the offline cache service worker script."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from core.offline_cache import render_service_worker

SCRIPT_HEADERS = {
    "Content-Type": "application/javascript; charset=utf-8",
    "Cache-Control": "no-cache",
    "Service-Worker-Allowed": "/",
}


def handler(event=None, context=None) -> dict[str, Any]:
    return {"statusCode": 200, "headers": dict(SCRIPT_HEADERS), "body": render_service_worker()}
