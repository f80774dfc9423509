"""Serverless entrypoint routing every function of this repository.

Paths may be given bare (``/create-seller``), under ``/api/`` or under
``/.netlify/functions/``; the last path segment picks the function.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from api import create_seller, get_gemini_analysis, manage_seller, service_worker
from core.config import get_settings
from core.http import json_response

settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


def _service_worker(event, settings):
    return service_worker.handler(event)


ROUTES = {
    "create-seller": create_seller.handle,
    "manage-seller": manage_seller.handle,
    "get-gemini-analysis": get_gemini_analysis.handle,
    "sw.js": _service_worker,
}


def route_name(path: str | None) -> str:
    return (path or "").split("?", 1)[0].rstrip("/").rsplit("/", 1)[-1]


def handler(request, context=None):
    """Dispatch a proxy event to the function named by its path."""
    name = route_name(request.get("path") or request.get("rawPath"))
    route = ROUTES.get(name)
    if route is None:
        logger.info("No function for path %r", request.get("path"))
        return json_response(404, {"error": "Not found"})
    return route(request, settings)
