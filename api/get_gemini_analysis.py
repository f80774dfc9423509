"""Serverless function: sales insights from Gemini, or a mock summary without a key."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from core.config import Settings, get_settings
from core.errors import InsightError
from core.http import JSON_HEADERS, json_response, method_of, parse_json_body
from core.insights import InsightGenerator, get_generator
from core.models import InsightRequest

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def handle(
    event: dict[str, Any],
    settings: Settings,
    generator: InsightGenerator | None = None,
) -> dict[str, Any]:
    if method_of(event) == "OPTIONS":
        return {"statusCode": 200, "headers": {**JSON_HEADERS, **CORS_HEADERS}, "body": ""}

    try:
        request = InsightRequest.from_payload(parse_json_body(event))
        generator = generator or get_generator(settings)
        insight = generator.generate(request)
    except InsightError as e:
        return json_response(e.status, {"error": e.detail}, headers=CORS_HEADERS)
    except Exception as e:
        logger.exception("get-gemini-analysis failed")
        return json_response(500, {"error": str(e)}, headers=CORS_HEADERS)

    return json_response(200, insight.to_dict(), headers=CORS_HEADERS)


def handler(event, context=None):
    """Serverless entrypoint."""
    return handle(event, get_settings())
