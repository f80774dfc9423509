"""Helpers for serverless proxy events and responses."""

from __future__ import annotations

import base64
import json
from typing import Any

JSON_HEADERS = {"Content-Type": "application/json"}


def json_response(status: int, payload: Any, headers: dict[str, str] | None = None) -> dict[str, Any]:
    return {
        "statusCode": status,
        "headers": {**JSON_HEADERS, **(headers or {})},
        "body": json.dumps(payload, ensure_ascii=False),
    }


def method_of(event: dict[str, Any]) -> str:
    return str(event.get("httpMethod") or "GET").upper()


def query_param(event: dict[str, Any], name: str) -> str | None:
    params = event.get("queryStringParameters") or {}
    value = params.get(name)
    return value or None


def parse_json_body(event: dict[str, Any]) -> dict[str, Any]:
    """Decode the JSON body; an absent body is an empty object.

    Raises ``ValueError`` for malformed JSON or a non-object payload.
    """
    raw = event.get("body")
    if not raw:
        return {}
    if event.get("isBase64Encoded"):
        raw = base64.b64decode(raw)
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data
