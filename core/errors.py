"""Exceptions raised by the service adapters and handlers."""

from __future__ import annotations

from typing import Any


class HandlerError(Exception):
    """An error that maps directly onto an HTTP response."""

    def __init__(self, status: int, payload: dict[str, Any]) -> None:
        super().__init__(str(payload))
        self.status = status
        self.payload = payload


class UpstreamError(Exception):
    """A non-success response from the Supabase auth or REST API."""

    def __init__(self, status: int, detail: Any) -> None:
        super().__init__(f"Upstream request failed with status {status}: {detail}")
        self.status = status
        self.detail = detail


class InsightError(Exception):
    """A non-success response from the generative-language API."""

    def __init__(self, status: int, detail: str) -> None:
        super().__init__(detail)
        self.status = status
        self.detail = detail
