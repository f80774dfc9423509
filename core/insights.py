"""Sales insight generation backed by Google Gemini, with an offline mock."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod

from core.config import DEFAULT_GEMINI_MODEL, Settings
from core.errors import InsightError
from core.models import Insight, InsightMode, InsightRequest
from prompts.templates import MOCK_ANALYSIS, MOCK_DEFAULTS, SALES_ANALYSIS_PROMPT

logger = logging.getLogger(__name__)


def build_prompt(request: InsightRequest) -> str:
    """The caller's prompt when given, else the templated sales prompt."""
    if request.prompt:
        return request.prompt
    return SALES_ANALYSIS_PROMPT.substitute(
        sales_summary=request.sales_summary or "",
        name=request.name or "",
        category=request.category or "",
        description=request.description or "",
    )


def build_mock_analysis(request: InsightRequest) -> str:
    return MOCK_ANALYSIS.substitute(
        name=request.name or MOCK_DEFAULTS["name"],
        category=request.category or MOCK_DEFAULTS["category"],
        description=request.description or MOCK_DEFAULTS["description"],
        sales_summary=request.sales_summary or MOCK_DEFAULTS["sales_summary"],
    )


class InsightGenerator(ABC):
    """Turns an insight request into analysis text."""

    mode: InsightMode

    @abstractmethod
    def generate(self, request: InsightRequest) -> Insight:
        ...


class MockInsightGenerator(InsightGenerator):
    """Deterministic summary used when no API key is configured. Makes no calls."""

    mode = InsightMode.MOCK

    def generate(self, request: InsightRequest) -> Insight:
        logger.info("Gemini API key not set, returning mock analysis")
        return Insight(analysis=build_mock_analysis(request), mode=self.mode)


class GeminiInsightGenerator(InsightGenerator):
    """Sends the sales prompt to Gemini's generateContent."""

    mode = InsightMode.GEMINI

    def __init__(self, api_key: str, model: str = DEFAULT_GEMINI_MODEL, client=None) -> None:
        self.api_key = api_key
        self.model = model
        self._client = client

    def _get_client(self):
        if self._client is None:
            from google import genai
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate(self, request: InsightRequest) -> Insight:
        from google.genai import errors

        prompt = build_prompt(request)
        client = self._get_client()

        try:
            response = client.models.generate_content(model=self.model, contents=prompt)
        except errors.APIError as e:
            logger.error("Gemini request failed: %s %s", e.code, e.message)
            detail = json.dumps(e.details, default=str) if e.details else str(e)
            raise InsightError(e.code or 502, detail) from e

        text = self._first_candidate_text(response)
        logger.info("Gemini analysis: %d prompt chars -> %d chars", len(prompt), len(text))
        return Insight(analysis=text, mode=self.mode)

    @staticmethod
    def _first_candidate_text(response) -> str:
        candidates = getattr(response, "candidates", None) or []
        if candidates:
            content = getattr(candidates[0], "content", None)
            parts = getattr(content, "parts", None) or []
            if parts and getattr(parts[0], "text", None):
                return parts[0].text
        return response.model_dump_json(exclude_none=True)


def get_generator(settings: Settings) -> InsightGenerator:
    """Pick the live generator only when a key is configured."""
    if not settings.gemini_configured:
        return MockInsightGenerator()
    return GeminiInsightGenerator(api_key=settings.gemini_api_key, model=settings.gemini_model)
