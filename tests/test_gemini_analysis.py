import json
from pathlib import Path
import sys
from types import SimpleNamespace

import pytest
from google.genai import errors, types

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from api import get_gemini_analysis
from core.config import Settings
from core.errors import InsightError
from core.insights import (
    GeminiInsightGenerator,
    MockInsightGenerator,
    build_mock_analysis,
    build_prompt,
    get_generator,
)
from core.models import InsightRequest
from fakes import RecordingGenerator

PRODUCT = {
    "name": "Empanada",
    "category": "Comida",
    "description": "Horneada",
    "salesSummary": "12 unidades",
}


class StubModels:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def generate_content(self, model, contents):
        self.calls.append((model, contents))
        if self.error is not None:
            raise self.error
        return self.response


def stub_client(**kwargs):
    return SimpleNamespace(models=StubModels(**kwargs))


def text_response(text):
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(parts=[types.Part(text=text)]))]
    )


def post(body, settings=Settings(), generator=None):
    event = {"httpMethod": "POST", "body": json.dumps(body)}
    return get_gemini_analysis.handle(event, settings, generator)


def test_mock_analysis_uses_defaults():
    analysis = build_mock_analysis(InsightRequest())
    assert analysis == (
        'Resumen (MOCK) para "Producto" (N/D):\n'
        "- Descripción no provista\n"
        "- Ventas del día: N/D\n"
        "Sugerencia: Optimiza títulos e imágenes para mejorar conversión."
    )


def test_prompt_prefers_caller_prompt():
    assert build_prompt(InsightRequest(prompt="Resume esto", name="Empanada")) == "Resume esto"


def test_templated_prompt_includes_product_fields():
    prompt = build_prompt(InsightRequest.from_payload(PRODUCT))
    assert prompt == (
        "Analiza estas ventas y redacta insights:\n"
        "12 unidades\n"
        "Producto: Empanada | Categoría: Comida | Desc: Horneada"
    )


def test_generator_choice_follows_api_key():
    assert isinstance(get_generator(Settings()), MockInsightGenerator)
    assert isinstance(get_generator(Settings(gemini_api_key="key")), GeminiInsightGenerator)


def test_no_api_key_returns_mock(monkeypatch):
    def no_network(*args, **kwargs):
        raise AssertionError("mock mode must not call Gemini")

    monkeypatch.setattr(GeminiInsightGenerator, "generate", no_network)
    response = post(PRODUCT)

    assert response["statusCode"] == 200
    body = json.loads(response["body"])
    assert body["mode"] == "mock"
    assert 'Resumen (MOCK) para "Empanada" (Comida)' in body["analysis"]
    assert response["headers"]["Access-Control-Allow-Origin"] == "*"


@pytest.mark.parametrize("settings", [Settings(), Settings(gemini_api_key="key")])
def test_preflight_is_always_empty_ok(settings):
    response = get_gemini_analysis.handle({"httpMethod": "OPTIONS"}, settings)
    assert response["statusCode"] == 200
    assert response["body"] == ""
    assert response["headers"]["Access-Control-Allow-Methods"] == "GET,POST,OPTIONS"


def test_live_generator_returns_gemini_mode():
    generator = RecordingGenerator()
    response = post(PRODUCT, settings=Settings(gemini_api_key="key"), generator=generator)
    assert json.loads(response["body"]) == {"analysis": "Las ventas crecieron.", "mode": "gemini"}
    assert generator.requests[0].sales_summary == "12 unidades"


def test_gemini_generator_extracts_first_candidate_text():
    client = stub_client(response=text_response("Subieron las ventas"))
    generator = GeminiInsightGenerator(api_key="key", model="gemini-test", client=client)

    insight = generator.generate(InsightRequest(prompt="Resume"))

    assert insight.analysis == "Subieron las ventas"
    assert insight.mode.value == "gemini"
    assert client.models.calls == [("gemini-test", "Resume")]


def test_gemini_generator_falls_back_to_response_dump():
    client = stub_client(response=types.GenerateContentResponse(candidates=[]))
    insight = GeminiInsightGenerator(api_key="key", client=client).generate(InsightRequest())
    assert insight.analysis.startswith("{")


def test_gemini_generator_raises_upstream_status():
    error = errors.ClientError(
        400, {"error": {"code": 400, "message": "API key not valid", "status": "INVALID_ARGUMENT"}}
    )
    generator = GeminiInsightGenerator(api_key="bad", client=stub_client(error=error))
    with pytest.raises(InsightError) as exc_info:
        generator.generate(InsightRequest())
    assert exc_info.value.status == 400
    assert "API key not valid" in exc_info.value.detail


def test_upstream_failure_is_relayed():
    error = errors.ClientError(
        403, {"error": {"code": 403, "message": "Permission denied", "status": "PERMISSION_DENIED"}}
    )
    generator = GeminiInsightGenerator(api_key="key", client=stub_client(error=error))
    response = post(PRODUCT, settings=Settings(gemini_api_key="key"), generator=generator)
    assert response["statusCode"] == 403
    assert "Permission denied" in json.loads(response["body"])["error"]


def test_unexpected_error_is_server_error():
    event = {"httpMethod": "POST", "body": "{not json"}
    response = get_gemini_analysis.handle(event, Settings())
    assert response["statusCode"] == 500
    assert "error" in json.loads(response["body"])
