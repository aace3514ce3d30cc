"""HTTP layer tests: /analyze, /compare, /chat and the general endpoints.

The LLM client and the outbound HTTP client are replaced through
``app.dependency_overrides``; upstream data sources answer 503.
"""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import httpx
import pytest
from fastapi.testclient import TestClient

from ideaforge.dependencies import get_http_client, get_llm_client
from ideaforge.main import app
from ideaforge.schemas.idea_schema import IdeaSubmission
from ideaforge.services.chat_service import SETUP_MESSAGE
from ideaforge.services.llm_client import LLMClient, LLMProvider, ProviderError
from ideaforge.services.mock_analysis import generate_mock_analysis

FORM = {
    "startupName": "ParkPal",
    "description": "Find parking fast",
    "problem": "Drivers waste time circling for parking",
    "solution": "A parking spot finder",
    "targetMarket": "Urban commuters",
    "industry": "Technology",
    "stage": "growing",
}


class FakeProvider(LLMProvider):
    name = "fake"

    def __init__(self, report=None, chunks=None, error=None):
        self.report = report
        self.chunks = chunks or []
        self.error = error

    async def generate_json(self, prompt, *, temperature=None):
        if self.error:
            raise self.error
        return dict(self.report)

    async def stream_chat(self, messages, system_prompt=None):
        if self.error:
            raise self.error
        for chunk in self.chunks:
            yield chunk


async def override_http_client():
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    async with httpx.AsyncClient(transport=transport) as http_client:
        yield http_client


def use_llm(client: LLMClient):
    app.dependency_overrides[get_llm_client] = lambda: client


client = TestClient(app)


@pytest.fixture(autouse=True)
def overrides():
    app.dependency_overrides[get_http_client] = override_http_client
    use_llm(LLMClient([]))
    yield
    app.dependency_overrides.clear()


# ===================================================================== #
#  /analyze                                                               #
# ===================================================================== #

class TestAnalyze:
    def test_without_keys_returns_deterministic_report(self):
        res = client.post("/analyze", json=FORM)
        assert res.status_code == 200
        assert res.headers["X-Analysis-Strategy"] == "deterministic"

        body = res.json()
        assert body["riskLevel"] == 25
        assert body["overallScore"] == 80
        assert body["realWorldData"]["marketSize"] == "5200"
        assert body["realWorldData"]["marketGrowth"] == "13.2%"
        assert body["realWorldData"]["competitors"]

    def test_llm_report_used_when_valid(self):
        report = generate_mock_analysis(IdeaSubmission(**FORM)).model_dump(by_alias=True)
        report["overallScore"] = 42
        use_llm(LLMClient([FakeProvider(report=report)]))

        res = client.post("/analyze", json=FORM)
        assert res.headers["X-Analysis-Strategy"] == "full_prompt"
        assert res.json()["overallScore"] == 42

    def test_unexpected_provider_error_still_returns_report(self):
        use_llm(LLMClient([FakeProvider(error=RuntimeError("socket closed"))]))
        res = client.post("/analyze", json=FORM)
        assert res.status_code == 200
        assert res.headers["X-Analysis-Strategy"] == "deterministic"
        assert res.json()["overallScore"] == 80

    def test_same_shape_either_way(self):
        deterministic = client.post("/analyze", json=FORM).json()
        report = generate_mock_analysis(IdeaSubmission(**FORM)).model_dump(by_alias=True)
        use_llm(LLMClient([FakeProvider(report=report)]))
        llm = client.post("/analyze", json=FORM).json()
        assert set(deterministic) == set(llm)

    def test_blank_field_is_422(self):
        res = client.post("/analyze", json={**FORM, "startupName": "   "})
        assert res.status_code == 422
        body = res.json()
        assert body["error"] == "Invalid request"
        assert "startupName" in body["hint"]
        assert body["detail"]


# ===================================================================== #
#  /compare                                                               #
# ===================================================================== #

class TestCompare:
    BODY = {
        "formData": FORM,
        "realWorldData": {
            "marketSize": "5200",
            "addressableMarket": "520.0",
            "marketGrowth": "13.2%",
            "competitors": [],
        },
        "analysisData": {"marketPotential": 80, "competition": 40, "feasibility": 70},
    }

    def test_scores(self):
        body = client.post("/compare", json=self.BODY).json()
        assert body["marketAlignmentScore"] == 79
        assert body["competitionFitScore"] == 60
        assert body["technicalFeasibilityScore"] == 60
        assert body["marketValidationScore"] == 50
        assert body["overallComparisonScore"] == 64
        assert body["insights"][0].startswith("Moderate alignment")

    def test_idempotent(self):
        assert client.post("/compare", json=self.BODY).json() == client.post("/compare", json=self.BODY).json()

    def test_form_data_only(self):
        body = client.post("/compare", json={"formData": FORM}).json()
        assert [body[k] for k in (
            "marketAlignmentScore", "competitionFitScore", "technicalFeasibilityScore", "marketValidationScore",
        )] == [50, 50, 50, 50]


# ===================================================================== #
#  /chat                                                                  #
# ===================================================================== #

class TestChat:
    def test_setup_message_without_keys(self):
        res = client.post("/chat", json={"messages": [{"role": "user", "content": "hi"}]})
        assert res.status_code == 200
        assert res.headers["content-type"].startswith("text/plain")
        assert res.text == SETUP_MESSAGE

    def test_streams_provider_reply(self):
        use_llm(LLMClient([FakeProvider(chunks=["Yo ", "👋"])]))
        res = client.post("/chat", json=[{"role": "user", "parts": [{"type": "text", "text": "hi"}]}])
        assert res.status_code == 200
        assert res.text == "Yo 👋"

    def test_malformed_is_400(self):
        res = client.post("/chat", json={"messages": []})
        assert res.status_code == 400
        assert res.json()["error"] == "No messages provided"
        assert res.json()["hint"]
        assert "message" not in res.json()

    def test_provider_failure_is_500(self):
        use_llm(LLMClient([FakeProvider(error=ProviderError("quota exceeded", "gemini"))]))
        res = client.post("/chat", json=[{"role": "user", "content": "hi"}])
        assert res.status_code == 500
        body = res.json()
        assert body["error"] == "AI provider error"
        assert body["message"] == "quota exceeded"
        assert "gemini provider encountered an error" in body["hint"]


# ===================================================================== #
#  General                                                                #
# ===================================================================== #

class TestGeneral:
    def test_root(self):
        assert client.get("/").json()["name"] == "IdeaForge AI"

    def test_health(self):
        assert client.get("/health").json()["status"] == "healthy"
