"""LLM client and analysis ladder tests.

Providers are faked in-process; the Gemini REST provider runs against
``httpx.MockTransport``.
"""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import json
from types import SimpleNamespace

import httpx
import pytest

from ideaforge.config import Settings
from ideaforge.schemas.idea_schema import IdeaSubmission
from ideaforge.schemas.market_schema import MarketSnapshot
from ideaforge.services.analysis_service import (
    DETERMINISTIC,
    FAILURE_AUTH,
    FAILURE_PROVIDER,
    FAILURE_SCHEMA,
    FULL_PROMPT,
    REDUCED_PROMPT,
    AnalysisService,
)
from ideaforge.services.llm_client import (
    GeminiProvider,
    LLMClient,
    LLMProvider,
    OpenAIProvider,
    ProviderAuthError,
    ProviderError,
    ProviderModelNotFound,
    sanitize_json,
)
from ideaforge.services.mock_analysis import generate_mock_analysis


def make_submission(**overrides) -> IdeaSubmission:
    data = {
        "startup_name": "ParkPal",
        "description": "Find parking fast",
        "problem": "Drivers waste time circling for parking",
        "solution": "A parking spot finder",
        "target_market": "Urban commuters",
        "industry": "Technology",
        "stage": "mvp",
    }
    data.update(overrides)
    return IdeaSubmission(**data)


def llm_report(**overrides) -> dict:
    """A well-formed camelCase report as a provider would return it."""
    report = generate_mock_analysis(make_submission()).model_dump(by_alias=True)
    report.update({"overallScore": 71, "marketPotential": 77.5})
    report["realWorldData"] = {"marketSize": "999 trillion", "marketGrowth": "99%", "competitors": [],
                               "fundingInfo": {"averageFunding": "$9B", "typicalInvestors": []}}
    report.update(overrides)
    return report


class ScriptedProvider(LLMProvider):
    """Returns (or raises) one scripted item per call."""

    def __init__(self, *script, name="fake"):
        self.name = name
        self.script = list(script)
        self.prompts = []

    async def generate_json(self, prompt, *, temperature=None):
        self.prompts.append(prompt)
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def analyze(provider, snapshot=None):
    client = LLMClient([provider]) if provider else LLMClient([])
    return asyncio.run(AnalysisService(client).analyze(make_submission(), snapshot))


# ===================================================================== #
#  JSON sanitizer                                                         #
# ===================================================================== #

class TestSanitizeJson:
    def test_markdown_fence(self):
        assert json.loads(sanitize_json('```json\n{"a": 1}\n```')) == {"a": 1}

    def test_prose_and_trailing_commas(self):
        raw = 'Here you go: {"a": [1, 2,], "b": {"c": 3,},} Thanks!'
        assert json.loads(sanitize_json(raw)) == {"a": [1, 2], "b": {"c": 3}}

    def test_no_object(self):
        with pytest.raises(ValueError):
            sanitize_json("I cannot help with that")


# ===================================================================== #
#  Strategy ladder                                                        #
# ===================================================================== #

class TestStrategyLadder:
    def test_full_prompt_success(self):
        provider = ScriptedProvider(llm_report())
        snapshot = MarketSnapshot(total_market_size=5200.0, addressable_market=520.0, growth_rate=13.2)
        outcome = analyze(provider, snapshot)

        assert outcome.strategy == FULL_PROMPT
        assert outcome.used_llm is True
        assert outcome.report.overall_score == 71
        assert outcome.report.market_potential == 78
        # The echo reflects the gathered snapshot, not the model's restatement
        assert outcome.report.real_world_data.market_size == "5200"
        assert outcome.report.real_world_data.market_growth == "13.2%"
        assert "ANALYSIS REQUEST ID" in provider.prompts[0]

    def test_transient_failure_retries_reduced_prompt(self):
        provider = ScriptedProvider(ProviderError("rate limited"), llm_report())
        outcome = analyze(provider)

        assert outcome.strategy == REDUCED_PROMPT
        assert [a.failure_kind for a in outcome.attempts] == [FAILURE_PROVIDER, None]
        assert provider.prompts[1].startswith("Analyze this startup idea")

    def test_auth_failure_skips_reduced_prompt(self):
        provider = ScriptedProvider(ProviderAuthError("bad key"))
        outcome = analyze(provider)

        assert outcome.strategy == DETERMINISTIC
        assert outcome.used_llm is False
        assert [a.name for a in outcome.attempts] == [FULL_PROMPT, DETERMINISTIC]
        assert outcome.attempts[0].failure_kind == FAILURE_AUTH
        assert len(provider.prompts) == 1

    def test_schema_mismatch_counts_as_failure(self):
        provider = ScriptedProvider({"overallScore": 150}, {"hello": "world"})
        outcome = analyze(provider)

        assert outcome.strategy == DETERMINISTIC
        assert [a.failure_kind for a in outcome.attempts[:2]] == [FAILURE_SCHEMA, FAILURE_SCHEMA]

    def test_no_provider_is_deterministic(self):
        outcome = analyze(None)
        assert outcome.strategy == DETERMINISTIC
        assert outcome.report == generate_mock_analysis(make_submission(), MarketSnapshot())

    def test_llm_and_deterministic_reports_share_schema(self):
        llm = analyze(ScriptedProvider(llm_report())).report
        mock = analyze(None).report
        assert set(llm.model_dump(by_alias=True)) == set(mock.model_dump(by_alias=True))


# ===================================================================== #
#  Providers                                                              #
# ===================================================================== #

class TestProviders:
    def test_client_orders_gemini_first(self):
        settings = Settings(google_api_key="g", openai_api_key="o")

        async def _main():
            async with httpx.AsyncClient() as http_client:
                return LLMClient.from_settings(settings, http_client)

        client = asyncio.run(_main())
        assert [p.name for p in client.providers] == ["gemini", "openai"]

    def test_empty_client_raises_auth_error(self):
        with pytest.raises(ProviderAuthError):
            LLMClient([]).primary

    def _gemini(self, handler):
        async def _main():
            transport = httpx.MockTransport(handler)
            async with httpx.AsyncClient(transport=transport) as http_client:
                provider = GeminiProvider("secret", "gemini-1.5-flash", http_client)
                return await provider.generate_json("prompt")
        return asyncio.run(_main())

    def test_gemini_generate_json(self):
        def handler(request):
            assert request.headers["x-goog-api-key"] == "secret"
            assert request.url.path.endswith("gemini-1.5-flash:generateContent")
            body = json.loads(request.content)
            assert body["generationConfig"]["responseMimeType"] == "application/json"
            text = '```json\n{"overallScore": 70,}\n```'
            return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})

        assert self._gemini(handler) == {"overallScore": 70}

    def test_gemini_rejected_key_is_auth_error(self):
        with pytest.raises(ProviderAuthError):
            self._gemini(lambda request: httpx.Response(400, text="API key not valid"))

    def test_gemini_rate_limit_is_provider_error(self):
        with pytest.raises(ProviderError) as info:
            self._gemini(lambda request: httpx.Response(429, text="quota"))
        assert not isinstance(info.value, ProviderAuthError)

    def test_gemini_malformed_envelope_is_provider_error(self):
        with pytest.raises(ProviderError, match="unexpected envelope"):
            self._gemini(lambda request: httpx.Response(200, json=[{"candidates": []}]))

    def test_gemini_odd_candidate_shapes_are_empty(self):
        for payload in ({"candidates": ["text"]}, {"candidates": [{"content": "x"}]}, {"candidates": None}):
            with pytest.raises(ProviderError, match="empty response"):
                self._gemini(lambda request, p=payload: httpx.Response(200, json=p))

    def test_openai_without_choices_is_provider_error(self):
        completion = SimpleNamespace(choices=[], usage=None)

        async def create(**kwargs):
            return completion

        fake = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
        provider = OpenAIProvider("key", "gpt-4o-mini", client=fake)
        with pytest.raises(ProviderError, match="empty response"):
            asyncio.run(provider.generate_json("prompt"))


# ===================================================================== #
#  Gemini model discovery                                                 #
# ===================================================================== #

MODEL_LIST = {
    "models": [
        {"name": "models/gemini-1.5-flash", "supportedGenerationMethods": ["generateContent"]},
        {"name": "models/text-embedding-004", "supportedGenerationMethods": ["embedContent"]},
        {"name": "models/gemini-embedding-001", "supportedGenerationMethods": ["generateContent"]},
        {"name": "models/gemini-2.0-flash", "supportedGenerationMethods": ["generateContent", "streamGenerateContent"]},
    ]
}


def gemini_text(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def run_gemini(handler, call):
    async def _main():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
            provider = GeminiProvider("secret", "gemini-1.5-flash", http_client)
            return provider, await call(provider)
    return asyncio.run(_main())


class TestGeminiModelFallback:
    def test_list_models_filters_to_gemini_text_models(self):
        def handler(request):
            assert request.method == "GET"
            return httpx.Response(200, json=MODEL_LIST)

        _, models = run_gemini(handler, lambda p: p.list_models())
        assert models == ["gemini-1.5-flash", "gemini-2.0-flash"]

    def test_not_found_moves_to_next_listed_model(self):
        seen = []

        def handler(request):
            seen.append(request.url.path)
            if request.method == "GET":
                return httpx.Response(200, json=MODEL_LIST)
            if "gemini-1.5-flash" in request.url.path:
                return httpx.Response(404, text="model not found")
            return httpx.Response(200, json=gemini_text('{"overallScore": 64}'))

        provider, result = run_gemini(handler, lambda p: p.generate_json("prompt"))
        assert result == {"overallScore": 64}
        assert provider.model == "gemini-2.0-flash"
        assert seen[-1].endswith("gemini-2.0-flash:generateContent")

    def test_models_are_listed_only_after_a_not_found(self):
        methods = []

        def handler(request):
            methods.append(request.method)
            return httpx.Response(200, json=gemini_text('{"a": 1}'))

        run_gemini(handler, lambda p: p.generate_json("prompt"))
        assert methods == ["POST"]

    def test_no_listed_alternative_raises_not_found(self):
        def handler(request):
            if request.method == "GET":
                return httpx.Response(200, json={"models": MODEL_LIST["models"][:1]})
            return httpx.Response(404, text="model not found")

        with pytest.raises(ProviderModelNotFound):
            run_gemini(handler, lambda p: p.generate_json("prompt"))

    def test_stream_falls_back_to_next_model(self):
        def handler(request):
            if request.method == "GET":
                return httpx.Response(200, json=MODEL_LIST)
            if "gemini-1.5-flash" in request.url.path:
                return httpx.Response(404, text="model not found")
            sse = "".join(f"data: {json.dumps(gemini_text(t))}\n\n" for t in ("Yo ", "there"))
            return httpx.Response(200, text=sse, headers={"content-type": "text/event-stream"})

        async def collect(provider):
            return [chunk async for chunk in provider.stream_chat([{"role": "user", "content": "hi"}])]

        provider, chunks = run_gemini(handler, collect)
        assert chunks == ["Yo ", "there"]
        assert provider.model == "gemini-2.0-flash"


# ===================================================================== #
#  Ladder resilience                                                      #
# ===================================================================== #

class TestLadderResilience:
    def test_unexpected_provider_exception_falls_through(self):
        provider = ScriptedProvider(RuntimeError("boom"), llm_report())
        outcome = analyze(provider)

        assert outcome.strategy == REDUCED_PROMPT
        assert outcome.attempts[0].failure_kind == FAILURE_PROVIDER
        assert "RuntimeError" in outcome.attempts[0].reason

    def test_non_finite_score_is_schema_failure(self):
        provider = ScriptedProvider(llm_report(overallScore=float("inf")), llm_report(riskLevel=float("nan")))
        outcome = analyze(provider)

        assert outcome.strategy == DETERMINISTIC
        assert [a.failure_kind for a in outcome.attempts[:2]] == [FAILURE_SCHEMA, FAILURE_SCHEMA]

    def test_gemini_envelope_list_yields_deterministic_report(self):
        def handler(request):
            return httpx.Response(200, json=[{"candidates": []}])

        async def _main():
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
                client = LLMClient([GeminiProvider("secret", "gemini-1.5-flash", http_client)])
                return await AnalysisService(client).analyze(make_submission())

        outcome = asyncio.run(_main())
        assert outcome.strategy == DETERMINISTIC
        assert [a.failure_kind for a in outcome.attempts[:2]] == [FAILURE_PROVIDER, FAILURE_PROVIDER]

    def test_gemini_infinity_in_report_yields_deterministic_report(self):
        text = json.dumps(llm_report(overallScore=float("inf")))
        assert "Infinity" in text

        def handler(request):
            return httpx.Response(200, json=gemini_text(text))

        async def _main():
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
                client = LLMClient([GeminiProvider("secret", "gemini-1.5-flash", http_client)])
                return await AnalysisService(client).analyze(make_submission())

        outcome = asyncio.run(_main())
        assert outcome.strategy == DETERMINISTIC
        assert outcome.attempts[0].failure_kind == FAILURE_SCHEMA
