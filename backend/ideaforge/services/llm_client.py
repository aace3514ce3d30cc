"""LLM provider client.

Providers are explicit objects built from ``Settings``; nothing here reads
the environment or holds a module-level client.

  - ``GeminiProvider``  : Google Generative Language REST API over httpx
  - ``OpenAIProvider``  : ``AsyncOpenAI`` chat completions

Both expose ``generate_json(prompt)`` (JSON mode, sanitized and parsed) and
``stream_chat(messages, system_prompt)`` (async iterator of text chunks).
Failures surface as ``ProviderAuthError`` (missing / rejected credential) or
``ProviderError`` (everything else).
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx
import openai
from openai import AsyncOpenAI

from ..config import Settings

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ProviderError(Exception):
    """Provider call failed: rate limit, network, bad model, bad JSON."""

    def __init__(self, message: str, provider: str = "llm") -> None:
        super().__init__(message)
        self.provider = provider


class ProviderAuthError(ProviderError):
    """Credential missing or rejected by the provider."""


class ProviderModelNotFound(ProviderError):
    """The requested model does not exist or is not enabled for this key."""


# ---------------------------------------------------------------------------
# JSON sanitizer: extracts valid JSON from LLM output
# ---------------------------------------------------------------------------
def sanitize_json(raw: str) -> str:
    """Extract a JSON object from raw LLM output.

    Handles markdown fences, a leading BOM, prose around the object and
    trailing commas before ``}`` or ``]``.  Raises ValueError if no JSON
    object is found.
    """
    text = raw.strip().lstrip("\ufeff")

    if text.startswith("```"):
        parts = text.split("```")
        text = parts[1] if len(parts) >= 3 else text[3:]

    text = text.strip()
    if text.lower().startswith("json"):
        text = text[4:].strip()

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise ValueError("LLM did not return a JSON object")
    text = text[start: end + 1]

    return re.sub(r",\s*([}\]])", r"\1", text)


def parse_json_object(raw: str, provider: str) -> Dict[str, Any]:
    try:
        parsed = json.loads(sanitize_json(raw))
    except ValueError as exc:
        raise ProviderError(f"Invalid JSON from model: {exc}", provider) from exc
    if not isinstance(parsed, dict):
        raise ProviderError("Model returned JSON that is not an object", provider)
    return parsed


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


class LLMProvider:
    name = "llm"

    async def generate_json(self, prompt: str, *, temperature: Optional[float] = None) -> Dict[str, Any]:
        raise NotImplementedError

    def stream_chat(
        self,
        messages: List[Dict[str, str]],
        system_prompt: Optional[str] = None,
    ) -> AsyncIterator[str]:
        raise NotImplementedError


class GeminiProvider(LLMProvider):
    """Gemini over REST.

    When the configured model answers 404 the provider asks ListModels which
    Gemini models this key can use and tries them in order.  The first model
    that works becomes the provider's model for later calls.
    """

    name = "gemini"
    BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

    def __init__(
        self,
        api_key: str,
        model: str,
        http_client: httpx.AsyncClient,
        *,
        temperature: float = 0.9,
        timeout: float = 40.0,
    ) -> None:
        if not api_key:
            raise ProviderAuthError("GOOGLE_GENERATIVE_AI_API_KEY not set", self.name)
        self.api_key = api_key
        self.model = model
        self.http_client = http_client
        self.temperature = temperature
        self.timeout = timeout
        self._listed_models: Optional[List[str]] = None

    def _url(self, model: str, method: str) -> str:
        return f"{self.BASE_URL}/{model}:{method}"

    def _headers(self) -> Dict[str, str]:
        return {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}

    def _raise_for_status(self, status_code: int, body: str, model: str) -> None:
        if status_code in (401, 403) or (status_code == 400 and "API key" in body):
            raise ProviderAuthError(f"Gemini rejected the API key (HTTP {status_code})", self.name)
        if status_code == 404:
            raise ProviderModelNotFound(f"Gemini model {model} not found", self.name)
        raise ProviderError(f"Gemini HTTP {status_code}: {body[:300]}", self.name)

    @staticmethod
    def _contents(messages: List[Dict[str, str]]) -> List[Dict[str, Any]]:
        # Gemini calls the assistant role "model"; system turns go to systemInstruction.
        return [
            {
                "role": "model" if m["role"] == "assistant" else "user",
                "parts": [{"text": m["content"]}],
            }
            for m in messages
            if m["role"] != "system"
        ]

    @staticmethod
    def _candidate_text(payload: Any) -> str:
        if not isinstance(payload, dict):
            return ""
        candidates = payload.get("candidates")
        if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
            return ""
        content = candidates[0].get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            return ""
        return "".join(str(p.get("text") or "") for p in parts if isinstance(p, dict))

    # ── Model discovery ─────────────────────────────────────────────────

    async def list_models(self) -> List[str]:
        """Gemini text models this key can call, as bare names (no ``models/``)."""
        if self._listed_models is not None:
            return self._listed_models

        print("🧠 [GEMINI] Calling ListModels to find available models")
        try:
            response = await self.http_client.get(self.BASE_URL, headers=self._headers(), timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("[GEMINI] ListModels failed: %s", exc)
            return []

        models: List[str] = []
        entries = payload.get("models") if isinstance(payload, dict) else None
        for entry in entries if isinstance(entries, list) else []:
            if not isinstance(entry, dict):
                continue
            name = str(entry.get("name") or "").replace("models/", "", 1)
            methods = entry.get("supportedGenerationMethods") or []
            if "gemini" not in name or "embedding" in name:
                continue
            if "generateContent" in methods or "streamGenerateContent" in methods:
                models.append(name)

        print(f"🧠 [GEMINI] Found {len(models)} available models: {models[:10]}")
        self._listed_models = models
        return models

    async def _model_candidates(self) -> AsyncIterator[str]:
        # ListModels is only called once the configured model has failed.
        yield self.model
        tried = {self.model}
        for name in await self.list_models():
            if name not in tried:
                tried.add(name)
                yield name

    # ── JSON generation ─────────────────────────────────────────────────

    async def _generate_with(self, model: str, body: Dict[str, Any]) -> Dict[str, Any]:
        print(f"🧠 [GEMINI] Calling {model} (JSON mode)")
        try:
            response = await self.http_client.post(
                self._url(model, "generateContent"),
                headers=self._headers(),
                json=body,
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            raise ProviderError(f"Gemini request failed: {exc}", self.name) from exc

        if response.status_code != 200:
            self._raise_for_status(response.status_code, response.text, model)

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderError("Gemini returned a non-JSON envelope", self.name) from exc
        if not isinstance(payload, dict):
            raise ProviderError("Gemini returned an unexpected envelope", self.name)

        raw = self._candidate_text(payload)
        print(f"🧠 [GEMINI] Raw output length: {len(raw)} chars")
        if not raw.strip():
            raise ProviderError("Gemini returned an empty response", self.name)
        return parse_json_object(raw, self.name)

    async def generate_json(self, prompt: str, *, temperature: Optional[float] = None) -> Dict[str, Any]:
        body = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature if temperature is None else temperature,
                "responseMimeType": "application/json",
            },
        }
        last_error: Optional[ProviderModelNotFound] = None
        async for model in self._model_candidates():
            try:
                result = await self._generate_with(model, body)
            except ProviderModelNotFound as exc:
                logger.warning("[GEMINI] %s, trying the next available model", exc)
                last_error = exc
                continue
            self.model = model
            return result
        raise last_error or ProviderModelNotFound("No Gemini model available", self.name)

    # ── Chat streaming ──────────────────────────────────────────────────

    async def _stream_with(self, model: str, body: Dict[str, Any]) -> AsyncIterator[str]:
        try:
            async with self.http_client.stream(
                "POST",
                self._url(model, "streamGenerateContent"),
                params={"alt": "sse"},
                headers=self._headers(),
                json=body,
                timeout=self.timeout,
            ) as response:
                if response.status_code != 200:
                    error_body = (await response.aread()).decode("utf-8", errors="replace")
                    self._raise_for_status(response.status_code, error_body, model)
                async for line in response.aiter_lines():
                    if not line.startswith("data:"):
                        continue
                    data = line[len("data:"):].strip()
                    if not data:
                        continue
                    try:
                        chunk = self._candidate_text(json.loads(data))
                    except json.JSONDecodeError:
                        continue
                    if chunk:
                        yield chunk
        except httpx.HTTPError as exc:
            raise ProviderError(f"Gemini stream failed: {exc}", self.name) from exc

    async def stream_chat(
        self,
        messages: List[Dict[str, str]],
        system_prompt: Optional[str] = None,
    ) -> AsyncIterator[str]:
        body: Dict[str, Any] = {
            "contents": self._contents(messages),
            "generationConfig": {"temperature": self.temperature},
        }
        if system_prompt:
            body["systemInstruction"] = {"parts": [{"text": system_prompt}]}

        last_error: Optional[ProviderModelNotFound] = None
        async for model in self._model_candidates():
            print(f"💬 [GEMINI] Streaming chat with {model} ({len(messages)} messages)")
            try:
                # A 404 is raised before the first chunk, so retrying never repeats text.
                async for chunk in self._stream_with(model, body):
                    yield chunk
            except ProviderModelNotFound as exc:
                logger.warning("[GEMINI] %s, trying the next available model", exc)
                last_error = exc
                continue
            self.model = model
            return
        raise last_error or ProviderModelNotFound("No Gemini model available", self.name)


class OpenAIProvider(LLMProvider):
    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        temperature: float = 0.9,
        timeout: float = 40.0,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        if not api_key:
            raise ProviderAuthError("OPENAI_API_KEY not set", self.name)
        self.model = model
        self.temperature = temperature
        self.client = client or AsyncOpenAI(api_key=api_key, timeout=timeout)

    def _translate(self, exc: Exception) -> ProviderError:
        if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
            return ProviderAuthError(f"OpenAI rejected the API key: {exc}", self.name)
        return ProviderError(f"OpenAI call failed: {exc}", self.name)

    async def generate_json(self, prompt: str, *, temperature: Optional[float] = None) -> Dict[str, Any]:
        print(f"🧠 [OPENAI] Calling {self.model} (JSON mode)")
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature if temperature is None else temperature,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as exc:
            raise self._translate(exc) from exc

        usage = getattr(completion, "usage", None)
        if usage:
            print(
                f"🧠 [OPENAI] Tokens used: prompt={usage.prompt_tokens}, "
                f"completion={usage.completion_tokens}"
            )
        choices = getattr(completion, "choices", None) or []
        message = getattr(choices[0], "message", None) if choices else None
        raw = (getattr(message, "content", None) or "").strip()
        if not raw:
            raise ProviderError("OpenAI returned an empty response", self.name)
        return parse_json_object(raw, self.name)

    async def stream_chat(
        self,
        messages: List[Dict[str, str]],
        system_prompt: Optional[str] = None,
    ) -> AsyncIterator[str]:
        payload = list(messages)
        if system_prompt:
            payload.insert(0, {"role": "system", "content": system_prompt})

        print(f"💬 [OPENAI] Streaming chat with {self.model} ({len(messages)} messages)")
        try:
            stream = await self.client.chat.completions.create(
                model=self.model,
                messages=payload,
                temperature=self.temperature,
                stream=True,
            )
            async for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
        except openai.OpenAIError as exc:
            raise self._translate(exc) from exc


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class LLMClient:
    """Ordered provider list: Gemini first when configured, then OpenAI."""

    def __init__(self, providers: List[LLMProvider]) -> None:
        self.providers = list(providers)

    @classmethod
    def from_settings(cls, settings: Settings, http_client: httpx.AsyncClient) -> "LLMClient":
        providers: List[LLMProvider] = []
        if settings.google_api_key:
            providers.append(GeminiProvider(
                settings.google_api_key,
                settings.gemini_model,
                http_client,
                temperature=settings.llm_temperature,
                timeout=settings.llm_timeout,
            ))
        if settings.openai_api_key:
            providers.append(OpenAIProvider(
                settings.openai_api_key,
                settings.openai_model,
                temperature=settings.llm_temperature,
                timeout=settings.llm_timeout,
            ))
        return cls(providers)

    @property
    def configured(self) -> bool:
        return bool(self.providers)

    @property
    def primary(self) -> LLMProvider:
        if not self.providers:
            raise ProviderAuthError("No API keys available")
        return self.providers[0]

    async def generate_json(self, prompt: str) -> Dict[str, Any]:
        return await self.primary.generate_json(prompt)
