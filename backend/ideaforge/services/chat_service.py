"""AI Co-Founder chat service.

Flow:
  1. Normalize the posted body into ``ChatMessage`` turns
  2. No provider configured → stream the setup instructions as assistant text
  3. Try each provider in order (Gemini, then OpenAI); the first chunk is
     awaited before returning so a provider that fails up front can still
     fall back to the next one
  4. All providers failed → ``ChatProvidersFailed``

Chat is stateless: the client resends the whole history on every call.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Dict, List, Optional

from ..schemas.chat_schema import ChatMessage
from .llm_client import LLMClient, ProviderError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
_VALID_ROLES = {"system", "user", "assistant"}

FORMAT_HINT = 'Send {"messages": [{"role": "user", "content": "..."}]} or a bare message array'

SYSTEM_PROMPT = (
    'You are an AI Co-Founder named "AI Co-founder" for IdeaForge AI. You are a realistic, '
    "helpful, and knowledgeable AI Co-Founder that can answer any question, not just about "
    "startups.\n\n"
    "Your personality:\n"
    '- Friendly and conversational (use casual language like "Yo 👋" when appropriate)\n'
    "- When asked about startups, you're an expert AI Co-Founder\n"
    "- When asked about other topics (science, history, coding, general knowledge), you answer "
    "helpfully and accurately\n"
    "- Keep responses engaging, natural, and comprehensive\n\n"
    "Be helpful, specific, and actionable. Ask clarifying questions when needed. Use concrete "
    "examples and data points when possible.\n\n"
    "When discussing startup ideas:\n"
    "1. Be encouraging but honest about challenges\n"
    "2. Provide specific, actionable advice\n"
    "3. Reference relevant industry benchmarks when applicable\n"
    "4. Suggest next steps the founder can take immediately"
)

SETUP_MESSAGE = (
    "⚠️ API Key Required\n\n"
    "To use the AI Co-Founder, please set up an API key in your environment variables:\n\n"
    "1. For Google Gemini (Recommended - Free tier available):\n"
    "   Set GOOGLE_GENERATIVE_AI_API_KEY\n"
    "   Get your key at: https://makersuite.google.com/app/apikey\n\n"
    "2. For OpenAI:\n"
    "   Set OPENAI_API_KEY\n"
    "   Get your key at: https://platform.openai.com/api-keys\n\n"
    "After setting the key, restart the server."
)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ChatFormatError(ValueError):
    """Posted body is not a usable message list."""


class ChatProvidersFailed(Exception):
    def __init__(self, message: str, provider: str) -> None:
        super().__init__(message)
        self.provider = provider

    @property
    def hint(self) -> str:
        return (
            f"The {self.provider} provider encountered an error. "
            "Please check your API key and try again."
        )


# ---------------------------------------------------------------------------
# Message normalization
# ---------------------------------------------------------------------------


def _message_text(raw: Dict[str, Any]) -> str:
    parts = raw.get("parts")
    text = ""
    if isinstance(parts, list):
        text = "".join(
            str(p.get("text") or p.get("content") or "")
            for p in parts
            if isinstance(p, dict) and p.get("type") == "text"
        )
    for candidate in (text, raw.get("content"), raw.get("text")):
        if isinstance(candidate, str) and candidate:
            return candidate
    return ""


def normalize_messages(body: Any) -> List[ChatMessage]:
    """Accept ``{"messages": [...]}`` or a bare list; drop empty turns.

    Raises ``ChatFormatError`` with the client-facing error string.
    """
    messages = body.get("messages", body) if isinstance(body, dict) else body
    if not isinstance(messages, list):
        raise ChatFormatError("Invalid messages format")
    if not messages:
        raise ChatFormatError("No messages provided")

    normalized: List[ChatMessage] = []
    for raw in messages:
        if not isinstance(raw, dict):
            continue
        content = _message_text(raw)
        if not content.strip():
            continue
        role = raw.get("role") if raw.get("role") in _VALID_ROLES else "user"
        normalized.append(ChatMessage(role=role, content=content))

    if not normalized:
        raise ChatFormatError("No valid messages found")
    return normalized


# ---------------------------------------------------------------------------
# Streaming
# ---------------------------------------------------------------------------


async def _single(text: str) -> AsyncIterator[str]:
    yield text


async def _chain(first: str, rest: AsyncIterator[str], provider: str) -> AsyncIterator[str]:
    if first:
        yield first
    try:
        async for chunk in rest:
            yield chunk
    except ProviderError as exc:
        # Headers are already sent; the client sees a truncated reply.
        logger.error("[CHAT] %s stream broke mid-response: %s", provider, exc)


async def open_chat_stream(
    llm_client: Optional[LLMClient],
    messages: List[ChatMessage],
) -> AsyncIterator[str]:
    """Return a text-chunk iterator from the first provider that starts streaming."""
    if llm_client is None or not llm_client.configured:
        logger.warning("[CHAT] No API keys found; returning setup instructions")
        return _single(SETUP_MESSAGE)

    payload = [m.model_dump() for m in messages]
    last_error: Optional[ProviderError] = None

    for provider in llm_client.providers:
        stream = provider.stream_chat(payload, SYSTEM_PROMPT)
        try:
            first = await stream.__anext__()
        except StopAsyncIteration:
            first = ""
        except ProviderError as exc:
            logger.warning("[CHAT] %s failed before streaming: %s", provider.name, exc)
            last_error = exc
            continue
        print(f"💬 [CHAT] Streaming reply from {provider.name}")
        return _chain(first, stream, provider.name)

    provider_name = last_error.provider if last_error else "llm"
    raise ChatProvidersFailed(
        str(last_error) if last_error else "Failed to get response from AI provider",
        provider_name,
    )
