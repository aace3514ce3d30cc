"""AI Co-Founder chat route.

Endpoint:
  POST /chat : message list in, plain-text token stream out
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse, StreamingResponse

from ..dependencies import get_llm_client
from ..schemas.chat_schema import ChatErrorResponse
from ..services.chat_service import (
    FORMAT_HINT,
    ChatFormatError,
    ChatProvidersFailed,
    normalize_messages,
    open_chat_stream,
)
from ..services.llm_client import LLMClient

logger = logging.getLogger(__name__)

NO_PROVIDER_HINT = "Please set GOOGLE_GENERATIVE_AI_API_KEY or OPENAI_API_KEY environment variable"

router = APIRouter(
    prefix="/chat",
    tags=["AI Chat Co-Founder"],
)


@router.post(
    "",
    summary="Chat with the AI Co-Founder",
    response_description="Streamed assistant reply (text/plain)",
    responses={
        400: {"model": ChatErrorResponse, "description": "Malformed message list"},
        500: {"model": ChatErrorResponse, "description": "Every configured provider failed"},
    },
)
async def chat(
    body: Any = Body(...),
    llm_client: LLMClient = Depends(get_llm_client),
):
    """Stream the assistant reply for the posted conversation.

    Accepts ``{"messages": [...]}`` or a bare message array.  Malformed input
    is a 400; a failure of every configured provider is a 500 with a hint.
    """
    try:
        messages = normalize_messages(body)
    except ChatFormatError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ChatErrorResponse(error=str(exc), hint=FORMAT_HINT).model_dump(exclude_none=True),
        )

    print(f"💬 [CHAT] {len(messages)} messages, last: {messages[-1].content[:80]}...")

    try:
        stream = await open_chat_stream(llm_client, messages)
    except ChatProvidersFailed as exc:
        logger.error("[CHAT] All providers failed: %s", exc)
        hint = exc.hint if llm_client and llm_client.configured else NO_PROVIDER_HINT
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ChatErrorResponse(
                error="AI provider error", message=str(exc), hint=hint,
            ).model_dump(exclude_none=True),
        )

    return StreamingResponse(stream, media_type="text/plain; charset=utf-8")
