"""Request-scoped dependencies.

The app lifespan builds one ``Settings``, one ``httpx.AsyncClient`` and one
``LLMClient`` and stores them on ``app.state``.  When the app runs without
its lifespan, each request builds its own and closes the HTTP client
afterwards.  Tests replace these through ``app.dependency_overrides``.
"""

from typing import AsyncIterator

import httpx
from fastapi import Depends, Request

from .agents.idea_analysis.http_client import create_client
from .config import Settings
from .services.llm_client import LLMClient


def get_settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    return settings or Settings.from_env()


async def get_http_client(request: Request) -> AsyncIterator[httpx.AsyncClient]:
    shared = getattr(request.app.state, "http_client", None)
    if shared is not None:
        yield shared
        return

    client = create_client()
    try:
        yield client
    finally:
        await client.aclose()


def get_llm_client(
    request: Request,
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> LLMClient:
    shared = getattr(request.app.state, "llm_client", None)
    if shared is not None:
        return shared
    return LLMClient.from_settings(settings, http_client)
