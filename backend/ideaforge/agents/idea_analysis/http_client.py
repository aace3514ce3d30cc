"""
Async HTTP Client Configuration

Builds the httpx.AsyncClient shared by the market data fetchers and the
Gemini provider, and holds the timeout presets for each public source.
The client is owned by the app lifespan (or a single request), never by
this module.
"""

import httpx


# Timeout configurations (in seconds)
class Timeouts:
    """Timeout presets for external services."""
    WIKIPEDIA = 5.0
    DUCKDUCKGO = 4.0
    NEWSAPI = 5.0

    # Extra time a fetch node gets on top of its request timeout before bailing out
    NODE_GRACE = 1.0


def create_client() -> httpx.AsyncClient:
    """Create an async HTTP client with connection pooling."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(10.0, connect=5.0),
        limits=httpx.Limits(max_keepalive_connections=20, max_connections=50),
        follow_redirects=True,
        headers={"User-Agent": "IdeaForge/0.1 (startup idea validation)"},
    )


def get_timeout(service: str, cap: float) -> float:
    """Request timeout for a source, never above the configured cap."""
    timeouts = {
        "wikipedia": Timeouts.WIKIPEDIA,
        "duckduckgo": Timeouts.DUCKDUCKGO,
        "newsapi": Timeouts.NEWSAPI,
    }
    return min(timeouts.get(service.lower(), cap), cap)
