"""Runtime configuration.

Every setting is read once from the environment (after ``load_dotenv``) into
a ``Settings`` instance that the app builds at startup and passes to the
services that need it.  Nothing below holds module-level client state.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from .constants import DEFAULT_HISTORY_LIMIT


def _env_float(key: str, default: float) -> float:
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


def _env_str(key: str) -> Optional[str]:
    value = os.getenv(key, "").strip()
    return value or None


def _env_list(key: str, default: list[str]) -> list[str]:
    raw = os.getenv(key, "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


_DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",      # Next.js dev server
    "http://127.0.0.1:3000",
    "http://localhost:3001",
]


@dataclass
class Settings:
    """Recognized configuration options for the service."""

    google_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    news_api_key: Optional[str] = None

    gemini_model: str = "gemini-1.5-flash"
    openai_model: str = "gpt-4o-mini"
    llm_temperature: float = 0.9
    llm_timeout: float = 40.0

    data_source_timeout: float = 5.0
    history_limit: int = DEFAULT_HISTORY_LIMIT

    database_url: str = "sqlite:///./ideaforge.db"
    cors_origins: list[str] = field(default_factory=lambda: list(_DEFAULT_CORS_ORIGINS))
    debug: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            google_api_key=_env_str("GOOGLE_GENERATIVE_AI_API_KEY"),
            openai_api_key=_env_str("OPENAI_API_KEY"),
            news_api_key=_env_str("NEWS_API_KEY"),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-1.5-flash").strip(),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini").strip(),
            llm_temperature=_env_float("LLM_TEMPERATURE", 0.9),
            llm_timeout=_env_float("LLM_REQUEST_TIMEOUT", 40.0),
            data_source_timeout=_env_float("DATA_SOURCE_TIMEOUT", 5.0),
            history_limit=_env_int("HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT),
            database_url=os.getenv("DATABASE_URL", "sqlite:///./ideaforge.db"),
            cors_origins=_env_list("CORS_ORIGINS", _DEFAULT_CORS_ORIGINS),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )

    @property
    def has_llm_credentials(self) -> bool:
        return bool(self.google_api_key or self.openai_api_key)
