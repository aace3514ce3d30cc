"""
Snapshot Pipeline Nodes

One node per Market Snapshot field, run in parallel after signal
extraction, then a join node that assembles the snapshot.

Every fetch node:
- reads the shared httpx client and Settings from ``config["configurable"]``
- bounds its work with ``asyncio.wait_for``
- falls back to the static default for its field on ANY failure, logging a
  warning and recording the error in ``processing_errors``
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, TypeVar

import httpx
from langchain_core.runnables import RunnableConfig

from ...config import Settings
from ...schemas.market_schema import MarketSnapshot, MarketValidation
from ...services.data_sources import (
    DEFAULT_GROWTH,
    DEFAULT_MARKET_SIZE,
    MarketSizeEstimate,
    assess_technical_feasibility,
    build_funding_landscape,
    default_industry_insights,
    default_market_validation,
    fetch_competitors,
    fetch_industry_insights,
    fetch_market_size,
    fetch_market_validation,
    fetch_recent_news,
    get_fallback_competitors,
)
from ...services.signal_extractor import extract_signals as extract_solution_signals
from .http_client import Timeouts, get_timeout
from .state import SnapshotState
from .timing import timed_async

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ADDRESSABLE = 150.0


def _resources(config: RunnableConfig) -> tuple[httpx.AsyncClient, Settings]:
    configurable = (config or {}).get("configurable", {})
    client = configurable.get("http_client")
    if client is None:
        raise RuntimeError("Snapshot graph invoked without an http_client in config")
    return client, configurable.get("settings") or Settings()


async def _guarded(
    field: str,
    run: Callable[[], Awaitable[T]],
    fallback: Callable[[], T],
    budget: float,
) -> tuple[T, list[str]]:
    """Run one fetch within *budget* seconds; return (value, errors)."""
    try:
        return await asyncio.wait_for(run(), timeout=budget), []
    except asyncio.TimeoutError:
        message = f"{field}: timed out after {budget:g}s, using defaults"
    except Exception as exc:
        message = f"{field}: {type(exc).__name__}: {exc}, using defaults"
    logger.warning("[SNAPSHOT] %s", message)
    return fallback(), [message]


# ── Signals ─────────────────────────────────────────────────────────────

async def extract_signals(state: SnapshotState) -> Dict[str, Any]:
    submission = state["submission"]
    signals = extract_solution_signals(submission.solution, submission.problem, submission.industry)
    print(f"🔎 [SNAPSHOT] Signals: complexity={signals.complexity.value} "
          f"innovation={signals.innovation.value} scope={signals.market_scope.value}")
    return {"signals": signals}


# ── Fetch nodes (parallel) ──────────────────────────────────────────────

@timed_async("market_size")
async def fetch_market_size_node(state: SnapshotState, config: RunnableConfig) -> Dict[str, Any]:
    client, settings = _resources(config)
    submission = state["submission"]
    timeout = get_timeout("wikipedia", settings.data_source_timeout)

    value, errors = await _guarded(
        "market_size",
        lambda: fetch_market_size(client, submission.industry, submission.solution, timeout=timeout),
        lambda: MarketSizeEstimate(total=DEFAULT_MARKET_SIZE, addressable=DEFAULT_ADDRESSABLE, growth=DEFAULT_GROWTH),
        timeout + Timeouts.NODE_GRACE,
    )
    return {"market_size": value, "processing_errors": errors}


@timed_async("competitors")
async def fetch_competitors_node(state: SnapshotState, config: RunnableConfig) -> Dict[str, Any]:
    client, settings = _resources(config)
    submission = state["submission"]
    timeout = get_timeout("duckduckgo", settings.data_source_timeout)

    value, errors = await _guarded(
        "competitors",
        lambda: fetch_competitors(client, submission.solution, submission.industry, timeout=timeout),
        lambda: get_fallback_competitors(submission.solution, submission.industry),
        timeout + Timeouts.NODE_GRACE,
    )
    return {"competitors": value, "processing_errors": errors}


@timed_async("market_validation")
async def fetch_market_validation_node(state: SnapshotState, config: RunnableConfig) -> Dict[str, Any]:
    client, settings = _resources(config)
    submission = state["submission"]
    timeout = get_timeout("duckduckgo", settings.data_source_timeout)

    value, errors = await _guarded(
        "market_validation",
        lambda: fetch_market_validation(client, submission.problem, timeout=timeout),
        default_market_validation,
        timeout + Timeouts.NODE_GRACE,
    )
    return {"market_validation": value, "processing_errors": errors}


@timed_async("industry_insights")
async def fetch_industry_insights_node(state: SnapshotState, config: RunnableConfig) -> Dict[str, Any]:
    client, settings = _resources(config)
    submission = state["submission"]
    timeout = get_timeout("wikipedia", settings.data_source_timeout)

    value, errors = await _guarded(
        "industry_insights",
        lambda: fetch_industry_insights(client, submission.industry, submission.solution, timeout=timeout),
        lambda: default_industry_insights(submission.industry, submission.solution),
        timeout + Timeouts.NODE_GRACE,
    )
    return {"industry_insights": value, "processing_errors": errors}


async def build_funding_node(state: SnapshotState) -> Dict[str, Any]:
    submission = state["submission"]
    return {"funding_landscape": build_funding_landscape(submission.industry, submission.stage)}


async def assess_feasibility_node(state: SnapshotState) -> Dict[str, Any]:
    submission = state["submission"]
    return {"technical_feasibility": assess_technical_feasibility(submission.solution, submission.industry)}


@timed_async("recent_news")
async def fetch_recent_news_node(state: SnapshotState, config: RunnableConfig) -> Dict[str, Any]:
    client, settings = _resources(config)
    submission = state["submission"]
    timeout = get_timeout("newsapi", settings.data_source_timeout)

    value, errors = await _guarded(
        "recent_news",
        lambda: fetch_recent_news(
            client,
            submission.solution,
            submission.problem,
            submission.industry,
            settings.news_api_key,
            timeout=timeout,
        ),
        list,
        timeout + Timeouts.NODE_GRACE,
    )
    return {"recent_news": value, "processing_errors": errors}


# ── Join ────────────────────────────────────────────────────────────────

async def assemble_snapshot(state: SnapshotState) -> Dict[str, Any]:
    market_size = state.get("market_size")
    validation: MarketValidation = state.get("market_validation") or default_market_validation()

    snapshot = MarketSnapshot(
        total_market_size=market_size.total if market_size else None,
        addressable_market=market_size.addressable if market_size else None,
        growth_rate=market_size.growth if market_size else None,
        competitors=state.get("competitors"),
        market_validation=validation,
        industry_insights=state.get("industry_insights"),
        funding_landscape=state.get("funding_landscape"),
        technical_feasibility=state.get("technical_feasibility"),
        recent_news=state.get("recent_news"),
    )

    errors = state.get("processing_errors") or []
    print(f"🧩 [SNAPSHOT] Assembled: {len(snapshot.competitors or [])} competitors, "
          f"{len(errors)} fetch errors")
    return {"snapshot": snapshot}
