"""Snapshot pipeline tests: fan-out/fan-in, per-node isolation, error recording."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio

import httpx

from ideaforge.agents.idea_analysis import build_market_snapshot
from ideaforge.agents.idea_analysis.graph import FETCH_NODES
from ideaforge.config import Settings
from ideaforge.schemas.idea_schema import IdeaSubmission
from ideaforge.schemas.market_schema import MarketSnapshot


def make_submission(**overrides) -> IdeaSubmission:
    data = {
        "startup_name": "ParkPal",
        "description": "Find parking fast",
        "problem": "Drivers waste time circling for parking",
        "solution": "A parking spot finder",
        "target_market": "Urban commuters",
        "industry": "Technology",
        "stage": "launched",
    }
    data.update(overrides)
    return IdeaSubmission(**data)


def run_graph(handler, submission=None, settings=None):
    async def _main():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await build_market_snapshot(submission or make_submission(), client, settings or Settings())
    return asyncio.run(_main())


class TestSnapshotGraph:
    def test_seven_parallel_fetch_nodes(self):
        assert len(FETCH_NODES) == 7

    def test_upstream_errors_still_yield_full_snapshot(self):
        state = run_graph(lambda request: httpx.Response(503))
        snapshot = state["snapshot"]

        assert isinstance(snapshot, MarketSnapshot)
        assert snapshot.total_market_size == 5200.0
        assert snapshot.growth_rate == 13.2
        assert snapshot.competitors and snapshot.competitors[0].name == "Microsoft"
        assert snapshot.market_validation.search_trends == "Moderate interest"
        assert snapshot.funding_landscape.average_funding == "$1M - $8M"
        assert snapshot.technical_feasibility is not None
        assert snapshot.recent_news == []
        assert state["processing_errors"] == []
        assert state["signals"] is not None

    def test_raising_fetchers_are_isolated_and_recorded(self):
        def exploding(request):
            raise RuntimeError("boom")

        state = run_graph(exploding)
        snapshot = state["snapshot"]

        fields = sorted(e.split(":")[0] for e in state["processing_errors"])
        assert fields == ["competitors", "industry_insights", "market_validation"]
        assert snapshot.competitors[0].name == "Microsoft"
        assert snapshot.market_validation.discussion_activity == "Limited discussion"
        assert snapshot.industry_insights.challenges

    def test_news_fetched_with_key(self):
        def handler(request):
            if "newsapi" in request.url.host:
                return httpx.Response(200, json={"articles": [
                    {"title": "Parking startups raise", "source": {"name": "Wire"}, "publishedAt": "2024-05-01"},
                ]})
            return httpx.Response(404)

        state = run_graph(handler, settings=Settings(news_api_key="k"))
        assert [n.title for n in state["snapshot"].recent_news] == ["Parking startups raise"]
