from typing import Optional

import httpx
from langgraph.graph import END, START, StateGraph

from ...config import Settings
from ...schemas.idea_schema import IdeaSubmission
from .nodes import (
    assemble_snapshot,
    assess_feasibility_node,
    build_funding_node,
    extract_signals,
    fetch_competitors_node,
    fetch_industry_insights_node,
    fetch_market_size_node,
    fetch_market_validation_node,
    fetch_recent_news_node,
)
from .state import SnapshotState
from .timing import async_timer, log_timing

FETCH_NODES = {
    "fetch_market_size": fetch_market_size_node,
    "fetch_competitors": fetch_competitors_node,
    "fetch_market_validation": fetch_market_validation_node,
    "fetch_industry_insights": fetch_industry_insights_node,
    "build_funding_landscape": build_funding_node,
    "assess_technical_feasibility": assess_feasibility_node,
    "fetch_recent_news": fetch_recent_news_node,
}


def create_snapshot_graph() -> StateGraph:
    """
    Create the Market Snapshot pipeline graph.

    Structure:
    START -> extract_signals
          -> [7 fetch nodes] (parallel)
          -> assemble_snapshot
          -> END
    """
    log_timing("graph", "Creating snapshot graph")

    graph = StateGraph(SnapshotState)

    graph.add_node("extract_signals", extract_signals)
    for name, node in FETCH_NODES.items():
        graph.add_node(name, node)
    graph.add_node("assemble_snapshot", assemble_snapshot)

    graph.add_edge(START, "extract_signals")

    # Fan-out after signals, fan-in at the join
    for name in FETCH_NODES:
        graph.add_edge("extract_signals", name)
        graph.add_edge(name, "assemble_snapshot")

    graph.add_edge("assemble_snapshot", END)

    return graph


snapshot_graph = create_snapshot_graph().compile()


async def build_market_snapshot(
    submission: IdeaSubmission,
    http_client: httpx.AsyncClient,
    settings: Optional[Settings] = None,
) -> SnapshotState:
    """Run the pipeline for one submission and return its final state."""
    initial_state: SnapshotState = {"submission": submission, "processing_errors": []}
    config = {"configurable": {"http_client": http_client, "settings": settings or Settings()}}

    async with async_timer("snapshot_graph", "GRAPH"):
        return await snapshot_graph.ainvoke(initial_state, config=config)
