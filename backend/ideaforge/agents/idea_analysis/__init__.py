from .graph import build_market_snapshot, create_snapshot_graph, snapshot_graph

__all__ = ["build_market_snapshot", "create_snapshot_graph", "snapshot_graph"]
