from fastapi import APIRouter

from ..schemas.comparison_schema import ComparisonMetrics, ComparisonRequest
from ..schemas.market_schema import snapshot_from_real_world
from ..services.comparison_engine import calculate_comparison_scores

router = APIRouter(
    prefix="/compare",
    tags=["Analysis"],
)


@router.post(
    "",
    response_model=ComparisonMetrics,
    summary="Compare an Idea Against Real-World Data",
    response_description="Four alignment sub-scores, the weighted overall score and insights",
)
def compare_idea(body: ComparisonRequest) -> ComparisonMetrics:
    """Recompute Comparison Metrics from the form data, the real-world data echo and scores."""
    snapshot = snapshot_from_real_world(body.real_world_data) if body.real_world_data else None
    return calculate_comparison_scores(body.form_data, snapshot, body.analysis_data)
