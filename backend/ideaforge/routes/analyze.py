import time

import httpx
from fastapi import APIRouter, Depends, Response

from ..agents.idea_analysis import build_market_snapshot
from ..config import Settings
from ..dependencies import get_http_client, get_llm_client, get_settings
from ..schemas.analysis_schema import AnalysisReport
from ..schemas.idea_schema import IdeaSubmission
from ..services.analysis_service import AnalysisService
from ..services.llm_client import LLMClient

router = APIRouter(
    prefix="/analyze",
    tags=["Analysis"],
)


@router.post(
    "",
    response_model=AnalysisReport,
    summary="Validate a Startup Idea",
    response_description="Scores, SWOT, audience, monetization, roadmap and the real-world data used",
)
async def analyze_idea(
    submission: IdeaSubmission,
    response: Response,
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
    llm_client: LLMClient = Depends(get_llm_client),
) -> AnalysisReport:
    """Gather the Market Snapshot, then run the analysis ladder.

    The report has the same shape whether it came from an LLM or from the
    deterministic scoring engine; ``X-Analysis-Strategy`` says which.
    """
    request_start = time.perf_counter()
    print(f"🚀 [ANALYZE] '{submission.startup_name}' ({submission.industry}, {submission.stage})")

    state = await build_market_snapshot(submission, http_client, settings)
    outcome = await AnalysisService(llm_client).analyze(
        submission,
        state.get("snapshot"),
        state.get("signals"),
    )

    response.headers["X-Analysis-Strategy"] = outcome.strategy
    elapsed_ms = (time.perf_counter() - request_start) * 1000
    print(f"[TIMING] analyze: TOTAL (duration={elapsed_ms:.0f}ms, strategy={outcome.strategy})")
    return outcome.report
