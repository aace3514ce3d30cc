"""Analysis strategy ladder.

Strategies run in order until one succeeds:

  1. ``full_prompt``    : LLM with submission + Market Snapshot + signals
  2. ``reduced_prompt`` : LLM with the submission only (skipped after an
                          auth failure; a rejected key will not recover)
  3. ``deterministic``  : the scoring engine; always succeeds

Every attempt is recorded as a ``StrategyResult`` on the returned
``AnalysisOutcome``.  There are no retries beyond the ladder itself.
Any exception from a provider or from report validation fails only that
step; the deterministic step always produces a report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from pydantic import ValidationError

from ..schemas.analysis_schema import AnalysisReport
from ..schemas.idea_schema import IdeaSubmission
from ..schemas.market_schema import MarketSnapshot, real_world_from_snapshot
from .llm_client import LLMClient, ProviderAuthError, ProviderError
from .mock_analysis import generate_mock_analysis
from .prompt_builder import build_full_prompt, build_reduced_prompt
from .signal_extractor import SolutionSignals, extract_signals

logger = logging.getLogger(__name__)

FULL_PROMPT = "full_prompt"
REDUCED_PROMPT = "reduced_prompt"
DETERMINISTIC = "deterministic"

FAILURE_AUTH = "auth"
FAILURE_PROVIDER = "provider"
FAILURE_SCHEMA = "schema"


@dataclass
class StrategyResult:
    name: str
    ok: bool
    report: Optional[AnalysisReport] = None
    reason: Optional[str] = None
    failure_kind: Optional[str] = None


@dataclass
class AnalysisOutcome:
    report: AnalysisReport
    attempts: List[StrategyResult] = field(default_factory=list)

    @property
    def strategy(self) -> str:
        return next(a.name for a in self.attempts if a.ok)

    @property
    def used_llm(self) -> bool:
        return self.strategy != DETERMINISTIC


class AnalysisService:
    """Runs the strategy ladder against an injected ``LLMClient``."""

    def __init__(self, llm_client: Optional[LLMClient] = None) -> None:
        self.llm_client = llm_client

    async def _llm_strategy(
        self,
        name: str,
        prompt: str,
        snapshot: MarketSnapshot,
    ) -> StrategyResult:
        if self.llm_client is None or not self.llm_client.configured:
            return StrategyResult(name, ok=False, reason="No API keys available", failure_kind=FAILURE_AUTH)

        try:
            raw: Dict[str, Any] = await self.llm_client.generate_json(prompt)
        except ProviderAuthError as exc:
            return StrategyResult(name, ok=False, reason=str(exc), failure_kind=FAILURE_AUTH)
        except ProviderError as exc:
            return StrategyResult(name, ok=False, reason=str(exc), failure_kind=FAILURE_PROVIDER)
        except Exception as exc:
            logger.exception("[ANALYZE] %s: unexpected provider failure", name)
            return StrategyResult(
                name, ok=False, reason=f"{type(exc).__name__}: {exc}", failure_kind=FAILURE_PROVIDER,
            )
        if not isinstance(raw, dict):
            return StrategyResult(
                name, ok=False, reason="Model output is not a JSON object", failure_kind=FAILURE_SCHEMA,
            )

        # The echo always reflects the data we gathered, not what the model restated.
        raw["realWorldData"] = real_world_from_snapshot(snapshot).model_dump(by_alias=True)
        raw.pop("real_world_data", None)
        try:
            report = AnalysisReport.model_validate(raw)
        except ValidationError as exc:
            return StrategyResult(
                name,
                ok=False,
                reason=f"Model output failed schema validation ({exc.error_count()} errors)",
                failure_kind=FAILURE_SCHEMA,
            )
        except Exception as exc:
            logger.exception("[ANALYZE] %s: model output could not be validated", name)
            return StrategyResult(
                name, ok=False, reason=f"{type(exc).__name__}: {exc}", failure_kind=FAILURE_SCHEMA,
            )
        return StrategyResult(name, ok=True, report=report)

    async def analyze(
        self,
        submission: IdeaSubmission,
        snapshot: Optional[MarketSnapshot] = None,
        signals: Optional[SolutionSignals] = None,
    ) -> AnalysisOutcome:
        snapshot = snapshot or MarketSnapshot()
        signals = signals or extract_signals(submission.solution, submission.problem, submission.industry)

        strategies: List[tuple[str, Callable[[], Awaitable[StrategyResult]]]] = [
            (FULL_PROMPT, lambda: self._llm_strategy(
                FULL_PROMPT, build_full_prompt(submission, snapshot, signals), snapshot)),
            (REDUCED_PROMPT, lambda: self._llm_strategy(
                REDUCED_PROMPT, build_reduced_prompt(submission), snapshot)),
        ]

        attempts: List[StrategyResult] = []
        for name, run in strategies:
            if attempts and attempts[-1].failure_kind == FAILURE_AUTH:
                print(f"⏭️  [ANALYZE] Skipping {name}: credentials unavailable")
                break
            result = await run()
            attempts.append(result)
            if result.ok:
                print(f"✅ [ANALYZE] {name} succeeded for '{submission.startup_name}'")
                return AnalysisOutcome(report=result.report, attempts=attempts)
            logger.warning("[ANALYZE] %s failed (%s): %s", name, result.failure_kind, result.reason)

        report = generate_mock_analysis(submission, snapshot)
        attempts.append(StrategyResult(DETERMINISTIC, ok=True, report=report))
        print(f"🧮 [ANALYZE] Using deterministic analysis for '{submission.startup_name}'")
        return AnalysisOutcome(report=report, attempts=attempts)
