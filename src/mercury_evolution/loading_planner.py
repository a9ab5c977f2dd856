# mercury_evolution/loading_planner.py
"""
Loading Planner.

Turns ranked knowledge paths into a token-bounded loading plan. Token cost is
a fixed per-step estimate; no content is measured.

Walks the ranked list in order, taking every path that still fits the budget,
and stops once the plan reaches 80% of the budget.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from mercury_evolution.constants import (
    DEFAULT_MAX_TOKENS,
    PLAN_STOP_RATIO,
    TOKENS_PER_STEP,
)
from mercury_evolution.models import LoadingPlan, PlannedPath, ScoredPath


class LoadingPlannerConfig(BaseModel):
    """Configuration for loading plans."""

    tokens_per_step: int = Field(default=TOKENS_PER_STEP, description="Estimated tokens per visited resource")
    stop_ratio: float = Field(default=PLAN_STOP_RATIO, description="Stop once this share of the budget is used")


class LoadingPlanner(BaseModel):
    """Greedy, order-preserving selection of ranked paths under a token budget."""

    config: LoadingPlannerConfig = Field(default_factory=LoadingPlannerConfig)

    def estimate_tokens(self, scored: ScoredPath) -> int:
        return len(scored.path.sequence) * self.config.tokens_per_step

    def plan(
        self,
        ranked: list[ScoredPath],
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> LoadingPlan:
        """
        Select a prefix-ordered subset of ``ranked`` to load.

        Args:
            ranked: Scored paths, most relevant first
            max_tokens: Token budget; the plan never exceeds it

        Returns:
            LoadingPlan with the accepted entries and their token total
        """
        loaded: list[PlannedPath] = []
        skipped: list[str] = []
        total = 0
        stop_at = max_tokens * self.config.stop_ratio

        for scored in ranked:
            tokens = self.estimate_tokens(scored)
            entry_point = scored.path.entry_point

            if total + tokens <= max_tokens:
                if entry_point is not None:
                    loaded.append(
                        PlannedPath(
                            path=entry_point,
                            gradient=scored.score,
                            tokens=tokens,
                            path_id=scored.path.id,
                        )
                    )
                    total += tokens
            else:
                skipped.append(scored.path.id)

            if total >= stop_at:
                break

        return LoadingPlan(
            loaded_paths=loaded,
            total_tokens=total,
            max_tokens=max_tokens,
            skipped=skipped,
        )
