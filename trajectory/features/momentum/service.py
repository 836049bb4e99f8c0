"""
Momentum Session

Owns one user's session state: the habit registry, the fixed history, the
latest enrichment result, and the single in-flight enrichment guard.

Habit mutations are synchronous and apply immediately, even while an
enrichment request is pending. A result that arrives later replaces the
displayed score and verdict without reconciliation; `stale` on the view tells
the client that the registry changed after the request was issued.
"""

import asyncio
from typing import Optional, Sequence, Tuple

from trajectory.core.errors import EnrichmentError, EnrichmentInProgressError
from trajectory.core.logging import log_event
from trajectory.features.enrichment.client import EnrichmentAdapter
from trajectory.features.habits.registry import HabitRegistry
from trajectory.features.momentum.history import DEFAULT_HISTORY
from trajectory.features.momentum.scoring_engine import MomentumScoringEngine
from trajectory.models.habit import Habit, HabitType, HistoryPoint
from trajectory.models.momentum import VERDICT_HEADERS, AnalysisResult, MomentumView, Verdict


class MomentumSession:
    """Explicitly owned session state; one per running app."""

    def __init__(
        self,
        registry: HabitRegistry,
        adapter: EnrichmentAdapter,
        history: Sequence[HistoryPoint] = DEFAULT_HISTORY,
    ):
        self.registry = registry
        self.history: Tuple[HistoryPoint, ...] = tuple(history)
        self._adapter = adapter
        self._analysis: Optional[AnalysisResult] = None
        self._analysis_revision = 0
        self._pending: Optional[asyncio.Task] = None
        self.revision = 0

    # ============ Habit mutations ============

    def add_habit(self, name: str, habit_type: HabitType, weight: float) -> Optional[Habit]:
        habit = self.registry.add(name, habit_type, weight)
        if habit is not None:
            self.revision += 1
        return habit

    def remove_habit(self, habit_id: str) -> bool:
        removed = self.registry.remove(habit_id)
        if removed:
            self.revision += 1
        return removed

    def toggle_habit(self, habit_id: str) -> Optional[Habit]:
        habit = self.registry.toggle(habit_id)
        if habit is not None:
            self.revision += 1
        return habit

    # ============ Derived view ============

    @property
    def yesterday_score(self) -> float:
        return MomentumScoringEngine.yesterday_score(self.history)

    @property
    def local_momentum(self) -> float:
        return MomentumScoringEngine.local_momentum(self.registry.habits)

    @property
    def analysis(self) -> Optional[AnalysisResult]:
        return self._analysis

    @property
    def current_score(self) -> float:
        """Enriched score when available, else the local one."""
        if self._analysis is not None:
            return self._analysis.daily_momentum
        return self.local_momentum

    @property
    def verdict(self) -> Verdict:
        return MomentumScoringEngine.classify(self.current_score, self.yesterday_score)

    @property
    def verdict_header(self) -> str:
        if self._analysis is not None:
            return self._analysis.verdict_header
        return VERDICT_HEADERS[self.verdict]

    @property
    def analyzing(self) -> bool:
        return self._pending is not None

    @property
    def stale(self) -> bool:
        return self._analysis is not None and self._analysis_revision != self.revision

    def view(self) -> MomentumView:
        return MomentumView(
            yesterday_score=self.yesterday_score,
            local_momentum=self.local_momentum,
            current_score=self.current_score,
            verdict=self.verdict,
            verdict_header=self.verdict_header,
            source="enrichment" if self._analysis is not None else "local",
            analyzing=self.analyzing,
            stale=self.stale,
            analysis=self._analysis,
        )

    def clear_analysis(self) -> None:
        self._analysis = None

    # ============ Enrichment ============

    def start_analysis(self) -> "asyncio.Task[Optional[AnalysisResult]]":
        """
        Issue one enrichment request as a task.

        The guard is taken before the task exists and released by a done
        callback, so it clears exactly once whether the task succeeds, fails,
        or is cancelled.

        Raises:
            EnrichmentInProgressError: a request is already outstanding
        """
        if self._pending is not None:
            raise EnrichmentInProgressError("An analysis is already in progress")

        revision = self.revision
        task = asyncio.create_task(self._run_analysis(self.registry.habits, revision))
        self._pending = task
        task.add_done_callback(self._release)
        log_event("info", "enrichment.started", event_type="enrichment.started", extra={"revision": revision})
        return task

    async def analyze(self) -> Optional[AnalysisResult]:
        """Run enrichment and wait for it. Returns None when the collaborator failed."""
        return await self.start_analysis()

    def cancel_analysis(self) -> bool:
        """Cancel the outstanding request, if any. The prior result is kept."""
        if self._pending is None:
            return False
        return self._pending.cancel()

    def _release(self, task: asyncio.Task) -> None:
        if self._pending is task:
            self._pending = None

    async def _run_analysis(self, habits: Sequence[Habit], revision: int) -> Optional[AnalysisResult]:
        try:
            result = await self._adapter.analyze(self.history, habits)
        except EnrichmentError as e:
            log_event(
                "warning",
                "enrichment.failed",
                event_type="enrichment.failed",
                error_code=e.code,
                extra={"error": e.message},
            )
            return None

        self._analysis = result
        self._analysis_revision = revision
        log_event(
            "info",
            "enrichment.completed",
            event_type="enrichment.completed",
            extra={"daily_momentum": result.daily_momentum, "stale": self.stale},
        )
        return result
