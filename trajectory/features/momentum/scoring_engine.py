"""
Momentum Scoring Engine

Pure, deterministic computation of momentum from the habit registry.
No external calls, no randomness, no side effects.

Scoring philosophy:
- An active good habit (done) adds its weight
- An active bad habit (failed to resist) subtracts its weight
- Inactive habits (missed / passed) contribute nothing
- No rounding, no clamping

Verdicts compare a score with yesterday's final score using exact equality.
Near-equal floats therefore classify as better/worse rather than stagnant.
"""

import math
from typing import Iterable, Sequence

from trajectory.models.habit import STATUS_PAIRS, Habit, HabitStatus, HabitType, HistoryPoint
from trajectory.models.momentum import Verdict


class MomentumScoringEngine:
    """Pure deterministic momentum scoring."""

    ACTIVE_STATUSES = frozenset({"done", "failed"})

    @staticmethod
    def is_active(habit: Habit) -> bool:
        """True when the habit counts toward today's score."""
        return habit.status in MomentumScoringEngine.ACTIVE_STATUSES

    @staticmethod
    def signed_weight(habit: Habit) -> float:
        """Weight with polarity folded into the sign."""
        return habit.weight if habit.type == "good" else -habit.weight

    @staticmethod
    def local_momentum(habits: Iterable[Habit]) -> float:
        """
        Sum of signed weights over active habits.

        Uses an exactly rounded sum so the result does not depend on
        iteration order. Returns 0.0 for an empty collection.
        """
        return math.fsum(
            MomentumScoringEngine.signed_weight(h)
            for h in habits
            if MomentumScoringEngine.is_active(h)
        )

    @staticmethod
    def classify(score: float, baseline: float) -> Verdict:
        """
        Classify a score against a baseline (yesterday's final score).

        Applies to local and enriched scores alike.
        """
        if score > baseline:
            return Verdict.BETTER
        if score < baseline:
            return Verdict.WORSE
        return Verdict.STAGNANT

    @staticmethod
    def inactive_status(habit_type: HabitType) -> HabitStatus:
        """Status a new habit of this type starts with."""
        return STATUS_PAIRS[habit_type][1]

    @staticmethod
    def toggled_status(habit: Habit) -> HabitStatus:
        """The other status of the habit's type pair."""
        active, inactive = STATUS_PAIRS[habit.type]
        return inactive if habit.status == active else active

    @staticmethod
    def yesterday_score(history: Sequence[HistoryPoint]) -> float:
        """Last history point's momentum, 0.0 when there is no history."""
        return history[-1].momentum if history else 0.0
