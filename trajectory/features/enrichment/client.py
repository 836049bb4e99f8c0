"""
Enrichment Adapter

Sends a provenance-stripped summary of today's habits and the fixed history to
the generative collaborator (Groq, JSON mode) and decodes the reply into an
AnalysisResult. The adapter interprets nothing; any transport failure or
schema violation surfaces as EnrichmentError.
"""

from typing import Any, Dict, List, Optional, Sequence

import groq
from pydantic import ValidationError

from trajectory.core.errors import EnrichmentError
from trajectory.features.enrichment.prompts import SYSTEM_PROMPT, build_prompt
from trajectory.features.momentum.scoring_engine import MomentumScoringEngine
from trajectory.models.habit import Habit, HistoryPoint
from trajectory.models.momentum import AnalysisResult

# Slope reported when the history is too short to have one
DEFAULT_SLOPE = 0.15


class EnrichmentAdapter:
    """Narrow contract around the external scoring collaborator."""

    def __init__(
        self,
        client=None,
        *,
        api_key: Optional[str] = None,
        model: str = "llama-3.1-8b-instant",
        timeout: float = 60.0,
        temperature: float = 0.4,
    ):
        self._client = client
        self._api_key = api_key
        self.model = model
        self.timeout = timeout
        self.temperature = temperature

    # ============ Request shaping ============

    @staticmethod
    def summarize_habits(habits: Sequence[Habit]) -> List[Dict[str, Any]]:
        """Name, signed weight, and completed/missed per habit."""
        return [
            {
                "name": h.name,
                "weight": MomentumScoringEngine.signed_weight(h),
                "status": "completed" if MomentumScoringEngine.is_active(h) else "missed",
            }
            for h in habits
        ]

    @staticmethod
    def baseline_slope(history: Sequence[HistoryPoint]) -> float:
        """(last - first) / len(history); DEFAULT_SLOPE for fewer than two points."""
        if len(history) > 1:
            return (history[-1].momentum - history[0].momentum) / len(history)
        return DEFAULT_SLOPE

    @staticmethod
    def build_context(history: Sequence[HistoryPoint], habits: Sequence[Habit]) -> Dict[str, Any]:
        return {
            "yesterday_final_score": MomentumScoringEngine.yesterday_score(history),
            "historical_average_slope": EnrichmentAdapter.baseline_slope(history),
            "current_matrix": EnrichmentAdapter.summarize_habits(habits),
        }

    # ============ Collaborator call ============

    def _get_client(self):
        if self._client is None:
            self._client = groq.AsyncGroq(api_key=self._api_key, timeout=self.timeout)
        return self._client

    @staticmethod
    def parse_response(content: Optional[str]) -> AnalysisResult:
        """Decode the collaborator's reply. Whole-payload accept or reject."""
        if not content:
            raise EnrichmentError("Enrichment response was empty")
        try:
            return AnalysisResult.model_validate_json(content)
        except ValidationError as e:
            raise EnrichmentError(f"Enrichment response violated schema: {e.error_count()} error(s)") from e

    async def analyze(self, history: Sequence[HistoryPoint], habits: Sequence[Habit]) -> AnalysisResult:
        """
        Request an AnalysisResult for today's habits.

        Raises:
            EnrichmentError: transport failure, timeout, empty or malformed response
        """
        context = self.build_context(history, habits)
        try:
            completion = await self._get_client().chat.completions.create(
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_prompt(context)},
                ],
                model=self.model,
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
        except groq.GroqError as e:
            raise EnrichmentError(f"Enrichment request failed: {e}") from e

        if not completion.choices:
            raise EnrichmentError("Enrichment response had no choices")
        return self.parse_response(completion.choices[0].message.content)
