"""
Momentum domain model.

Momentum answers: "Am I a better person than I was yesterday?"
Today's score is either computed locally from the habit registry or supplied by
the enrichment collaborator; both are judged by the same verdict rule.
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


SlopeGradient = Literal["climbing", "flat", "declining"]
RiskAssessment = Literal["low", "moderate", "high"]


class Verdict(str, Enum):
    """Today's momentum compared with yesterday's."""
    BETTER = "better"
    WORSE = "worse"
    STAGNANT = "stagnant"


VERDICT_HEADERS = {
    Verdict.BETTER: "YOU ARE A BETTER PERSON THAN YOU WERE YESTERDAY.",
    Verdict.WORSE: "YOU HAVE REGRESSED FROM THE PERSON YOU WERE YESTERDAY.",
    Verdict.STAGNANT: "YOU ARE STAGNANT; EQUILIBRIUM IS THE FIRST STAGE OF DECAY.",
}


class AnalysisResult(BaseModel):
    """
    Enrichment produced by the scoring collaborator.

    Decoded strictly: every field is required and typed; a payload that does
    not fit is rejected whole. Unknown extra keys are ignored.
    """

    model_config = ConfigDict(frozen=True, strict=True, extra="ignore")

    verdict_header: str
    daily_momentum: float
    slope_gradient: SlopeGradient
    risk_assessment: RiskAssessment
    projection_30_days: str
    ai_summary: str


class MomentumView(BaseModel):
    """What a client renders for today: the blended score and its verdict."""

    yesterday_score: float
    local_momentum: float
    current_score: float
    verdict: Verdict
    verdict_header: str
    source: Literal["local", "enrichment"]
    analyzing: bool
    stale: bool = Field(False, description="Registry changed since the analysis was requested")
    analysis: Optional[AnalysisResult] = None
