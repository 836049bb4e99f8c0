"""
Momentum API Endpoints

GET    /v1/momentum/today     — today's blended score and verdict
GET    /v1/momentum/history   — fixed seven-day history
POST   /v1/momentum/analyze   — request enrichment (one at a time)
DELETE /v1/momentum/analysis  — drop the enrichment result
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from trajectory.api.deps import get_session
from trajectory.core.errors import EnrichmentError
from trajectory.core.logging import get_request_id
from trajectory.features.enrichment.client import EnrichmentAdapter
from trajectory.features.momentum.service import MomentumSession

router = APIRouter(prefix="/v1/momentum", tags=["momentum"])

Session = Annotated[MomentumSession, Depends(get_session)]


@router.get("/today")
def get_momentum_today(session: Session) -> dict:
    """
    Get today's momentum.

    Returns:
        {
            "data": {
                "yesterday_score": 0.2,
                "local_momentum": -0.5,
                "current_score": -0.5,
                "verdict": "worse",
                "verdict_header": "YOU HAVE REGRESSED FROM THE PERSON YOU WERE YESTERDAY.",
                "source": "local",
                "analyzing": false,
                "stale": false,
                "analysis": null
            }
        }
    """
    return {"data": session.view().model_dump(mode="json")}


@router.get("/history")
def get_momentum_history(session: Session) -> dict:
    return {
        "data": [p.model_dump() for p in session.history],
        "historical_average_slope": EnrichmentAdapter.baseline_slope(session.history),
    }


@router.post("/analyze")
async def analyze_momentum(request: Request, session: Session) -> dict:
    """
    Ask the collaborator for an enriched analysis and wait for it.

    409 while another analysis is pending; 502 if the collaborator fails
    (the previous analysis, if any, is kept).
    """
    rid = getattr(request.state, "request_id", None) or get_request_id()
    result = await session.analyze()
    if result is None:
        raise EnrichmentError("Analysis failed; previous result kept", request_id=rid)
    return {"data": session.view().model_dump(mode="json"), "request_id": rid}


@router.delete("/analysis")
def clear_analysis(session: Session) -> dict:
    session.clear_analysis()
    return {"data": session.view().model_dump(mode="json")}
