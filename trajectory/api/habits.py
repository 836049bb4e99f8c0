"""
Habit API Endpoints

GET    /v1/habits              — registry in insertion order
POST   /v1/habits              — add a habit (starts inactive)
DELETE /v1/habits/{id}         — remove a habit (idempotent)
POST   /v1/habits/{id}/toggle  — flip a habit within its status pair
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from trajectory.api.deps import get_session
from trajectory.core.errors import ValidationError
from trajectory.core.logging import get_request_id
from trajectory.features.momentum.service import MomentumSession
from trajectory.models.habit import HabitType

router = APIRouter(prefix="/v1/habits", tags=["habits"])

Session = Annotated[MomentumSession, Depends(get_session)]


class CreateHabitRequest(BaseModel):
    name: str
    type: HabitType = "good"
    weight: float = Field(2, ge=1, le=5)


def _registry_payload(session: MomentumSession) -> dict:
    return {
        "data": [h.model_dump() for h in session.registry.habits],
        "local_momentum": session.local_momentum,
    }


@router.get("")
def list_habits(session: Session):
    return _registry_payload(session)


@router.post("", status_code=201)
def create_habit(body: CreateHabitRequest, request: Request, session: Session):
    """Add a habit. Blank names are rejected and leave the registry unchanged."""
    habit = session.add_habit(body.name, body.type, body.weight)
    if habit is None:
        rid = getattr(request.state, "request_id", None) or get_request_id()
        raise ValidationError("Habit name must not be blank", request_id=rid)
    return {"data": habit.model_dump(), "local_momentum": session.local_momentum}


@router.delete("/{habit_id}")
def delete_habit(habit_id: str, session: Session):
    session.remove_habit(habit_id)
    return _registry_payload(session)


@router.post("/{habit_id}/toggle")
def toggle_habit(habit_id: str, session: Session):
    session.toggle_habit(habit_id)
    return _registry_payload(session)
