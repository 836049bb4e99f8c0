"""
Habit domain models.

A habit is a binary daily behaviour with a polarity (good or bad) and a weight.
Its status is always drawn from the pair that belongs to its type:
good habits are done/missed, bad habits are failed/passed.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


HabitType = Literal["good", "bad"]
HabitStatus = Literal["done", "missed", "passed", "failed"]

# (active, inactive) status pair per type
STATUS_PAIRS = {
    "good": ("done", "missed"),
    "bad": ("failed", "passed"),
}


class Habit(BaseModel):
    """
    One tracked habit.

    Attributes:
        id: Opaque identifier, stable across toggles
        name: Display name
        weight: Magnitude of the habit's contribution to momentum
        type: Polarity; good adds weight, bad subtracts it
        status: Today's state within the type's status pair
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    weight: float  # [1, 5] is enforced at creation only
    type: HabitType
    status: HabitStatus

    @model_validator(mode="after")
    def _status_matches_type(self) -> "Habit":
        if self.status not in STATUS_PAIRS[self.type]:
            raise ValueError(f"status '{self.status}' is not valid for a {self.type} habit")
        return self


class HistoryPoint(BaseModel):
    """Final momentum of one past day. The last point in a series is yesterday."""

    model_config = ConfigDict(frozen=True)

    date: str
    momentum: float
