"""Fixed seven-day momentum history seeded at startup. Read-only for the session."""

from typing import Tuple

from trajectory.models.habit import HistoryPoint

DEFAULT_HISTORY: Tuple[HistoryPoint, ...] = (
    HistoryPoint(date="T-7", momentum=2.0),
    HistoryPoint(date="T-6", momentum=1.5),
    HistoryPoint(date="T-5", momentum=2.2),
    HistoryPoint(date="T-4", momentum=0.8),
    HistoryPoint(date="T-3", momentum=-0.5),
    HistoryPoint(date="T-2", momentum=-1.0),
    HistoryPoint(date="T-1", momentum=0.2),
)
