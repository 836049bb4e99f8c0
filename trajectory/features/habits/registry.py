"""
Habit Registry

Owns the ordered collection of habits for a session and writes the whole
collection back to the key-value store after every mutation.

Mutations:
- add: append a new habit in its type's inactive status (blank names rejected)
- remove: drop a habit by id (unknown ids are a no-op)
- toggle: flip a habit within its status pair (unknown ids are a no-op)
"""

from typing import Iterator, List, Optional, Tuple
from uuid import uuid4

from pydantic import TypeAdapter, ValidationError
from redis.exceptions import RedisError

from trajectory.core.logging import log_event
from trajectory.features.habits.store import KeyValueStore
from trajectory.features.momentum.scoring_engine import MomentumScoringEngine
from trajectory.models.habit import Habit, HabitType

DEFAULT_STORE_KEY = "trajectory_matrix"

DEFAULT_HABITS: Tuple[Habit, ...] = (
    Habit(id="1", name="Exercise", weight=2, type="good", status="missed"),
    Habit(id="2", name="Reading", weight=1, type="good", status="missed"),
    Habit(id="3", name="Deep Work", weight=3, type="good", status="missed"),
    Habit(id="4", name="Sugar/Junk Food", weight=2.5, type="bad", status="passed"),
    Habit(id="5", name="Late Night Scrolling", weight=1.5, type="bad", status="passed"),
)

_habit_list = TypeAdapter(List[Habit])


class HabitRegistry:
    """Ordered, persisted habit collection (insertion order)."""

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_STORE_KEY, habits=None):
        self._store = store
        self._key = key
        self._habits: List[Habit] = list(DEFAULT_HABITS if habits is None else habits)

    @classmethod
    def load(cls, store: KeyValueStore, key: str = DEFAULT_STORE_KEY) -> "HabitRegistry":
        """
        Restore the persisted registry, or seed the default habits.

        Absent, unreadable, or malformed data falls back to DEFAULT_HABITS.
        Never raises for bad stored data.
        """
        try:
            raw = store.get(key)
        except (RedisError, UnicodeDecodeError) as e:
            log_event(
                "warning",
                "registry.fallback",
                event_type="registry.fallback",
                error_code="registry_unreadable",
                extra={"error": type(e).__name__},
            )
            return cls(store, key)

        if raw is None:
            log_event("info", "registry.seeded", event_type="registry.seeded", extra={"count": len(DEFAULT_HABITS)})
            return cls(store, key)

        try:
            habits = _habit_list.validate_json(raw)
        except ValidationError as e:
            log_event(
                "warning",
                "registry.fallback",
                event_type="registry.fallback",
                error_code="registry_corrupt",
                extra={"errors": e.error_count()},
            )
            return cls(store, key)

        log_event("info", "registry.loaded", event_type="registry.loaded", extra={"count": len(habits)})
        return cls(store, key, habits)

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def habits(self) -> Tuple[Habit, ...]:
        """Snapshot of the registry in insertion order."""
        return tuple(self._habits)

    def __len__(self) -> int:
        return len(self._habits)

    def __iter__(self) -> Iterator[Habit]:
        return iter(self.habits)

    def get(self, habit_id: str) -> Optional[Habit]:
        return next((h for h in self._habits if h.id == habit_id), None)

    def add(self, name: str, habit_type: HabitType, weight: float) -> Optional[Habit]:
        """Append a new habit. Returns None (and changes nothing) for a blank name."""
        if not name or not name.strip():
            return None

        habit = Habit(
            id=str(uuid4()),
            name=name,
            weight=weight,
            type=habit_type,
            status=MomentumScoringEngine.inactive_status(habit_type),
        )
        self._habits.append(habit)
        self.persist()
        log_event("info", "habit.added", habit_id=habit.id, event_type="habit.added", extra={"type": habit_type})
        return habit

    def remove(self, habit_id: str) -> bool:
        """Remove by id. Returns whether a habit was removed."""
        before = len(self._habits)
        self._habits = [h for h in self._habits if h.id != habit_id]
        self.persist()
        removed = len(self._habits) != before
        if removed:
            log_event("info", "habit.removed", habit_id=habit_id, event_type="habit.removed")
        return removed

    def toggle(self, habit_id: str) -> Optional[Habit]:
        """Flip a habit's status within its pair. Returns the updated habit, or None."""
        toggled = None
        updated = []
        for h in self._habits:
            if h.id == habit_id:
                h = h.model_copy(update={"status": MomentumScoringEngine.toggled_status(h)})
                toggled = h
            updated.append(h)
        self._habits = updated
        self.persist()
        if toggled is not None:
            log_event(
                "info",
                "habit.toggled",
                habit_id=habit_id,
                event_type="habit.toggled",
                extra={"status": toggled.status},
            )
        return toggled

    def persist(self) -> None:
        """Write the full ordered registry to the store."""
        payload = _habit_list.dump_json(self._habits).decode("utf-8")
        try:
            self._store.set(self._key, payload)
        except RedisError as e:
            log_event("error", "registry.persist_failed", event_type="registry.persist_failed", extra={"error": e})
