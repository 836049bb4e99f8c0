# trajectory/conftest.py
import os

import pytest

os.environ.setdefault("SKIP_ENV_VALIDATION", "1")

from trajectory.features.enrichment.client import EnrichmentAdapter
from trajectory.features.habits.registry import HabitRegistry
from trajectory.features.habits.store import InMemoryStore
from trajectory.features.momentum.service import MomentumSession
from trajectory.tests.mocks import FakeAsyncGroq


@pytest.fixture
def store():
    """Fresh in-memory key-value store per test."""
    return InMemoryStore()


@pytest.fixture
def registry(store):
    """Registry seeded with the default habits."""
    return HabitRegistry.load(store)


@pytest.fixture
def fake_groq():
    return FakeAsyncGroq()


@pytest.fixture
def adapter(fake_groq):
    return EnrichmentAdapter(client=fake_groq)


@pytest.fixture
def session(registry, adapter):
    return MomentumSession(registry, adapter)


@pytest.fixture
def app(session):
    """App wired to the per-test session (no shared state between tests)."""
    from trajectory.main import create_app

    return create_app(session=session)
