"""
Session enrichment tests.

Verify:
1. Local score and verdict until an analysis arrives, enriched afterwards
2. One request at a time; a second call while pending is rejected
3. The in-flight flag clears on success, failure, and cancellation
4. Failures keep the previous analysis
5. Mutations during a pending request apply immediately; late results overwrite
"""

import asyncio
import json

import pytest

from trajectory.core.errors import EnrichmentInProgressError
from trajectory.features.enrichment.client import EnrichmentAdapter
from trajectory.features.momentum.service import MomentumSession
from trajectory.models.momentum import VERDICT_HEADERS, AnalysisResult, Verdict
from trajectory.tests.mocks import VALID_ANALYSIS, FakeAsyncGroq, connection_error


def _session(registry, client):
    return MomentumSession(registry, EnrichmentAdapter(client=client))


class TestLocalView:
    def test_defaults_are_worse_than_yesterday(self, session):
        # 0 local vs 0.2 yesterday
        view = session.view()
        assert view.local_momentum == 0
        assert view.yesterday_score == 0.2
        assert view.verdict == Verdict.WORSE
        assert view.verdict_header == VERDICT_HEADERS[Verdict.WORSE]
        assert view.source == "local"
        assert view.analysis is None

    def test_exercise_and_sugar_scenario(self, session):
        session.toggle_habit("1")
        assert session.local_momentum == 2.0
        assert session.verdict == Verdict.BETTER

        session.toggle_habit("4")
        assert session.local_momentum == -0.5
        assert session.verdict == Verdict.WORSE

    def test_reaching_yesterday_exactly_is_stagnant(self, registry, adapter):
        session = MomentumSession(registry, adapter, history=[])
        assert session.yesterday_score == 0.0
        assert session.verdict == Verdict.STAGNANT
        assert session.verdict_header == VERDICT_HEADERS[Verdict.STAGNANT]

    def test_blank_add_does_not_bump_revision(self, session):
        assert session.add_habit("  ", "good", 2) is None
        assert session.revision == 0
        assert len(session.registry) == 5


class TestEnrichment:
    @pytest.mark.asyncio
    async def test_success_replaces_local_score(self, session, fake_groq):
        result = await session.analyze()

        assert result == AnalysisResult(**VALID_ANALYSIS)
        assert session.analyzing is False
        assert session.current_score == 3.5
        assert session.local_momentum == 0
        assert session.verdict == Verdict.BETTER
        assert session.verdict_header == VALID_ANALYSIS["verdict_header"]
        assert session.view().source == "enrichment"
        assert len(fake_groq.calls) == 1

    @pytest.mark.asyncio
    async def test_verdict_follows_score_not_header(self, registry):
        # The collaborator's header disagrees with its own score; the verdict is still derived from the score
        payload = dict(VALID_ANALYSIS, daily_momentum=-4.0)
        session = _session(registry, FakeAsyncGroq(content=json.dumps(payload)))
        await session.analyze()
        assert session.verdict == Verdict.WORSE
        assert session.verdict_header == VALID_ANALYSIS["verdict_header"]

    @pytest.mark.asyncio
    async def test_enriched_score_equal_to_yesterday_is_stagnant(self, registry):
        payload = dict(VALID_ANALYSIS, daily_momentum=0.2)
        session = _session(registry, FakeAsyncGroq(content=json.dumps(payload)))
        await session.analyze()
        assert session.verdict == Verdict.STAGNANT

    @pytest.mark.asyncio
    async def test_second_request_rejected_while_pending(self, registry):
        gate = asyncio.Event()
        client = FakeAsyncGroq(gate=gate)
        session = _session(registry, client)

        first = session.start_analysis()
        await asyncio.sleep(0)
        assert session.analyzing is True

        with pytest.raises(EnrichmentInProgressError):
            session.start_analysis()
        with pytest.raises(EnrichmentInProgressError):
            await session.analyze()

        gate.set()
        await first
        assert len(client.calls) == 1
        assert session.analyzing is False

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_analysis(self, registry):
        client = FakeAsyncGroq()
        session = _session(registry, client)
        previous = await session.analyze()

        client.completions.error = connection_error()
        assert await session.analyze() is None
        assert session.analysis == previous
        assert session.analyzing is False

        client.completions.error = None
        client.completions.content = "{\"verdict_header\": \"half a payload\"}"
        assert await session.analyze() is None
        assert session.analysis == previous

    @pytest.mark.asyncio
    async def test_failure_without_previous_stays_local(self, registry):
        session = _session(registry, FakeAsyncGroq(error=connection_error()))
        assert await session.analyze() is None
        assert session.analysis is None
        assert session.view().source == "local"
        assert session.analyzing is False

    @pytest.mark.asyncio
    async def test_failed_request_can_be_retried(self, registry):
        client = FakeAsyncGroq(error=connection_error())
        session = _session(registry, client)
        await session.analyze()

        client.completions.error = None
        assert await session.analyze() is not None
        assert len(client.calls) == 2

    @pytest.mark.asyncio
    async def test_cancel_releases_guard_and_keeps_result(self, registry):
        gate = asyncio.Event()
        client = FakeAsyncGroq()
        session = _session(registry, client)
        previous = await session.analyze()

        client.completions.gate = gate
        task = session.start_analysis()
        await asyncio.sleep(0)
        assert session.cancel_analysis() is True

        with pytest.raises(asyncio.CancelledError):
            await task
        assert session.analyzing is False
        assert session.analysis == previous
        assert session.cancel_analysis() is False

    @pytest.mark.asyncio
    async def test_cancel_before_start_releases_guard(self, session):
        task = session.start_analysis()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert session.analyzing is False

    @pytest.mark.asyncio
    async def test_mutations_apply_while_pending_and_late_result_wins(self, registry):
        gate = asyncio.Event()
        session = _session(registry, FakeAsyncGroq(gate=gate))

        task = session.start_analysis()
        await asyncio.sleep(0)

        session.toggle_habit("3")
        session.add_habit("Walk", "good", 1)
        assert session.local_momentum == 3.0
        assert len(session.registry) == 6
        assert session.current_score == 3.0

        gate.set()
        await task
        assert session.current_score == 3.5
        assert session.local_momentum == 3.0
        assert session.stale is True
        assert session.view().stale is True

    @pytest.mark.asyncio
    async def test_request_uses_snapshot_at_issue_time(self, registry):
        gate = asyncio.Event()
        client = FakeAsyncGroq(gate=gate)
        session = _session(registry, client)

        task = session.start_analysis()
        await asyncio.sleep(0)
        session.toggle_habit("1")
        gate.set()
        await task

        prompt = client.calls[0]["messages"][1]["content"]
        assert "\"status\": \"completed\"" not in prompt

    @pytest.mark.asyncio
    async def test_fresh_result_not_stale_until_mutation(self, session):
        await session.analyze()
        assert session.stale is False
        session.toggle_habit("2")
        assert session.stale is True

    @pytest.mark.asyncio
    async def test_clear_analysis_returns_to_local(self, session):
        await session.analyze()
        session.clear_analysis()
        assert session.analysis is None
        assert session.current_score == session.local_momentum
        assert session.verdict == Verdict.WORSE
