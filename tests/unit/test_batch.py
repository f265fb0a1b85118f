"""Tests for chunked batch classification."""

from __future__ import annotations

import asyncio
from decimal import Decimal
from unittest.mock import MagicMock

from ledger_fakes import BUYER, FRESH, PEER, SEED, TARGET, addr, make_settings

from insidescan.core.deadline import Deadline
from insidescan.processing.insider.batch import BatchOutcome, BatchScheduler
from insidescan.processing.insider.models import ClassificationResult, DiscoveryCandidate


def _analyzer(behaviour: dict[str, object] | None = None) -> MagicMock:
    """Mock WalletAnalyzer; ``behaviour`` maps address -> exception, delay (float) or verdict."""
    behaviour = behaviour or {}

    async def classify(address: str, depth: int) -> ClassificationResult:
        action = behaviour.get(address)
        if isinstance(action, Exception):
            raise action
        if isinstance(action, float):
            await asyncio.sleep(action)
        return ClassificationResult(address=address, is_insider=action is True, analysis_depth=depth)

    analyzer = MagicMock()
    analyzer.classify = MagicMock(side_effect=classify)
    return analyzer


class TestBatchScheduler:
    async def test_classifies_every_address(self) -> None:
        settings = make_settings(batch_chunk_size=2)
        analyzer = _analyzer()

        outcome = await BatchScheduler(analyzer, settings).classify_all(
            [TARGET, BUYER, FRESH], 15, deadline=Deadline(5), insiders_only=False
        )

        assert sorted(r.address for r in outcome.results) == sorted([TARGET, BUYER, FRESH])
        assert outcome.completed == 3
        assert not outcome.timed_out
        assert all(r.analysis_depth == 15 for r in outcome.results)

    async def test_failure_is_isolated(self) -> None:
        settings = make_settings(batch_chunk_size=5)
        analyzer = _analyzer({BUYER: RuntimeError("boom")})

        outcome = await BatchScheduler(analyzer, settings).classify_all(
            [TARGET, BUYER, FRESH], 10, deadline=Deadline(5), insiders_only=False
        )

        assert {r.address for r in outcome.results} == {TARGET, FRESH}
        assert outcome.failed == 1
        assert outcome.completed == 2
        assert not outcome.timed_out

    async def test_chunk_deadline_drops_slow_wallets(self) -> None:
        settings = make_settings(
            batch_chunk_size=5,
            batch_chunk_timeout_seconds=0.2,
            analysis_timeout_seconds=5.0,
        )
        analyzer = _analyzer({BUYER: 3.0})

        outcome = await BatchScheduler(analyzer, settings).classify_all(
            [TARGET, BUYER, FRESH], 10, deadline=Deadline(5), insiders_only=False
        )

        assert {r.address for r in outcome.results} == {TARGET, FRESH}
        assert outcome.dropped == 1
        assert outcome.timed_out

    async def test_next_chunk_runs_after_dropped_chunk(self) -> None:
        settings = make_settings(batch_chunk_size=1, batch_chunk_timeout_seconds=0.1)
        analyzer = _analyzer({TARGET: 3.0})

        outcome = await BatchScheduler(analyzer, settings).classify_all(
            [TARGET, BUYER], 10, deadline=Deadline(5), insiders_only=False
        )

        assert [r.address for r in outcome.results] == [BUYER]
        assert outcome.dropped == 1

    async def test_per_wallet_timeout(self) -> None:
        settings = make_settings(analysis_timeout_seconds=0.1, batch_chunk_timeout_seconds=5.0)
        analyzer = _analyzer({BUYER: 3.0})

        outcome = await BatchScheduler(analyzer, settings).classify_all(
            [TARGET, BUYER], 10, deadline=Deadline(5), insiders_only=False
        )

        assert [r.address for r in outcome.results] == [TARGET]
        assert outcome.dropped == 1
        assert outcome.timed_out

    async def test_insiders_only_filter(self) -> None:
        settings = make_settings()
        analyzer = _analyzer({FRESH: True})

        outcome = await BatchScheduler(analyzer, settings).classify_all(
            [TARGET, FRESH], 10, deadline=Deadline(5), insiders_only=True
        )

        assert [r.address for r in outcome.results] == [FRESH]
        assert outcome.completed == 2

    async def test_expired_deadline_skips_remaining_chunks(self) -> None:
        settings = make_settings(batch_chunk_size=1)
        analyzer = _analyzer()

        outcome = await BatchScheduler(analyzer, settings).classify_all(
            [TARGET, BUYER, FRESH], 10, deadline=Deadline(0), insiders_only=False
        )

        assert outcome.results == []
        assert outcome.dropped == 3
        assert outcome.timed_out
        analyzer.classify.assert_not_called()

    async def test_accepts_candidates_and_deduplicates(self) -> None:
        settings = make_settings()
        analyzer = _analyzer()
        candidate = DiscoveryCandidate(
            address=TARGET,
            funding_source=SEED,
            funding_amount=Decimal(1),
            discovered_from="sig",
        )

        outcome = await BatchScheduler(analyzer, settings).classify_all(
            [candidate, TARGET, PEER], 10, deadline=Deadline(5), insiders_only=False
        )

        assert sorted(r.address for r in outcome.results) == sorted([TARGET, PEER])
        assert analyzer.classify.call_count == 2

    async def test_appends_into_existing_outcome(self) -> None:
        settings = make_settings()
        outcome = BatchOutcome()
        others = [addr(f"Wa{i}") for i in range(1, 4)]

        returned = await BatchScheduler(_analyzer(), settings).classify_all(
            others, 10, deadline=Deadline(5), insiders_only=False, outcome=outcome
        )

        assert returned is outcome
        assert outcome.completed == 3
