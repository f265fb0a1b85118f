"""Chunked, deadline-bounded classification of many addresses."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field

from insidescan.config import Settings
from insidescan.core.deadline import Deadline
from insidescan.core.logging import get_logger
from insidescan.processing.insider.analyzer import WalletAnalyzer
from insidescan.processing.insider.models import ClassificationResult, DiscoveryCandidate

logger = get_logger(__name__)


@dataclass
class BatchOutcome:
    """Accumulated batch state.

    Results are appended as chunks complete, so a caller holding this object
    still sees finished work if the batch itself is cancelled.
    """

    results: list[ClassificationResult] = field(default_factory=list)
    completed: int = 0  # analyses that finished, before insider filtering
    failed: int = 0
    dropped: int = 0  # abandoned on a per-item or chunk deadline
    timed_out: bool = False


class BatchScheduler:
    """Classifies addresses in fixed-size chunks.

    Each chunk runs concurrently under its own deadline; items still
    pending when it expires are cancelled, logged and not retried, and the
    next chunk starts. One address failing never aborts the batch.
    """

    def __init__(self, analyzer: WalletAnalyzer, settings: Settings) -> None:
        self._analyzer = analyzer
        self._settings = settings

    async def classify_all(
        self,
        items: Iterable[DiscoveryCandidate | str],
        depth: int,
        *,
        deadline: Deadline,
        insiders_only: bool,
        outcome: BatchOutcome | None = None,
    ) -> BatchOutcome:
        """Classify every item, keeping only insiders if ``insiders_only``.

        Args:
            items: Discovery candidates or plain addresses (duplicates ignored)
            depth: Transactions to inspect per address
            deadline: Budget for the whole batch
            insiders_only: Filter results to ``is_insider`` (discovery use case)
            outcome: Optional accumulator to append into

        Returns:
            The BatchOutcome (same object as ``outcome`` when given)
        """
        s = self._settings
        outcome = outcome if outcome is not None else BatchOutcome()
        addresses = list(
            dict.fromkeys(i.address if isinstance(i, DiscoveryCandidate) else i for i in items)
        )

        for start in range(0, len(addresses), s.batch_chunk_size):
            if deadline.expired:
                skipped = len(addresses) - start
                outcome.dropped += skipped
                outcome.timed_out = True
                logger.warning("Batch deadline reached", skipped=skipped)
                break
            chunk = addresses[start : start + s.batch_chunk_size]
            await self._run_chunk(
                chunk, depth, deadline.child(s.batch_chunk_timeout_seconds), insiders_only, outcome
            )

        return outcome

    async def _run_chunk(
        self,
        chunk: list[str],
        depth: int,
        chunk_deadline: Deadline,
        insiders_only: bool,
        outcome: BatchOutcome,
    ) -> None:
        tasks = {
            asyncio.create_task(self._classify_one(address, depth, chunk_deadline)): address
            for address in chunk
        }
        try:
            done, pending = await asyncio.wait(tasks, timeout=chunk_deadline.remaining())
        finally:
            # Also reached when the caller is cancelled: never leak analyses
            for task in tasks:
                if not task.done():
                    task.cancel()

        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            outcome.dropped += len(pending)
            outcome.timed_out = True
            logger.warning(
                "Chunk deadline reached, dropping pending wallets",
                dropped=[tasks[t][:8] for t in pending],
            )

        for task, address in tasks.items():
            if task not in done:
                continue
            exc = task.exception()
            if isinstance(exc, TimeoutError):
                outcome.dropped += 1
                outcome.timed_out = True
                logger.warning("Wallet analysis timed out", address=address[:8])
                continue
            if exc is not None:
                outcome.failed += 1
                logger.warning("Wallet analysis failed", address=address[:8], error=str(exc))
                continue
            result = task.result()
            outcome.completed += 1
            if insiders_only and not result.is_insider:
                continue
            outcome.results.append(result)

    async def _classify_one(
        self, address: str, depth: int, chunk_deadline: Deadline
    ) -> ClassificationResult:
        timeout = min(self._settings.analysis_timeout_seconds, chunk_deadline.remaining())
        return await asyncio.wait_for(self._analyzer.classify(address, depth), timeout=timeout)
