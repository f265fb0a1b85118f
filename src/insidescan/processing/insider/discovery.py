"""Candidate discovery by following seed wallets' outgoing SOL transfers.

Discovery trades recall for latency: it pages through each seed's recent
signatures until it has enough candidates, runs out of pages, or its
deadline expires. An expired deadline returns what was found so far.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field

from insidescan.config import Settings
from insidescan.core.deadline import Deadline
from insidescan.core.logging import get_logger
from insidescan.ledger.fetch import BoundedLedger
from insidescan.ledger.models import TransactionRecord, lamports_to_sol
from insidescan.processing.insider.models import DiscoveryCandidate

logger = get_logger(__name__)


@dataclass(frozen=True)
class _Page:
    size: int
    transactions: list[TransactionRecord]
    cursor: str


@dataclass
class DiscoveryOutcome:
    """Candidates found plus how the search ended."""

    candidates: list[DiscoveryCandidate] = field(default_factory=list)
    timed_out: bool = False
    pages_scanned: int = 0
    transactions_scanned: int = 0


class DiscoveryEngine:
    """Enumerates wallets that received in-band SOL from seed addresses."""

    def __init__(self, ledger: BoundedLedger, settings: Settings) -> None:
        self._ledger = ledger
        self._settings = settings

    async def discover(
        self,
        seeds: Sequence[str],
        max_candidates: int,
        deadline: Deadline,
        *,
        max_pages: int | None = None,
        page_size: int | None = None,
    ) -> DiscoveryOutcome:
        """Find up to ``max_candidates`` funded wallets across ``seeds``.

        Seeds are scanned in order, pages newest first. A destination
        already found (from any seed) is not added again.

        Args:
            seeds: Seed addresses to follow
            max_candidates: Stop once this many candidates are found
            deadline: Budget for the whole discovery
            max_pages: Pages per seed (defaults to settings)
            page_size: Signatures per page (defaults to settings)

        Returns:
            DiscoveryOutcome with candidates in discovery order
        """
        s = self._settings
        max_pages = max_pages or s.discovery_max_pages
        page_size = page_size or s.discovery_page_size
        seed_set = frozenset(seeds)

        outcome = DiscoveryOutcome()
        seen: set[str] = set()

        for seed in seeds:
            before: str | None = None
            for _ in range(max_pages):
                if len(outcome.candidates) >= max_candidates:
                    break
                if deadline.expired:
                    outcome.timed_out = True
                    break
                try:
                    page = await asyncio.wait_for(
                        self._scan_page(seed, page_size, before),
                        timeout=deadline.remaining(),
                    )
                except TimeoutError:
                    # In-flight fetches are cancelled; the partial page is discarded
                    outcome.timed_out = True
                    break
                if page is None:
                    break

                outcome.pages_scanned += 1
                outcome.transactions_scanned += len(page.transactions)

                for tx in page.transactions:
                    for candidate in self._extract_candidates(seed, seed_set, tx):
                        if candidate.address in seen:
                            continue
                        seen.add(candidate.address)
                        outcome.candidates.append(candidate)
                        if len(outcome.candidates) >= max_candidates:
                            break
                    if len(outcome.candidates) >= max_candidates:
                        break

                if page.size < page_size:
                    break
                before = page.cursor
            if outcome.timed_out or len(outcome.candidates) >= max_candidates:
                break

        if outcome.timed_out:
            logger.warning(
                "Discovery deadline reached",
                candidates=len(outcome.candidates),
                pages=outcome.pages_scanned,
            )
        logger.debug(
            "Discovery finished",
            seeds=len(seeds),
            candidates=len(outcome.candidates),
            transactions=outcome.transactions_scanned,
        )
        return outcome

    async def _scan_page(self, seed: str, page_size: int, before: str | None) -> _Page | None:
        listing = await self._ledger.list_recent_signatures(seed, page_size, before)
        if not listing.available or not listing.value:
            if not listing.available:
                logger.debug("Seed listing unavailable", seed=seed[:8], status=listing.status)
            return None

        refs = [r for r in listing.value if not r.failed]
        fetched = await self._ledger.get_transactions(refs)
        transactions = [
            result.value for result in fetched if result.available and result.value is not None
        ]
        return _Page(
            size=len(listing.value),
            transactions=transactions,
            cursor=listing.value[-1].signature,
        )

    def _extract_candidates(
        self, seed: str, seed_set: frozenset[str], tx: TransactionRecord
    ) -> list[DiscoveryCandidate]:
        """In-band SOL transfers from ``seed`` whose destination balance rose."""
        if tx.failed:
            return []
        s = self._settings
        candidates: list[DiscoveryCandidate] = []
        for transfer in tx.transfers:
            if transfer.source != seed or transfer.destination in seed_set:
                continue
            index = tx.index_of(transfer.destination)
            if index is None:
                continue
            change = tx.balance_change(transfer.destination)
            if change is None or change <= 0:
                continue
            amount = lamports_to_sol(change)
            if not s.min_funding_sol <= amount <= s.max_funding_sol:
                continue
            candidates.append(
                DiscoveryCandidate(
                    address=transfer.destination,
                    funding_source=seed,
                    funding_amount=amount,
                    discovered_from=tx.signature,
                )
            )
        return candidates
