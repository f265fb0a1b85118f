"""Scan orchestration: request validation, modes and the overall deadline.

State machine per request:

    idle -> fetching -> analyzing -> done | timed_out | failed

Every mode runs under one request deadline. On expiry the orchestrator
returns the analyses that finished plus ``timed_out=True``; deadline
expiry is never reported as a hard failure.
"""

from __future__ import annotations

import asyncio
from typing import Any

from pydantic import ValidationError

from insidescan.config import Settings, get_settings
from insidescan.core.deadline import Deadline
from insidescan.core.exceptions import ScanRequestError
from insidescan.core.logging import get_logger, scan_context
from insidescan.ledger.base import LedgerGateway
from insidescan.ledger.client import SolanaRpcClient
from insidescan.ledger.fetch import BoundedLedger
from insidescan.processing.insider.analyzer import WalletAnalyzer
from insidescan.processing.insider.batch import BatchOutcome, BatchScheduler
from insidescan.processing.insider.discovery import DiscoveryEngine
from insidescan.processing.insider.models import (
    DiscoveryCandidate,
    ScanRequest,
    ScanResult,
    ScanState,
)

logger = get_logger(__name__)

# Grace period on top of the request deadline for the outer safety net;
# components already stop at the deadline on their own.
_DEADLINE_GRACE_SECONDS = 0.25


class ScanOrchestrator:
    """Drives one scan request against a ledger gateway.

    The gateway handle may be shared across requests; everything else
    (semaphore, candidate set, results) is private to each ``scan`` call.
    """

    def __init__(self, gateway: LedgerGateway, settings: Settings | None = None) -> None:
        self._gateway = gateway
        self._settings = settings or get_settings()

    async def scan(self, request: ScanRequest) -> ScanResult:
        """Run ``request`` to completion or until the request deadline.

        Raises:
            ScanRequestError: Request can't be served (e.g. no seed for recent mode)
        """
        s = self._settings
        deadline = Deadline(s.scan_timeout_seconds)
        depth = self.clamp_depth(request.depth)
        seeds = self._resolve_seeds(request)

        ledger = BoundedLedger(self._gateway, s.fetch_timeout_seconds, s.max_concurrency)
        analyzer = WalletAnalyzer(ledger, self._analysis_settings(request))
        scheduler = BatchScheduler(analyzer, s)
        batch = BatchOutcome()
        progress = _Progress()

        log = logger.bind(mode=request.mode, depth=depth)
        log.debug("Scan started", state=ScanState.FETCHING.value)

        try:
            await asyncio.wait_for(
                self._run_mode(request, depth, seeds, deadline, ledger, scheduler, batch, progress),
                timeout=deadline.remaining() + _DEADLINE_GRACE_SECONDS,
            )
        except TimeoutError:
            batch.timed_out = True

        timed_out = batch.timed_out or progress.discovery_timed_out
        state = ScanState.TIMED_OUT if timed_out else ScanState.DONE
        result = ScanResult(
            success=True,
            results=list(batch.results),
            total_scanned=batch.completed,
            message=self._message(request, batch, progress, timed_out),
            timed_out=timed_out,
            state=state,
            mode=request.mode,
            candidates_discovered=progress.candidates,
        )
        log.info(
            "Scan finished",
            state=state.value,
            scanned=batch.completed,
            flagged=sum(1 for r in batch.results if r.is_insider),
            dropped=batch.dropped,
            failed=batch.failed,
        )
        return result

    async def _run_mode(
        self,
        request: ScanRequest,
        depth: int,
        seeds: list[str],
        deadline: Deadline,
        ledger: BoundedLedger,
        scheduler: BatchScheduler,
        batch: BatchOutcome,
        progress: _Progress,
    ) -> None:
        s = self._settings
        targets: list[DiscoveryCandidate | str]

        if request.mode in ("single", "batch"):
            named = request.target_addresses
            targets = list(named[:1] if request.mode == "single" else named[: s.max_batch_addresses])
        else:
            # recent: one seed, one page; discover: every seed, paginated
            engine = DiscoveryEngine(ledger, s)
            max_candidates = self.clamp_candidates(request.max_candidates)
            if request.mode == "recent":
                found = await engine.discover(
                    seeds[:1],
                    max_candidates,
                    deadline.child(s.discovery_timeout_seconds),
                    max_pages=1,
                    page_size=depth,
                )
            else:
                found = await engine.discover(
                    seeds, max_candidates, deadline.child(s.discovery_timeout_seconds)
                )
            progress.candidates = len(found.candidates)
            progress.discovery_timed_out = found.timed_out
            targets = list(found.candidates)

        logger.debug("Scan analyzing", state=ScanState.ANALYZING.value, targets=len(targets))
        await scheduler.classify_all(
            targets,
            depth,
            deadline=deadline,
            insiders_only=request.filter_insiders,
            outcome=batch,
        )

    def clamp_depth(self, requested: int | None) -> int:
        s = self._settings
        if requested is None:
            return s.default_scan_depth
        return max(1, min(requested, s.max_scan_depth))

    def clamp_candidates(self, requested: int | None) -> int:
        cap = self._settings.max_discovery_candidates
        if requested is None:
            return cap
        return max(1, min(requested, cap))

    def _analysis_settings(self, request: ScanRequest) -> Settings:
        """Settings for provenance checks; a seed override counts as a known seed."""
        s = self._settings
        if request.seed_override and request.seed_override not in s.seed_addresses:
            return s.model_copy(
                update={"seed_addresses": [*s.seed_addresses, request.seed_override]}
            )
        return s

    def _resolve_seeds(self, request: ScanRequest) -> list[str]:
        if request.mode not in ("recent", "discover"):
            return []
        if request.seed_override:
            return [request.seed_override]
        if not self._settings.seed_addresses:
            raise ScanRequestError(f"{request.mode} mode requires a seed address (none configured)")
        return list(self._settings.seed_addresses)

    @staticmethod
    def _message(
        request: ScanRequest, batch: BatchOutcome, progress: _Progress, timed_out: bool
    ) -> str:
        flagged = sum(1 for r in batch.results if r.is_insider)
        parts = [f"Found {flagged} wallets with insider patterns out of {batch.completed} scanned"]
        if request.mode in ("recent", "discover"):
            parts.append(f"{progress.candidates} candidates discovered")
        if batch.failed:
            parts.append(f"{batch.failed} failed")
        if batch.dropped:
            parts.append(f"{batch.dropped} dropped")
        message = ", ".join(parts)
        if timed_out:
            message += "; scan deadline reached, results are partial"
        return message


class _Progress:
    """Mutable per-request progress shared with the mode runner."""

    __slots__ = ("candidates", "discovery_timed_out")

    def __init__(self) -> None:
        self.candidates = 0
        self.discovery_timed_out = False


async def run_scan(
    body: Any,
    *,
    gateway: LedgerGateway | None = None,
    settings: Settings | None = None,
) -> ScanResult:
    """Entry point for the HTTP layer: always returns a ScanResult.

    ``body`` is a ScanRequest or any decoded JSON value; anything that does
    not validate, non-objects included, is rejected before any gateway call.
    A per-request RPC endpoint override gets its own short-lived client;
    otherwise ``gateway`` (or a fresh default client) is used.
    """
    settings = settings or get_settings()
    with scan_context():
        try:
            request = body if isinstance(body, ScanRequest) else ScanRequest.model_validate(body)
        except ValidationError as e:
            errors = "; ".join(err["msg"] for err in e.errors())
            logger.info("Scan request rejected", errors=errors)
            return ScanResult(
                success=False,
                message=f"Invalid request: {errors}",
                state=ScanState.FAILED,
                error="invalid_request",
            )

        if request.rpc_endpoint_override and not settings.allow_rpc_endpoint_override:
            return ScanResult(
                success=False,
                message="Invalid request: RPC endpoint override is disabled",
                state=ScanState.FAILED,
                mode=request.mode,
                error="invalid_request",
            )

        owned: SolanaRpcClient | None = None
        if request.rpc_endpoint_override:
            owned = SolanaRpcClient(endpoint=request.rpc_endpoint_override)
            gateway = owned
        elif gateway is None:
            owned = SolanaRpcClient()
            gateway = owned

        try:
            return await ScanOrchestrator(gateway, settings).scan(request)
        except ScanRequestError as e:
            logger.info("Scan request rejected", error=e.message)
            return ScanResult(
                success=False,
                message=f"Invalid request: {e.message}",
                state=ScanState.FAILED,
                mode=request.mode,
                error="invalid_request",
            )
        except Exception as e:
            logger.exception("Scan failed", error=str(e))
            return ScanResult(
                success=False,
                message=f"Scan failed: {e}",
                state=ScanState.FAILED,
                mode=request.mode,
                error="scan_failed",
            )
        finally:
            if owned is not None:
                await owned.close()
