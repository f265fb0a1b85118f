"""Bounded fetch: every gateway call gets a deadline and never raises.

Gateway timeouts and errors become an explicit ``FetchResult`` with an
unavailable status. Callers must treat unavailable data as absent evidence,
never as zero or false. No retries happen at this layer.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from insidescan.core.logging import get_logger
from insidescan.ledger.base import LedgerGateway
from insidescan.ledger.models import (
    AccountInfo,
    SignatureRef,
    TokenAccount,
    TransactionRecord,
)

logger = get_logger(__name__)

T = TypeVar("T")


class FetchStatus(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    ERROR = "error"


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Outcome of one bounded gateway call."""

    status: FetchStatus
    value: T | None = None
    error: str | None = None

    @property
    def available(self) -> bool:
        return self.status is FetchStatus.OK


async def fetch_with_deadline(
    operation: Callable[[], Awaitable[T | None]],
    timeout: float,
    *,
    label: str = "ledger call",
) -> FetchResult[T]:
    """Run ``operation`` with a deadline, folding failures into a FetchResult.

    Args:
        operation: Zero-argument coroutine factory for the gateway call
        timeout: Seconds before the call is abandoned
        label: Name used in log events

    Returns:
        FetchResult with status OK, NOT_FOUND, TIMEOUT or ERROR
    """
    if timeout <= 0:
        return FetchResult(FetchStatus.TIMEOUT, error="no time left")
    try:
        value = await asyncio.wait_for(operation(), timeout=timeout)
    except TimeoutError:
        logger.debug("Ledger call timed out", call=label, timeout=timeout)
        return FetchResult(FetchStatus.TIMEOUT, error=f"timed out after {timeout:.1f}s")
    except Exception as e:
        logger.warning("Ledger call failed", call=label, error=str(e))
        return FetchResult(FetchStatus.ERROR, error=str(e))
    if value is None:
        return FetchResult(FetchStatus.NOT_FOUND)
    return FetchResult(FetchStatus.OK, value=value)


class BoundedLedger:
    """Gateway wrapper enforcing per-call deadlines and a concurrency cap.

    Calls beyond ``max_concurrency`` queue on a semaphore; queue time is
    not charged to the per-call deadline (the enclosing component and
    request deadlines still apply through cancellation).
    """

    def __init__(
        self,
        gateway: LedgerGateway,
        call_timeout: float,
        max_concurrency: int,
    ) -> None:
        self._gateway = gateway
        self._call_timeout = call_timeout
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def _bounded(
        self, operation: Callable[[], Awaitable[T | None]], label: str
    ) -> FetchResult[T]:
        async with self._semaphore:
            return await fetch_with_deadline(operation, self._call_timeout, label=label)

    async def list_recent_signatures(
        self,
        address: str,
        limit: int,
        before: str | None = None,
    ) -> FetchResult[list[SignatureRef]]:
        return await self._bounded(
            lambda: self._gateway.list_recent_signatures(address, limit, before),
            "getSignaturesForAddress",
        )

    async def get_transaction(self, signature: str) -> FetchResult[TransactionRecord]:
        return await self._bounded(
            lambda: self._gateway.get_transaction(signature),
            "getTransaction",
        )

    async def get_account_info(self, address: str) -> FetchResult[AccountInfo]:
        return await self._bounded(
            lambda: self._gateway.get_account_info(address),
            "getAccountInfo",
        )

    async def get_token_accounts(self, owner: str) -> FetchResult[list[TokenAccount]]:
        return await self._bounded(
            lambda: self._gateway.get_token_accounts(owner),
            "getTokenAccountsByOwner",
        )

    async def get_transactions(
        self, refs: list[SignatureRef]
    ) -> list[FetchResult[TransactionRecord]]:
        """Fetch many transactions concurrently, preserving input order."""
        return list(await asyncio.gather(*(self.get_transaction(r.signature) for r in refs)))
