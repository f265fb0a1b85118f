"""Solana JSON-RPC client.

Implements the ledger gateway over a plain JSON-RPC 2.0 endpoint
(public mainnet-beta by default, or any provider URL such as Helius).

Methods used:
- getSignaturesForAddress: recent transaction references for an address
- getTransaction (jsonParsed): one transaction with balances and instructions
- getAccountInfo: current lamport balance
- getTokenAccountsByOwner (jsonParsed): SPL token holdings
"""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass, field as dataclass_field
from typing import Any

import httpx
import orjson

from insidescan.config import get_settings
from insidescan.core.constants import RPC_MAX_SIGNATURES_PER_CALL, TOKEN_PROGRAM_ID
from insidescan.core.exceptions import LedgerConnectionError, LedgerRpcError
from insidescan.core.logging import get_logger
from insidescan.ledger.models import (
    AccountInfo,
    SignatureRef,
    TokenAccount,
    TransactionRecord,
)

logger = get_logger(__name__)


class RpcRateLimiter:
    """Sliding-window rate limiter (N calls per second)."""

    def __init__(self, calls_per_second: int = 10) -> None:
        self._max_calls = calls_per_second
        self._calls: list[float] = []
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        async with self._lock:
            loop = asyncio.get_running_loop()
            now = loop.time()
            self._calls = [t for t in self._calls if t > now - 1.0]
            if len(self._calls) >= self._max_calls:
                sleep_time = 1.0 - (now - self._calls[0]) + 0.01
                if sleep_time > 0:
                    await asyncio.sleep(sleep_time)
                now = loop.time()
                self._calls = [t for t in self._calls if t > now - 1.0]
            self._calls.append(now)


@dataclass
class SolanaRpcClient:
    """Async client for a Solana JSON-RPC endpoint.

    Usage:
        async with SolanaRpcClient() as rpc:
            sigs = await rpc.list_recent_signatures(address, limit=20)
    """

    endpoint: str = dataclass_field(default_factory=lambda: get_settings().solana_rpc_url)
    commitment: str = dataclass_field(default_factory=lambda: get_settings().rpc_commitment)
    timeout: float = dataclass_field(default_factory=lambda: get_settings().rpc_http_timeout)
    rate_limit_per_second: int = dataclass_field(
        default_factory=lambda: get_settings().rpc_rate_limit_per_second
    )

    _client: httpx.AsyncClient | None = dataclass_field(default=None, init=False, repr=False)
    _limiter: RpcRateLimiter | None = dataclass_field(default=None, init=False, repr=False)
    _ids: itertools.count[int] = dataclass_field(
        default_factory=lambda: itertools.count(1), init=False, repr=False
    )

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Content-Type": "application/json", "Accept": "application/json"},
            )
        return self._client

    def _get_limiter(self) -> RpcRateLimiter:
        if self._limiter is None:
            self._limiter = RpcRateLimiter(self.rate_limit_per_second)
        return self._limiter

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> SolanaRpcClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _call(self, method: str, params: list[Any]) -> Any:
        """Issue one JSON-RPC request and return its ``result`` member.

        Raises:
            LedgerConnectionError: Transport or HTTP status failure
            LedgerRpcError: Node returned a JSON-RPC error object
        """
        await self._get_limiter().acquire()
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        client = self._get_client()
        try:
            response = await client.post(self.endpoint, content=orjson.dumps(payload))
            response.raise_for_status()
            body: dict[str, Any] = orjson.loads(response.content)
        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            raise LedgerConnectionError(f"{method} failed: {e}") from e
        except orjson.JSONDecodeError as e:
            raise LedgerConnectionError(f"{method} returned invalid JSON") from e

        error = body.get("error")
        if error:
            raise LedgerRpcError(
                f"{method}: {error.get('message', 'unknown error')}",
                code=error.get("code"),
            )
        return body.get("result")

    async def list_recent_signatures(
        self,
        address: str,
        limit: int,
        before: str | None = None,
    ) -> list[SignatureRef]:
        """List signatures for an address, newest first.

        Args:
            address: Base58 account address
            limit: Max signatures (capped at the RPC limit of 1000)
            before: Pagination cursor, exclusive

        Returns:
            List of SignatureRef in the order the node returns them
        """
        options: dict[str, Any] = {
            "limit": max(1, min(limit, RPC_MAX_SIGNATURES_PER_CALL)),
            "commitment": self.commitment,
        }
        if before:
            options["before"] = before
        result = await self._call("getSignaturesForAddress", [address, options])
        return [SignatureRef.from_rpc(entry) for entry in result or []]

    async def get_transaction(self, signature: str) -> TransactionRecord | None:
        """Fetch a transaction, or None if the node doesn't have it."""
        result = await self._call(
            "getTransaction",
            [
                signature,
                {
                    "encoding": "jsonParsed",
                    "maxSupportedTransactionVersion": 0,
                    "commitment": self.commitment,
                },
            ],
        )
        if not result:
            return None
        return TransactionRecord.from_rpc(result, signature=signature)

    async def get_account_info(self, address: str) -> AccountInfo | None:
        """Fetch account balance; a missing account yields ``exists=False``."""
        result = await self._call(
            "getAccountInfo",
            [address, {"encoding": "base64", "commitment": self.commitment}],
        )
        if result is None:
            return None
        return AccountInfo.from_rpc(address, result.get("value"))

    async def get_token_accounts(self, owner: str) -> list[TokenAccount]:
        """List SPL token accounts owned by ``owner`` (zero balances included)."""
        result = await self._call(
            "getTokenAccountsByOwner",
            [
                owner,
                {"programId": TOKEN_PROGRAM_ID},
                {"encoding": "jsonParsed", "commitment": self.commitment},
            ],
        )
        return [TokenAccount.from_rpc(entry) for entry in (result or {}).get("value") or []]
