"""Ledger gateway protocol.

Consumers (bounded fetch, discovery, analysis) depend on this interface
rather than on the Solana RPC client, so providers can be swapped and
tests can run against in-memory fakes.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from insidescan.ledger.models import (
    AccountInfo,
    SignatureRef,
    TokenAccount,
    TransactionRecord,
)


@runtime_checkable
class LedgerGateway(Protocol):
    """Read-only access to a ledger's public transaction history.

    Any call may be slow or raise; ``None`` means "not found". Callers
    treat both as absence of evidence, never as a negative.
    """

    async def list_recent_signatures(
        self,
        address: str,
        limit: int,
        before: str | None = None,
    ) -> list[SignatureRef]:
        """List signatures touching ``address``, newest first.

        Args:
            address: Account to list
            limit: Max signatures to return
            before: Only return signatures older than this one (pagination cursor)
        """
        ...

    async def get_transaction(self, signature: str) -> TransactionRecord | None:
        """Fetch one confirmed transaction by signature."""
        ...

    async def get_account_info(self, address: str) -> AccountInfo | None:
        """Fetch current balance/existence for ``address``."""
        ...

    async def get_token_accounts(self, owner: str) -> list[TokenAccount]:
        """List SPL token accounts owned by ``owner``."""
        ...

    async def close(self) -> None:
        """Clean up resources."""
        ...
