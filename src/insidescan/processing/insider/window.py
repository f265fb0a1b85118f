"""Bounded transaction window for one address."""

from __future__ import annotations

from dataclasses import dataclass

from insidescan.core.logging import get_logger
from insidescan.ledger.fetch import BoundedLedger
from insidescan.ledger.models import SignatureRef, TransactionRecord

logger = get_logger(__name__)


@dataclass(frozen=True)
class TransactionWindow:
    """The most recent ``depth`` transactions of an address, newest first.

    ``entries`` is aligned with ``signatures``: one slot per listed
    signature, ``None`` where the fetch timed out, failed or came back
    empty. ``history_available`` is False when the signature listing itself
    could not be fetched.
    """

    address: str
    signatures: tuple[SignatureRef, ...] = ()
    entries: tuple[TransactionRecord | None, ...] = ()
    history_available: bool = True

    @property
    def depth(self) -> int:
        return len(self.signatures)

    @property
    def transactions(self) -> tuple[TransactionRecord, ...]:
        """Only the entries that were actually fetched."""
        return tuple(tx for tx in self.entries if tx is not None)

    @property
    def unavailable(self) -> int:
        return sum(1 for tx in self.entries if tx is None)


async def fetch_window(ledger: BoundedLedger, address: str, depth: int) -> TransactionWindow:
    """Fetch up to ``depth`` recent transactions for ``address``.

    Order is the node's retrieval order (newest first) and is preserved,
    since adjacent-pair timing depends on it.
    """
    listing = await ledger.list_recent_signatures(address, depth)
    if not listing.available or listing.value is None:
        logger.debug("Signature listing unavailable", address=address[:8], status=listing.status)
        return TransactionWindow(address=address, history_available=False)

    refs = listing.value[:depth]
    fetched = await ledger.get_transactions(refs)

    entries: list[TransactionRecord | None] = []
    for ref, result in zip(refs, fetched, strict=True):
        tx = result.value
        if not result.available or tx is None:
            entries.append(None)
            continue
        if tx.block_time is None and ref.block_time is not None:
            tx = tx.model_copy(update={"block_time": ref.block_time})
        entries.append(tx)

    window = TransactionWindow(address=address, signatures=tuple(refs), entries=tuple(entries))
    if window.unavailable:
        logger.debug(
            "Transactions unavailable in window",
            address=address[:8],
            unavailable=window.unavailable,
            requested=len(refs),
        )
    return window
