"""Ledger data models.

Immutable snapshots of what the Solana RPC returns for signatures,
transactions and accounts. Balances stay in lamports here; conversion to
decimal SOL happens at the analysis boundary via ``lamports_to_sol``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from insidescan.core.constants import (
    LAMPORTS_PER_SOL,
    SYSTEM_PROGRAM_ID,
    SYSTEM_TRANSFER_TYPES,
)


def lamports_to_sol(lamports: int) -> Decimal:
    """Convert lamports to decimal SOL without float rounding."""
    return Decimal(lamports) / Decimal(LAMPORTS_PER_SOL)


def sol_to_lamports(sol: Decimal) -> int:
    return int(sol * LAMPORTS_PER_SOL)


class SignatureRef(BaseModel):
    """Reference to one transaction as listed by getSignaturesForAddress."""

    model_config = ConfigDict(frozen=True)

    signature: str = Field(min_length=1)
    slot: int | None = None
    block_time: int | None = None  # absent while a transaction is in flight
    failed: bool = False

    @classmethod
    def from_rpc(cls, data: dict[str, Any]) -> SignatureRef:
        return cls(
            signature=data["signature"],
            slot=data.get("slot"),
            block_time=data.get("blockTime"),
            failed=data.get("err") is not None,
        )


class NativeTransfer(BaseModel):
    """A system-program SOL transfer instruction."""

    model_config = ConfigDict(frozen=True)

    source: str
    destination: str
    lamports: int = Field(ge=0)


class TransactionRecord(BaseModel):
    """Snapshot of a confirmed transaction.

    ``pre_balances``/``post_balances`` share the index space of
    ``account_keys``; index 0 is the fee payer.
    """

    model_config = ConfigDict(frozen=True)

    signature: str
    slot: int | None = None
    block_time: int | None = None
    fee: int = 0
    account_keys: tuple[str, ...] = ()
    pre_balances: tuple[int, ...] = ()
    post_balances: tuple[int, ...] = ()
    transfers: tuple[NativeTransfer, ...] = ()
    failed: bool = False

    def index_of(self, address: str) -> int | None:
        try:
            return self.account_keys.index(address)
        except ValueError:
            return None

    def balance_index(self, address: str) -> int:
        """Position used for balance deltas: the address itself, else the fee payer."""
        index = self.index_of(address)
        return 0 if index is None else index

    def pre_balance(self, address: str) -> int | None:
        index = self.balance_index(address)
        if index >= len(self.pre_balances):
            return None
        return self.pre_balances[index]

    def balance_change(self, address: str) -> int | None:
        """Lamport delta at the address's position, or None if balances are missing."""
        index = self.balance_index(address)
        if index >= len(self.pre_balances) or index >= len(self.post_balances):
            return None
        return self.post_balances[index] - self.pre_balances[index]

    @classmethod
    def from_rpc(cls, data: dict[str, Any], signature: str | None = None) -> TransactionRecord:
        """Parse a ``getTransaction`` result in ``jsonParsed`` encoding."""
        transaction = data.get("transaction") or {}
        message = transaction.get("message") or {}
        meta = data.get("meta") or {}

        account_keys = tuple(_parse_account_key(k) for k in message.get("accountKeys", []))

        instructions: list[dict[str, Any]] = list(message.get("instructions") or [])
        for inner in meta.get("innerInstructions") or []:
            instructions.extend(inner.get("instructions") or [])

        sigs = transaction.get("signatures") or []
        return cls(
            signature=signature or (sigs[0] if sigs else ""),
            slot=data.get("slot"),
            block_time=data.get("blockTime"),
            fee=int(meta.get("fee") or 0),
            account_keys=account_keys,
            pre_balances=tuple(int(b) for b in meta.get("preBalances") or []),
            post_balances=tuple(int(b) for b in meta.get("postBalances") or []),
            transfers=tuple(t for t in map(_parse_transfer, instructions) if t is not None),
            failed=meta.get("err") is not None,
        )


class AccountInfo(BaseModel):
    """Current account state at scan time."""

    model_config = ConfigDict(frozen=True)

    address: str
    lamports: int = Field(default=0, ge=0)
    exists: bool = True

    @property
    def balance_sol(self) -> Decimal:
        return lamports_to_sol(self.lamports)

    @classmethod
    def from_rpc(cls, address: str, value: dict[str, Any] | None) -> AccountInfo:
        if value is None:
            return cls(address=address, lamports=0, exists=False)
        return cls(address=address, lamports=int(value.get("lamports") or 0), exists=True)


class TokenAccount(BaseModel):
    """An SPL token account owned by a wallet, from jsonParsed token data."""

    model_config = ConfigDict(frozen=True)

    address: str
    mint: str = ""
    ui_amount: Decimal = Decimal(0)

    @property
    def is_active(self) -> bool:
        return self.ui_amount > 0

    @classmethod
    def from_rpc(cls, data: dict[str, Any]) -> TokenAccount:
        """Parse one entry of a ``getTokenAccountsByOwner`` (jsonParsed) result."""
        account = data.get("account") or {}
        parsed = (account.get("data") or {}).get("parsed") or {}
        info = parsed.get("info") or {}
        token_amount = info.get("tokenAmount") or {}
        # uiAmountString is exact; uiAmount is a float and may be null
        raw = token_amount.get("uiAmountString") or token_amount.get("uiAmount") or "0"
        return cls(
            address=str(data.get("pubkey", "")),
            mint=str(info.get("mint", "")),
            ui_amount=Decimal(str(raw)),
        )


def _parse_account_key(key: Any) -> str:
    # jsonParsed returns {pubkey, signer, writable}; legacy encodings return bare strings
    if isinstance(key, dict):
        return str(key.get("pubkey", ""))
    return str(key)


def _parse_transfer(instruction: dict[str, Any]) -> NativeTransfer | None:
    if instruction.get("programId") != SYSTEM_PROGRAM_ID and instruction.get("program") != "system":
        return None
    parsed = instruction.get("parsed")
    if not isinstance(parsed, dict) or parsed.get("type") not in SYSTEM_TRANSFER_TYPES:
        return None
    info = parsed.get("info") or {}
    source = info.get("source")
    destination = info.get("destination")
    if not source or not destination:
        return None
    try:
        lamports = int(info.get("lamports") or 0)
    except (TypeError, ValueError):
        return None
    return NativeTransfer(source=source, destination=destination, lamports=lamports)
