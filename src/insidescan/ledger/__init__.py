"""Ledger gateway: Solana RPC client, data models and bounded fetch."""

from insidescan.ledger.base import LedgerGateway
from insidescan.ledger.client import SolanaRpcClient
from insidescan.ledger.fetch import BoundedLedger, FetchResult, FetchStatus, fetch_with_deadline
from insidescan.ledger.models import (
    AccountInfo,
    NativeTransfer,
    SignatureRef,
    TokenAccount,
    TransactionRecord,
    lamports_to_sol,
)

__all__ = [
    "AccountInfo",
    "BoundedLedger",
    "FetchResult",
    "FetchStatus",
    "LedgerGateway",
    "NativeTransfer",
    "SignatureRef",
    "SolanaRpcClient",
    "TokenAccount",
    "TransactionRecord",
    "fetch_with_deadline",
    "lamports_to_sol",
]
