"""Probe the configured Solana RPC endpoint and classify one wallet.

Usage: python scripts/probe_rpc.py <wallet-address> [depth]
"""

import asyncio
import sys

from insidescan.config import get_settings
from insidescan.core.deadline import Deadline
from insidescan.ledger.client import SolanaRpcClient
from insidescan.ledger.fetch import BoundedLedger
from insidescan.processing.insider import WalletAnalyzer, fetch_window


async def main(address: str, depth: int) -> None:
    settings = get_settings()

    print("=" * 60)
    print(f"RPC endpoint: {settings.solana_rpc_url}")
    print(f"Seeds configured: {len(settings.seed_addresses)}")
    print("=" * 60)

    async with SolanaRpcClient() as rpc:
        ledger = BoundedLedger(rpc, settings.fetch_timeout_seconds, settings.max_concurrency)
        deadline = Deadline(settings.scan_timeout_seconds)

        window = await fetch_window(ledger, address, depth)
        print(f"\nWindow: {window.depth} signatures, {window.unavailable} unavailable")
        for ref, tx in zip(window.signatures, window.entries, strict=True):
            if tx is None:
                print(f"  {ref.signature[:16]}  t={ref.block_time}  (unavailable)")
                continue
            change = tx.balance_change(address)
            print(f"  {tx.signature[:16]}  t={tx.block_time}  change={change}  transfers={len(tx.transfers)}")

        result = await WalletAnalyzer(ledger, settings).classify(address, depth)
        print(f"\nInsider: {result.is_insider}")
        print(f"Reason: {result.reason}")
        print(f"Patterns: {', '.join(result.detected_patterns) or '-'}")
        metrics = result.trade_metrics
        print(f"Success rate: {metrics.success_rate}  Avg hold (h): {metrics.avg_hold_time}")
        print(f"Tokens held: {result.token_count}")
        print(f"Time left: {deadline.remaining():.1f}s")

    print("\n" + "=" * 60)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python scripts/probe_rpc.py <wallet-address> [depth]")
        sys.exit(1)
    asyncio.run(main(sys.argv[1], int(sys.argv[2]) if len(sys.argv) > 2 else 20))
