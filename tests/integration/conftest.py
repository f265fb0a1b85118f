"""Shared fixtures for integration tests.

These tests call a real Solana RPC endpoint (``SOLANA_RPC_URL``, default
public mainnet-beta). Public endpoints are heavily rate limited, so keep
depths small.
"""

from collections.abc import AsyncIterator

import pytest

from insidescan.config import Settings, get_settings
from insidescan.ledger.client import SolanaRpcClient


@pytest.fixture
def live_settings() -> Settings:
    return get_settings()


@pytest.fixture
async def rpc(live_settings: Settings) -> AsyncIterator[SolanaRpcClient]:
    async with SolanaRpcClient(endpoint=live_settings.solana_rpc_url, rate_limit_per_second=4) as client:
        yield client
