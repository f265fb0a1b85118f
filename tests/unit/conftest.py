"""Shared fixtures for unit tests: deterministic settings and a fake ledger."""

from __future__ import annotations

import pytest
from ledger_fakes import FakeLedger, make_settings

from insidescan.config import Settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()
