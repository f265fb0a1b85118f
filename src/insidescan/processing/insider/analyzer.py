"""Per-address analysis: fetch, detect, classify."""

from __future__ import annotations

import asyncio

from insidescan.config import Settings
from insidescan.core.logging import get_logger
from insidescan.ledger.fetch import BoundedLedger
from insidescan.processing.insider.classifier import InsiderClassifier
from insidescan.processing.insider.models import ClassificationResult
from insidescan.processing.insider.patterns import TradePatternAnalyzer
from insidescan.processing.insider.provenance import ProvenanceDetector
from insidescan.processing.insider.window import fetch_window

logger = get_logger(__name__)


class WalletAnalyzer:
    """Runs provenance + pattern analysis + classification for one address."""

    def __init__(self, ledger: BoundedLedger, settings: Settings) -> None:
        self._ledger = ledger
        self._settings = settings
        self._provenance = ProvenanceDetector(settings)
        self._patterns = TradePatternAnalyzer(settings)
        self._classifier = InsiderClassifier(settings)

    async def classify(self, address: str, depth: int) -> ClassificationResult:
        """Classify ``address`` over its ``depth`` most recent transactions.

        Gateway failures reduce the evidence instead of raising, so this
        returns a result for any valid address.
        """
        depth = max(1, min(depth, self._settings.max_scan_depth))
        account, tokens, window = await asyncio.gather(
            self._ledger.get_account_info(address),
            self._ledger.get_token_accounts(address),
            fetch_window(self._ledger, address, depth),
        )

        evidence = self._provenance.detect(address, window.transactions)
        metrics = self._patterns.analyze(address, window.entries)
        balance = account.value.balance_sol if account.available and account.value else None
        token_count = (
            sum(1 for t in tokens.value if t.is_active)
            if tokens.available and tokens.value is not None
            else None
        )

        result = self._classifier.classify(
            window, evidence, metrics, balance=balance, token_count=token_count
        )
        logger.debug(
            "Wallet classified",
            address=address[:8],
            is_insider=result.is_insider,
            quick_trades=metrics.quick_trades,
            good_plays=metrics.good_plays,
            total_trades=metrics.total_trades,
            unavailable=window.unavailable,
        )
        return result
