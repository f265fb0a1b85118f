"""Deterministic insider verdict over funding evidence and trade metrics."""

from __future__ import annotations

from decimal import Decimal

from insidescan.config import Settings
from insidescan.core.constants import (
    PATTERN_DELAYED_PROFIT,
    PATTERN_FRESH_WALLET,
    PATTERN_HIGH_ACTIVITY,
    PATTERN_SEED_FUNDED,
    PATTERN_WASH_TRADING,
)
from insidescan.processing.insider.models import (
    ClassificationResult,
    FundingEvidence,
    TradeMetrics,
    format_sol,
)
from insidescan.processing.insider.window import TransactionWindow


class InsiderClassifier:
    """Applies the insider rule:

        source set AND fresh wallet AND amount in [min, max]
        AND quick_trades >= quick threshold
        AND good_plays   >= good-play threshold
        AND total_trades >= total threshold

    A negative verdict lists every failed sub-condition and by how much,
    plus a note when part of the window could not be fetched. Missing data
    always resolves to a negative verdict, never to an exception.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def classify(
        self,
        window: TransactionWindow,
        evidence: FundingEvidence,
        metrics: TradeMetrics,
        balance: Decimal | None = None,
        token_count: int | None = None,
    ) -> ClassificationResult:
        failures = self._funding_failures(evidence, window) + self._trade_failures(metrics)
        is_insider = not failures

        if is_insider:
            reason = (
                f"Funded by {evidence.source_label or evidence.source} with "
                f"{format_sol(evidence.amount)} SOL as a fresh wallet, followed by "
                f"{metrics.quick_trades} quick trades and {metrics.good_plays} good plays"
            )
        else:
            reason = "Not flagged: " + "; ".join(failures)
            missing = self._missing_evidence(window)
            if missing:
                reason += f" (evidence incomplete: {missing})"

        return ClassificationResult(
            address=window.address,
            balance=balance,
            transaction_count=window.depth,
            token_count=token_count,
            is_insider=is_insider,
            reason=reason,
            funding_evidence=evidence,
            trade_metrics=metrics,
            detected_patterns=self.detect_patterns(evidence, metrics),
            analysis_depth=window.depth,
            unavailable_transactions=window.unavailable,
        )

    def detect_patterns(self, evidence: FundingEvidence, metrics: TradeMetrics) -> tuple[str, ...]:
        """Tags for each satisfied sub-condition, independent of the verdict."""
        s = self._settings
        patterns: list[str] = []
        if evidence.source is not None:
            patterns.append(PATTERN_SEED_FUNDED)
        if evidence.is_fresh_wallet:
            patterns.append(PATTERN_FRESH_WALLET)
        if metrics.quick_trades and metrics.quick_trades >= s.quick_trade_threshold:
            patterns.append(PATTERN_WASH_TRADING)
        if metrics.good_plays and metrics.good_plays >= s.good_play_threshold:
            patterns.append(PATTERN_DELAYED_PROFIT)
        if metrics.total_trades and metrics.total_trades >= s.total_trade_threshold:
            patterns.append(PATTERN_HIGH_ACTIVITY)
        return tuple(patterns)

    def _band(self) -> str:
        return f"{self._settings.min_funding_sol}-{self._settings.max_funding_sol} SOL"

    def _in_band(self, amount: Decimal) -> bool:
        return self._settings.min_funding_sol <= amount <= self._settings.max_funding_sol

    def _funding_failures(self, evidence: FundingEvidence, window: TransactionWindow) -> list[str]:
        s = self._settings
        failures: list[str] = []

        if evidence.source is None:
            if evidence.observed_amount is None:
                if not window.history_available:
                    failures.append("funding history unavailable")
                else:
                    failures.append(
                        f"no funding from a known seed wallet in the last {window.depth} transactions"
                    )
                return failures

            label = s.seed_label(evidence.observed_source or "")
            if not self._in_band(evidence.observed_amount):
                failures.append(
                    f"seed funding of {format_sol(evidence.observed_amount)} SOL from {label} "
                    f"is outside the {self._band()} range"
                )
            prior = evidence.observed_prior_balance
            if prior is not None and prior >= s.fresh_wallet_max_balance_sol:
                failures.append(
                    f"wallet already held {format_sol(prior)} SOL when funded by {label} "
                    f"(fresh wallet limit {s.fresh_wallet_max_balance_sol} SOL)"
                )
            return failures or ["no qualifying funding from a known seed wallet"]

        if not evidence.is_fresh_wallet:
            failures.append("funded wallet was not fresh")
        if evidence.amount is None or not self._in_band(evidence.amount):
            failures.append(
                f"funding amount {format_sol(evidence.amount)} SOL is outside the {self._band()} range"
            )
        return failures

    def _trade_failures(self, metrics: TradeMetrics) -> list[str]:
        s = self._settings
        failures: list[str] = []
        if metrics.quick_trades < s.quick_trade_threshold:
            failures.append(
                f"need {s.quick_trade_threshold - metrics.quick_trades} more quick trades "
                f"({metrics.quick_trades}/{s.quick_trade_threshold})"
            )
        if metrics.good_plays < s.good_play_threshold:
            failures.append(
                f"need {s.good_play_threshold - metrics.good_plays} more good plays "
                f"({metrics.good_plays}/{s.good_play_threshold})"
            )
        if metrics.total_trades < s.total_trade_threshold:
            failures.append(
                f"insufficient trade volume: need {s.total_trade_threshold - metrics.total_trades} "
                f"more trades ({metrics.total_trades}/{s.total_trade_threshold})"
            )
        return failures

    @staticmethod
    def _missing_evidence(window: TransactionWindow) -> str:
        if not window.history_available:
            return "transaction history unavailable"
        if window.unavailable:
            return f"{window.unavailable} of {window.depth} transactions unavailable"
        return ""
