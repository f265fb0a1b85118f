"""Tests for trade pattern analysis."""

from __future__ import annotations

from decimal import Decimal

from ledger_fakes import LAMPORTS, T0, TARGET, insider_history, make_tx, trade_tx

from insidescan.config import Settings
from insidescan.processing.insider.patterns import TradePatternAnalyzer


class TestTradePatternAnalyzer:
    def test_insider_profile_counts(self, settings: Settings) -> None:
        metrics = TradePatternAnalyzer(settings).analyze(TARGET, insider_history(TARGET))

        assert metrics.total_trades == 11
        assert metrics.quick_trades == 8
        assert metrics.good_plays == 1
        assert metrics.wash_volume == Decimal("0.8")
        # funding 1.0 + four +0.1 flips + the 0.5 win
        assert metrics.total_profit == Decimal("1.9")

    def test_empty_window(self, settings: Settings) -> None:
        metrics = TradePatternAnalyzer(settings).analyze(TARGET, [])
        assert metrics.total_trades == 0
        assert metrics.quick_trades == 0
        assert metrics.good_plays == 0
        assert metrics.total_profit == Decimal(0)

    def test_single_transaction_has_no_pairs(self, settings: Settings) -> None:
        metrics = TradePatternAnalyzer(settings).analyze(TARGET, [trade_tx("a", T0, TARGET, LAMPORTS)])
        assert metrics.total_trades == 1
        assert metrics.quick_trades == 0
        assert metrics.good_plays == 0

    def test_gap_boundaries(self, settings: Settings) -> None:
        # Newest first: exactly 60s is quick, exactly 300s is not a good play
        window = [
            trade_tx("c", T0 + 360, TARGET, LAMPORTS),
            trade_tx("b", T0 + 60, TARGET, LAMPORTS),
            trade_tx("a", T0, TARGET, LAMPORTS),
        ]
        metrics = TradePatternAnalyzer(settings).analyze(TARGET, window)
        assert metrics.quick_trades == 1
        assert metrics.good_plays == 0

    def test_good_play_requires_profit_above_floor(self, settings: Settings) -> None:
        window = [
            trade_tx("b", T0 + 1000, TARGET, LAMPORTS // 10),  # exactly the floor
            trade_tx("a", T0, TARGET, 0),
        ]
        assert TradePatternAnalyzer(settings).analyze(TARGET, window).good_plays == 0

    def test_missing_block_time_skips_gap_checks_only(self, settings: Settings) -> None:
        window = [
            trade_tx("c", T0 + 20, TARGET, 5),
            trade_tx("b", None, TARGET, 5),
            trade_tx("a", T0, TARGET, 5),
        ]
        metrics = TradePatternAnalyzer(settings).analyze(TARGET, window)
        assert metrics.total_trades == 3
        assert metrics.quick_trades == 0

    def test_entries_without_balances_not_counted(self, settings: Settings) -> None:
        window = [
            make_tx("b", T0 + 10, (TARGET,), (), ()),
            trade_tx("a", T0, TARGET, 5),
        ]
        metrics = TradePatternAnalyzer(settings).analyze(TARGET, window)
        assert metrics.total_trades == 1
        assert metrics.quick_trades == 0

    def test_custom_windows(self) -> None:
        settings = Settings(_env_file=None, quick_trade_window_seconds=5)
        window = [trade_tx("b", T0 + 30, TARGET, 1), trade_tx("a", T0, TARGET, 1)]
        assert TradePatternAnalyzer(settings).analyze(TARGET, window).quick_trades == 0

    def test_unavailable_entry_breaks_pairing(self, settings: Settings) -> None:
        # The middle transaction could not be fetched; its real neighbour of
        # "win" is 50s away, so pairing "win" with "old" (400s) would invent a good play
        window = [
            trade_tx("win", T0 + 400, TARGET, LAMPORTS // 2),
            None,
            trade_tx("old", T0, TARGET, LAMPORTS),
        ]
        metrics = TradePatternAnalyzer(settings).analyze(TARGET, window)

        assert metrics.total_trades == 2
        assert metrics.good_plays == 0
        assert metrics.quick_trades == 0
        assert metrics.avg_hold_time is None

    def test_unavailable_entry_does_not_create_quick_trade(self, settings: Settings) -> None:
        window = [
            trade_tx("b", T0 + 30, TARGET, LAMPORTS),
            None,
            trade_tx("a", T0, TARGET, LAMPORTS),
        ]
        assert TradePatternAnalyzer(settings).analyze(TARGET, window).quick_trades == 0


class TestTradeRatios:
    def test_success_rate_and_hold_time(self, settings: Settings) -> None:
        window = [
            trade_tx("c", T0 + 7200, TARGET, LAMPORTS),
            trade_tx("b", T0 + 3600, TARGET, -LAMPORTS),
            trade_tx("a", T0, TARGET, LAMPORTS),
        ]
        metrics = TradePatternAnalyzer(settings).analyze(TARGET, window)

        assert metrics.avg_hold_time == Decimal(1)
        data = metrics.model_dump(mode="json", by_alias=True)
        assert data["successRate"] == "66.7"
        assert data["avgHoldTime"] == "1.0"

    def test_no_trades_means_no_ratios(self, settings: Settings) -> None:
        metrics = TradePatternAnalyzer(settings).analyze(TARGET, [None, None])

        assert metrics.success_rate is None
        assert metrics.avg_hold_time is None
        data = metrics.model_dump(mode="json", by_alias=True)
        assert data["successRate"] is None
        assert data["avgHoldTime"] is None

    def test_losing_window_reports_zero_success(self, settings: Settings) -> None:
        window = [trade_tx("b", T0 + 10, TARGET, -5), trade_tx("a", T0, TARGET, -5)]
        assert TradePatternAnalyzer(settings).analyze(TARGET, window).success_rate == 0

    def test_gaps_of_a_week_or_more_excluded_from_hold_time(self, settings: Settings) -> None:
        window = [
            trade_tx("c", T0 + 8 * 86400 + 1800, TARGET, 5),
            trade_tx("b", T0 + 8 * 86400, TARGET, 5),
            trade_tx("a", T0, TARGET, 5),
        ]
        metrics = TradePatternAnalyzer(settings).analyze(TARGET, window)
        assert metrics.avg_hold_time == Decimal("0.5")
        assert metrics.success_rate == 100
