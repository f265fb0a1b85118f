"""Trade pattern analysis: quick round-trips and delayed profitable trades."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from insidescan.config import Settings
from insidescan.core.constants import MAX_HOLD_TIME_SECONDS
from insidescan.ledger.models import TransactionRecord, lamports_to_sol, sol_to_lamports
from insidescan.processing.insider.models import TradeMetrics


class TradePatternAnalyzer:
    """Derives TradeMetrics from a newest-first transaction window.

    Each entry ``w[i]`` is paired with the chronologically previous entry
    ``w[i + 1]``; the gap between them is ``|w[i].block_time - w[i + 1].block_time|``
    and the checks use the balance change of ``w[i]``, the trade that closes
    the gap:

    - gap <= quick window: quick trade, ``|change|`` added to wash volume
    - gap > good-play window and change > profit floor: good play
    - 0 < gap < one week: counted toward the average hold time

    The window keeps one slot per listed signature; an unavailable slot is
    ``None`` and voids the gap checks of both pairs it belongs to, so two
    fetched neighbours are never paired across a hole.

    Every entry with balances counts toward ``total_trades``; positive
    changes accumulate into ``total_profit`` and the success rate. Entries
    without a block time skip the gap checks only.
    """

    def __init__(self, settings: Settings) -> None:
        self._quick_window = settings.quick_trade_window_seconds
        self._good_window = settings.good_play_window_seconds
        self._profit_floor = sol_to_lamports(settings.good_play_profit_floor_sol)

    def analyze(
        self, address: str, window: Sequence[TransactionRecord | None]
    ) -> TradeMetrics:
        quick_trades = 0
        good_plays = 0
        total_trades = 0
        positive_trades = 0
        profit = 0
        wash = 0
        hold_times: list[int] = []

        for i, tx in enumerate(window):
            if tx is None:
                continue
            change = tx.balance_change(address)
            if change is None:
                continue
            total_trades += 1
            if change > 0:
                positive_trades += 1
                profit += change

            gap = _gap(window, i)
            if gap is None:
                continue
            if 0 < gap < MAX_HOLD_TIME_SECONDS:
                hold_times.append(gap)
            if gap <= self._quick_window:
                quick_trades += 1
                wash += abs(change)
            elif gap > self._good_window and change > self._profit_floor:
                good_plays += 1

        return TradeMetrics(
            quick_trades=quick_trades,
            good_plays=good_plays,
            total_trades=total_trades,
            total_profit=lamports_to_sol(profit),
            wash_volume=lamports_to_sol(wash),
            success_rate=(
                Decimal(positive_trades * 100) / total_trades if total_trades else None
            ),
            avg_hold_time=(
                Decimal(sum(hold_times)) / len(hold_times) / 3600 if hold_times else None
            ),
        )


def _gap(window: Sequence[TransactionRecord | None], i: int) -> int | None:
    """Seconds between ``window[i]`` and its predecessor, if both are known."""
    if i + 1 >= len(window):
        return None
    tx, previous = window[i], window[i + 1]
    if tx is None or previous is None:
        return None
    if tx.block_time is None or previous.block_time is None:
        return None
    return abs(tx.block_time - previous.block_time)
