"""System status and config endpoints."""

from fastapi import APIRouter

from insidescan.core.dependencies import SettingsDep
from insidescan.processing.insider.models import format_sol

router = APIRouter()


@router.get("/config")
async def system_config(settings: SettingsDep) -> dict[str, object]:
    """Effective detection thresholds (no secrets, RPC URL host only)."""
    return {
        "env": settings.env,
        "seed_count": len(settings.seed_addresses),
        "funding_band_sol": [format_sol(settings.min_funding_sol), format_sol(settings.max_funding_sol)],
        "fresh_wallet_max_balance_sol": format_sol(settings.fresh_wallet_max_balance_sol),
        "quick_trade_window_seconds": settings.quick_trade_window_seconds,
        "good_play_window_seconds": settings.good_play_window_seconds,
        "good_play_profit_floor_sol": format_sol(settings.good_play_profit_floor_sol),
        "thresholds": {
            "quick_trades": settings.quick_trade_threshold,
            "good_plays": settings.good_play_threshold,
            "total_trades": settings.total_trade_threshold,
        },
        "limits": {
            "max_scan_depth": settings.max_scan_depth,
            "max_batch_addresses": settings.max_batch_addresses,
            "max_discovery_candidates": settings.max_discovery_candidates,
            "max_concurrency": settings.max_concurrency,
            "scan_timeout_seconds": settings.scan_timeout_seconds,
        },
    }
