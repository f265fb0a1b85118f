"""Wallet scan endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from insidescan.core.dependencies import LedgerDep, SettingsDep
from insidescan.processing.insider import run_scan

router = APIRouter()

_ERROR_STATUS = {"invalid_request": 400, "scan_failed": 500}


@router.post("")
async def scan_wallets(
    ledger: LedgerDep,
    settings: SettingsDep,
    body: Any = Body(default=None),
) -> JSONResponse:
    """Classify one wallet, a batch, or wallets discovered from seed transfers.

    Always answers with a ScanResult body, whatever JSON value was sent.
    Timeouts are 200 with ``timedOut: true``; rejected requests are 400.
    """
    result = await run_scan(body, gateway=ledger, settings=settings)
    return JSONResponse(
        content=result.model_dump(mode="json", by_alias=True),
        status_code=_ERROR_STATUS.get(result.error or "", 200),
    )
