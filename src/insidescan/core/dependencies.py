"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from insidescan.config import Settings, get_settings
from insidescan.ledger.base import LedgerGateway

SettingsDep = Annotated[Settings, Depends(get_settings)]


async def get_ledger(request: Request) -> LedgerGateway:
    """Shared ledger gateway from app.state (set during lifespan)."""
    ledger: LedgerGateway | None = getattr(request.app.state, "ledger", None)
    if ledger is None:
        raise HTTPException(status_code=503, detail="Ledger client not initialized")
    return ledger


LedgerDep = Annotated[LedgerGateway, Depends(get_ledger)]
