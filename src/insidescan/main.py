"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from insidescan.api import api_router
from insidescan.config import get_settings
from insidescan.core.logging import get_logger, setup_logging
from insidescan.ledger.client import SolanaRpcClient

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: one shared RPC client for all requests."""
    settings = get_settings()
    setup_logging(settings)

    async with SolanaRpcClient() as ledger:
        app.state.ledger = ledger
        logger.info(
            "InsideScan ready",
            env=settings.env,
            seeds=len(settings.seed_addresses),
        )
        yield
        app.state.ledger = None


app = FastAPI(
    title="InsideScan",
    description="Insider-style wallet detection on Solana",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allow_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Infrastructure (no prefix, not versioned)


@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness check: always ok if process is running."""
    return {"status": "ok"}


# Domain API
app.include_router(api_router, prefix="/api/v1")
