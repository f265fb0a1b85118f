"""Application configuration via pydantic-settings."""

import json
from decimal import Decimal
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from insidescan.core.constants import DEFAULT_SOLANA_RPC_URL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    # Core
    env: Literal["development", "staging", "production"] = Field(
        default="development", alias="INSIDESCAN_ENV"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="INSIDESCAN_LOG_LEVEL"
    )

    # Ledger (Solana JSON-RPC)
    solana_rpc_url: str = Field(default=DEFAULT_SOLANA_RPC_URL)
    rpc_commitment: Literal["processed", "confirmed", "finalized"] = Field(default="confirmed")
    rpc_http_timeout: float = Field(default=30.0, gt=0)
    rpc_rate_limit_per_second: int = Field(
        default=10,
        gt=0,
        description="Client-side cap on JSON-RPC calls per second",
    )
    allow_rpc_endpoint_override: bool = Field(
        default=True,
        description="Accept a per-request RPC endpoint from the caller",
    )

    # Seed wallets
    seed_addresses: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Known funding sources whose recipients are inspected",
    )
    seed_labels: Annotated[dict[str, str], NoDecode] = Field(
        default_factory=dict,
        description="Human-readable names for seed addresses (address -> label)",
    )

    @field_validator("seed_addresses", mode="before")
    @classmethod
    def parse_seed_addresses(cls, v: str | list[str] | None) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                v = json.loads(v)
            else:
                v = [a.strip() for a in v.split(",") if a.strip()]
        # Preserve order, drop duplicates
        return list(dict.fromkeys(v))

    @field_validator("seed_labels", mode="before")
    @classmethod
    def parse_seed_labels(cls, v: str | dict[str, str] | None) -> dict[str, str]:
        if v is None:
            return {}
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("{"):
                return dict(json.loads(v))
            labels: dict[str, str] = {}
            for pair in v.split(","):
                address, sep, label = pair.partition(":")
                if sep and address.strip() and label.strip():
                    labels[address.strip()] = label.strip()
            return labels
        return v

    # Funding band (SOL)
    min_funding_sol: Decimal = Field(default=Decimal("0.5"), ge=0)
    max_funding_sol: Decimal = Field(default=Decimal("2.5"), gt=0)
    fresh_wallet_max_balance_sol: Decimal = Field(
        default=Decimal("0.01"),
        ge=0,
        description="Balance below which a wallet counts as fresh before funding",
    )

    # Trade pattern windows
    quick_trade_window_seconds: int = Field(default=60, gt=0)
    good_play_window_seconds: int = Field(default=300, gt=0)
    good_play_profit_floor_sol: Decimal = Field(default=Decimal("0.1"), ge=0)

    # Classification thresholds
    quick_trade_threshold: int = Field(default=3, ge=0)
    good_play_threshold: int = Field(default=1, ge=0)
    total_trade_threshold: int = Field(default=10, ge=0)

    # Deadlines (seconds)
    fetch_timeout_seconds: float = Field(default=8.0, gt=0, description="Per gateway call")
    analysis_timeout_seconds: float = Field(default=20.0, gt=0, description="Per address")
    batch_chunk_timeout_seconds: float = Field(default=25.0, gt=0)
    discovery_timeout_seconds: float = Field(default=20.0, gt=0)
    scan_timeout_seconds: float = Field(default=55.0, gt=0, description="Whole request")

    # Limits
    max_concurrency: int = Field(
        default=8,
        gt=0,
        description="Max parallel gateway calls per request",
    )
    batch_chunk_size: int = Field(default=5, gt=0)
    default_scan_depth: int = Field(default=20, gt=0)
    max_scan_depth: int = Field(default=50, gt=0)
    max_batch_addresses: int = Field(default=25, gt=0)
    max_discovery_candidates: int = Field(default=50, gt=0)
    discovery_page_size: int = Field(default=25, gt=0)
    discovery_max_pages: int = Field(default=4, gt=0)

    # HTTP
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default=["*"])

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def parse_cors_allow_origins(cls, v: str | list[str] | None) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                v = json.loads(v)
            else:
                v = [o.strip() for o in v.split(",") if o.strip()]
        return v

    @model_validator(mode="after")
    def check_funding_band(self) -> "Settings":
        if self.min_funding_sol > self.max_funding_sol:
            raise ValueError("min_funding_sol must not exceed max_funding_sol")
        if self.default_scan_depth > self.max_scan_depth:
            raise ValueError("default_scan_depth must not exceed max_scan_depth")
        return self

    def seed_label(self, address: str) -> str:
        """Display name for a seed address (label, or shortened address)."""
        label = self.seed_labels.get(address)
        if label:
            return label
        if len(address) > 12:
            return f"{address[:4]}...{address[-4:]}"
        return address

    @property
    def is_production(self) -> bool:
        return self.env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
