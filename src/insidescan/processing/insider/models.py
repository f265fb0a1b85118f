"""Data models for insider wallet detection.

Evidence, metrics and verdict models produced fresh per request, plus the
scan request/response shapes exchanged with the HTTP layer. All models
serialize with camelCase keys (``model_dump(by_alias=True)``) and render
SOL amounts as 4-decimal strings.
"""

from __future__ import annotations

import re
from decimal import Decimal
from enum import Enum
from typing import Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from insidescan.core.constants import (
    BASE58_ADDRESS_PATTERN,
    RATIO_DISPLAY_QUANTUM,
    SOL_DISPLAY_QUANTUM,
)

_ADDRESS_RE = re.compile(BASE58_ADDRESS_PATTERN)

ScanMode = Literal["single", "batch", "recent", "discover"]


def format_sol(value: Decimal | None) -> str | None:
    """Render a SOL amount with 4 decimal places (``Decimal("1") -> "1.0000"``)."""
    if value is None:
        return None
    return str(value.quantize(SOL_DISPLAY_QUANTUM))


def format_ratio(value: Decimal | None) -> str | None:
    if value is None:
        return None
    return str(value.quantize(RATIO_DISPLAY_QUANTUM))


def is_valid_address(address: str) -> bool:
    return bool(_ADDRESS_RE.match(address))


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class FundingEvidence(_CamelModel):
    """Who first funded a wallet, and whether it was fresh at the time.

    ``source`` is set only for a qualifying event (seed sender, amount in
    band, near-zero prior balance). When nothing qualified, the ``observed_*``
    fields describe the earliest seed inflow that was seen, if any.
    """

    source: str | None = None
    source_label: str | None = None
    amount: Decimal | None = None
    is_fresh_wallet: bool = False
    signature: str | None = None
    funded_at: int | None = None

    observed_source: str | None = None
    observed_amount: Decimal | None = None
    observed_prior_balance: Decimal | None = None

    @field_serializer("amount", "observed_amount", "observed_prior_balance")
    def _serialize_sol(self, value: Decimal | None) -> str | None:
        return format_sol(value)


class TradeMetrics(_CamelModel):
    """Round-trip and delayed-profit counts over one transaction window.

    ``success_rate`` is the percentage of balance-bearing entries with a
    positive change; ``avg_hold_time`` is the mean gap in hours between
    adjacent fetched entries less than a week apart. Both are None when the
    window holds nothing to measure.
    """

    quick_trades: int = Field(default=0, ge=0)
    good_plays: int = Field(default=0, ge=0)
    total_trades: int = Field(default=0, ge=0)
    total_profit: Decimal = Decimal(0)
    wash_volume: Decimal = Decimal(0)
    success_rate: Decimal | None = Field(default=None, ge=0, le=100)
    avg_hold_time: Decimal | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_counts(self) -> TradeMetrics:
        if self.quick_trades > self.total_trades or self.good_plays > self.total_trades:
            raise ValueError("quick_trades and good_plays cannot exceed total_trades")
        return self

    @field_serializer("total_profit", "wash_volume")
    def _serialize_sol(self, value: Decimal) -> str | None:
        return format_sol(value)

    @field_serializer("success_rate", "avg_hold_time")
    def _serialize_ratio(self, value: Decimal | None) -> str | None:
        return format_ratio(value)


class ClassificationResult(_CamelModel):
    """Verdict for one address."""

    address: str
    balance: Decimal | None = None
    transaction_count: int = Field(default=0, ge=0)
    token_count: int | None = Field(default=None, ge=0)  # non-zero SPL token accounts
    is_insider: bool = False
    reason: str = ""
    funding_evidence: FundingEvidence = Field(default_factory=FundingEvidence)
    trade_metrics: TradeMetrics = Field(default_factory=TradeMetrics)
    detected_patterns: tuple[str, ...] = ()
    analysis_depth: int = Field(default=0, ge=0)
    unavailable_transactions: int = Field(default=0, ge=0)

    @field_serializer("balance")
    def _serialize_balance(self, value: Decimal | None) -> str | None:
        return format_sol(value)


class DiscoveryCandidate(_CamelModel):
    """An address that received an in-band SOL transfer from a seed."""

    address: str
    funding_source: str
    funding_amount: Decimal
    discovered_from: str  # signature of the funding transaction

    @field_serializer("funding_amount")
    def _serialize_amount(self, value: Decimal) -> str | None:
        return format_sol(value)


class ScanState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    ANALYZING = "analyzing"
    DONE = "done"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


class ScanRequest(BaseModel):
    """Incoming scan request.

    Accepts camelCase or snake_case keys, plus the legacy web client names
    (``scanType``/``scanDepth``/``walletAddress``/``batchWallets``/``rpcEndpoint``).
    Numeric values are ceilings; the orchestrator clamps them to configured caps.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, frozen=True)

    mode: ScanMode = Field(validation_alias=AliasChoices("mode", "scanType", "scan_type"))
    depth: int | None = Field(
        default=None, validation_alias=AliasChoices("depth", "scanDepth", "scan_depth")
    )
    address: str | None = Field(
        default=None,
        validation_alias=AliasChoices("address", "walletAddress", "wallet_address"),
    )
    addresses: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("addresses", "batchWallets", "batch_wallets"),
    )
    seed_override: str | None = Field(
        default=None, validation_alias=AliasChoices("seedOverride", "seed_override")
    )
    rpc_endpoint_override: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "rpcEndpointOverride", "rpc_endpoint_override", "rpcEndpoint"
        ),
    )
    max_candidates: int | None = Field(
        default=None, validation_alias=AliasChoices("maxCandidates", "max_candidates")
    )
    insiders_only: bool | None = Field(
        default=None, validation_alias=AliasChoices("insidersOnly", "insiders_only")
    )

    @field_validator("mode", mode="before")
    @classmethod
    def normalize_mode(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip().lower()
            if v == "specific":
                return "single"
        return v

    @field_validator("address", "seed_override")
    @classmethod
    def check_address(cls, v: str | None) -> str | None:
        if v is not None and not is_valid_address(v):
            raise ValueError(f"not a valid base58 address: {v!r}")
        return v

    @field_validator("addresses")
    @classmethod
    def check_addresses(cls, v: list[str]) -> list[str]:
        cleaned = [a.strip() for a in v if a and a.strip()]
        invalid = [a for a in cleaned if not is_valid_address(a)]
        if invalid:
            raise ValueError(f"not valid base58 addresses: {', '.join(invalid[:5])}")
        return list(dict.fromkeys(cleaned))

    @field_validator("rpc_endpoint_override")
    @classmethod
    def check_rpc_endpoint(cls, v: str | None) -> str | None:
        if v is not None and not v.startswith(("https://", "http://")):
            raise ValueError("rpcEndpointOverride must be an http(s) URL")
        return v or None

    @model_validator(mode="after")
    def check_mode_inputs(self) -> ScanRequest:
        if self.mode == "single" and not (self.address or self.addresses):
            raise ValueError("single mode requires an address")
        if self.mode == "batch" and not (self.addresses or self.address):
            raise ValueError("batch mode requires at least one address")
        return self

    @property
    def target_addresses(self) -> list[str]:
        """Addresses named by the caller, ``address`` first, deduplicated."""
        named = [self.address] if self.address else []
        return list(dict.fromkeys([*named, *self.addresses]))

    @property
    def filter_insiders(self) -> bool:
        if self.insiders_only is not None:
            return self.insiders_only
        return self.mode in ("recent", "discover")


class ScanResult(_CamelModel):
    """Structured response for every scan, including rejected and failed ones."""

    success: bool
    results: list[ClassificationResult] = Field(default_factory=list)
    total_scanned: int = Field(default=0, ge=0)
    message: str = ""
    timed_out: bool = False
    state: ScanState = ScanState.DONE
    mode: ScanMode | None = None
    candidates_discovered: int = Field(default=0, ge=0)
    error: Literal["invalid_request", "scan_failed"] | None = None
