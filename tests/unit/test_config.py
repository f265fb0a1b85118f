"""Unit tests for Settings validators and env-var loading in config.py."""

from __future__ import annotations

from decimal import Decimal

import pytest
from ledger_fakes import SEED, SEED_B
from pydantic import ValidationError

from insidescan.config import Settings


class TestParseSeedAddresses:
    """Tests for parse_seed_addresses validator."""

    def test_none_returns_empty_list(self) -> None:
        assert Settings.parse_seed_addresses(None) == []

    def test_csv_string(self) -> None:
        result = Settings.parse_seed_addresses(f"{SEED}, {SEED_B}")
        assert result == [SEED, SEED_B]

    def test_json_array_string(self) -> None:
        result = Settings.parse_seed_addresses(f'["{SEED}", "{SEED_B}"]')
        assert result == [SEED, SEED_B]

    def test_duplicates_dropped_in_order(self) -> None:
        result = Settings.parse_seed_addresses([SEED_B, SEED, SEED_B])
        assert result == [SEED_B, SEED]

    def test_blank_entries_ignored(self) -> None:
        assert Settings.parse_seed_addresses(f" ,{SEED},, ") == [SEED]


class TestParseSeedLabels:
    """Tests for parse_seed_labels validator."""

    def test_none_returns_empty_dict(self) -> None:
        assert Settings.parse_seed_labels(None) == {}

    def test_pairs(self) -> None:
        result = Settings.parse_seed_labels(f"{SEED}:Alpha, {SEED_B}:Beta Desk")
        assert result == {SEED: "Alpha", SEED_B: "Beta Desk"}

    def test_json_object(self) -> None:
        result = Settings.parse_seed_labels(f'{{"{SEED}": "Alpha"}}')
        assert result == {SEED: "Alpha"}

    def test_malformed_pairs_skipped(self) -> None:
        result = Settings.parse_seed_labels(f"nolabel,{SEED}:,{SEED_B}:Beta")
        assert result == {SEED_B: "Beta"}


class TestParseCorsAllowOrigins:
    def test_csv_string(self) -> None:
        result = Settings.parse_cors_allow_origins("https://a.example, https://b.example")
        assert result == ["https://a.example", "https://b.example"]

    def test_json_array_string(self) -> None:
        assert Settings.parse_cors_allow_origins('["*"]') == ["*"]


class TestSettingsDefaults:
    def test_detection_defaults(self) -> None:
        s = Settings(_env_file=None)
        assert s.min_funding_sol == Decimal("0.5")
        assert s.max_funding_sol == Decimal("2.5")
        assert s.fresh_wallet_max_balance_sol == Decimal("0.01")
        assert s.quick_trade_threshold == 3
        assert s.good_play_threshold == 1
        assert s.total_trade_threshold == 10
        assert s.quick_trade_window_seconds == 60
        assert s.good_play_window_seconds == 300

    def test_inverted_funding_band_rejected(self) -> None:
        with pytest.raises(ValidationError, match="min_funding_sol"):
            Settings(_env_file=None, min_funding_sol=Decimal("3"), max_funding_sol=Decimal("2"))

    def test_default_depth_above_max_rejected(self) -> None:
        with pytest.raises(ValidationError, match="default_scan_depth"):
            Settings(_env_file=None, default_scan_depth=80, max_scan_depth=50)

    def test_non_positive_timeout_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, scan_timeout_seconds=0)


class TestSeedLabel:
    def test_configured_label(self) -> None:
        s = Settings(_env_file=None, seed_labels={SEED: "Alpha"})
        assert s.seed_label(SEED) == "Alpha"

    def test_unlabelled_address_shortened(self) -> None:
        s = Settings(_env_file=None)
        assert s.seed_label(SEED_B) == f"{SEED_B[:4]}...{SEED_B[-4:]}"


class TestEnvLoading:
    """Settings read from environment variables."""

    def test_seed_addresses_from_csv_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEED_ADDRESSES", f"{SEED},{SEED_B}")
        s = Settings(_env_file=None)
        assert s.seed_addresses == [SEED, SEED_B]

    def test_seed_labels_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEED_LABELS", f"{SEED}:Alpha")
        s = Settings(_env_file=None)
        assert s.seed_labels == {SEED: "Alpha"}

    def test_prefixed_core_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INSIDESCAN_ENV", "production")
        monkeypatch.setenv("INSIDESCAN_LOG_LEVEL", "WARNING")
        s = Settings(_env_file=None)
        assert s.env == "production"
        assert s.log_level == "WARNING"
        assert s.is_production

    def test_funding_band_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MIN_FUNDING_SOL", "0.25")
        monkeypatch.setenv("MAX_FUNDING_SOL", "5")
        s = Settings(_env_file=None)
        assert s.min_funding_sol == Decimal("0.25")
        assert s.max_funding_sol == Decimal("5")
