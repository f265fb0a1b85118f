"""Tests for the command-line entry point."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import orjson
import pytest
from ledger_fakes import BUYER, SEED, TARGET

from insidescan import cli
from insidescan.processing.insider.models import ScanResult, ScanState


def _parse(*argv: str):
    return cli._build_parser().parse_args(list(argv))


class TestScanBody:
    def test_single(self) -> None:
        body = cli._scan_body(_parse("scan", "single", TARGET, "--depth", "30"))
        assert body == {"mode": "single", "address": TARGET, "depth": 30}

    def test_batch(self) -> None:
        body = cli._scan_body(_parse("scan", "batch", TARGET, BUYER))
        assert body == {"mode": "batch", "addresses": [TARGET, BUYER]}

    def test_recent_with_options(self) -> None:
        body = cli._scan_body(
            _parse("scan", "recent", "--seed", SEED, "--max-candidates", "5", "--all")
        )
        assert body == {
            "mode": "recent",
            "seedOverride": SEED,
            "maxCandidates": 5,
            "insidersOnly": False,
        }

    def test_unknown_mode_rejected(self) -> None:
        with pytest.raises(SystemExit):
            _parse("scan", "everything")


class TestMain:
    def test_serve(self) -> None:
        with patch("insidescan.cli.uvicorn.run") as run:
            cli.main(["serve", "--port", "9000"])
        run.assert_called_once_with("insidescan.main:app", host="0.0.0.0", port=9000, reload=False)

    def test_scan_prints_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        result = ScanResult(success=True, message="Found 0 wallets", mode="single")
        with (
            patch("insidescan.cli.run_scan", AsyncMock(return_value=result)) as run_scan,
            patch("insidescan.cli.setup_logging"),
        ):
            cli.main(["scan", "single", TARGET])

        run_scan.assert_awaited_once_with({"mode": "single", "address": TARGET})
        printed = orjson.loads(capsys.readouterr().out)
        assert printed["success"] is True
        assert printed["totalScanned"] == 0

    def test_failed_scan_exits_non_zero(self) -> None:
        result = ScanResult(success=False, message="Invalid request: x", state=ScanState.FAILED)
        with (
            patch("insidescan.cli.run_scan", AsyncMock(return_value=result)),
            patch("insidescan.cli.setup_logging"),
            pytest.raises(SystemExit) as exc_info,
        ):
            cli.main(["scan", "single", "x"])
        assert exc_info.value.code == 1
