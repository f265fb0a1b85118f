"""CLI entry point for InsideScan.

    insidescan serve [--host H] [--port P] [--reload]
    insidescan scan single <address> [--depth N]
    insidescan scan batch <address> <address> ...
    insidescan scan recent [--seed S] [--max-candidates N]
    insidescan scan discover [--max-candidates N]
"""

import argparse
import asyncio
import sys
from typing import Any

import orjson
import uvicorn

from insidescan.config import get_settings
from insidescan.core.logging import setup_logging
from insidescan.processing.insider import run_scan


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="InsideScan")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve.add_argument("--host", default="0.0.0.0", help="Bind host")
    serve.add_argument("--port", type=int, default=8000, help="Bind port")

    scan = sub.add_parser("scan", help="Run one scan and print the JSON result")
    scan.add_argument("mode", choices=["single", "batch", "recent", "discover"])
    scan.add_argument("addresses", nargs="*", help="Wallet address(es) for single/batch")
    scan.add_argument("--depth", type=int, help="Transactions to inspect per wallet")
    scan.add_argument("--seed", help="Seed address override for recent/discover")
    scan.add_argument("--max-candidates", type=int, help="Discovery candidate cap")
    scan.add_argument("--rpc", help="RPC endpoint override")
    scan.add_argument(
        "--all",
        action="store_true",
        help="Include non-insider verdicts for recent/discover",
    )
    return parser


def _scan_body(args: argparse.Namespace) -> dict[str, Any]:
    body: dict[str, Any] = {"mode": args.mode}
    if args.mode == "single" and args.addresses:
        body["address"] = args.addresses[0]
    elif args.addresses:
        body["addresses"] = args.addresses
    if args.depth is not None:
        body["depth"] = args.depth
    if args.seed:
        body["seedOverride"] = args.seed
    if args.max_candidates is not None:
        body["maxCandidates"] = args.max_candidates
    if args.rpc:
        body["rpcEndpointOverride"] = args.rpc
    if args.all:
        body["insidersOnly"] = False
    return body


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)

    if args.command == "serve":
        uvicorn.run(
            "insidescan.main:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
        )
        return

    setup_logging(get_settings())
    result = asyncio.run(run_scan(_scan_body(args)))
    sys.stdout.write(
        orjson.dumps(result.model_dump(mode="json", by_alias=True), option=orjson.OPT_INDENT_2).decode()
        + "\n"
    )
    if not result.success:
        sys.exit(1)
