#!/usr/bin/env python3
"""
SGAY Scheme Monitor: launch the API or print a report.

Usage:
    python main.py serve                        # http://localhost:8000
    python main.py serve --port 9000            # http://localhost:9000
    python main.py serve --data-dir /srv/sgay   # alternate seed files
    python main.py serve --reload               # auto-reload on code changes
    python main.py report monthly --month "September 2026"
    python main.py report constituency --constituency Namchi
    python main.py report financial --period "Last Year"
"""

from __future__ import annotations

import argparse
import os
import sys
from datetime import date
from pathlib import Path


def _serve(args: argparse.Namespace) -> None:
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn is not installed.")
        print("  pip install uvicorn[standard]")
        sys.exit(1)

    url = f"http://{'localhost' if args.host == '0.0.0.0' else args.host}:{args.port}"
    print(f"Starting SGAY Scheme Monitor at {url}")
    print(f"Data directory: {os.getenv('APP_DATA_DIR', 'data')}")
    print()

    uvicorn.run(
        "api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


def _report(args: argparse.Namespace) -> None:
    from housing.errors import DataLoadError
    from housing.reports import build_report, render_report_text
    from housing.store import HouseStore
    from utils.config import AppConfig

    cfg = AppConfig.from_env()
    try:
        store = HouseStore.from_json(cfg.beneficiaries_path)
    except DataLoadError as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    try:
        data = build_report(
            args.name, store.fetch_all(), date.today(),
            month=args.month, constituency=args.constituency, period=args.period,
        )
    except ValueError as exc:
        print(f"Error: {exc}")
        sys.exit(2)
    print(render_report_text(args.name, data))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="SGAY Scheme Monitor: beneficiary house tracking.",
    )
    parser.add_argument(
        "--data-dir", type=Path, default=None,
        help="Directory holding beneficiaries.json and officers.json (default: data or APP_DATA_DIR)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument(
        "--host", default=os.getenv("APP_HOST", "127.0.0.1"),
        help="Bind address (default: 127.0.0.1 or APP_HOST env var)",
    )
    serve.add_argument(
        "--port", type=int, default=int(os.getenv("APP_PORT", "8000")),
        help="Port to listen on (default: 8000 or APP_PORT env var)",
    )
    serve.add_argument(
        "--reload", action="store_true",
        help="Enable auto-reload on file changes (development mode)",
    )
    serve.set_defaults(func=_serve)

    report = sub.add_parser("report", help="Print a report as plain text")
    report.add_argument("name", choices=["houses", "monthly", "constituency", "financial"])
    report.add_argument("--month", default=None, help="Monthly report label, e.g. 'September 2026'")
    report.add_argument("--constituency", default="All", help="Constituency report filter")
    report.add_argument("--period", default=None,
                        help="Financial period: Last Month, Last 3 Months, Last 6 Months, Last Year")
    report.set_defaults(func=_report)

    args = parser.parse_args()

    # Env vars are read when the app module is imported
    if args.data_dir is not None:
        os.environ["APP_DATA_DIR"] = str(args.data_dir)

    args.func(args)


if __name__ == "__main__":
    main()
