#!/usr/bin/env python3
"""
Car Entry Tracker - records store with Google Sheets mirror

CLI Commands:
    serve              - Run the HTTP API
    validate           - Validate configuration (store, Sheets credentials)
    ensure-headers     - Write the header row if the sheet tab is empty
    list               - Print records from the store

Usage:
    python main.py serve --port 8000
    python main.py validate
    python main.py ensure-headers
    python main.py list --json
"""

import argparse
import json
import sys

from core.config import ConfigurationError, load_config_from_env
from core.logging_config import setup_logging


def cmd_serve(args):
    """Run the FastAPI app with uvicorn."""
    import uvicorn

    uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def cmd_validate(args):
    """Validate configuration and report each problem."""
    config = load_config_from_env()
    print(repr(config))
    print("-" * 50)

    try:
        config.validate(require_sheets=not args.skip_sheets)
    except ConfigurationError as e:
        print(f"FAIL: {e}")
        return 1

    print("OK: configuration is valid")
    return 0


def cmd_ensure_headers(args):
    """Write the header row into an empty sheet tab."""
    from services.sheets import SheetsGateway, SheetsGatewayError

    config = load_config_from_env()
    gateway = SheetsGateway(config.sheets)
    tab = args.sheet or config.sheets.sheet_name

    try:
        created = gateway.ensure_headers(tab)
    except SheetsGatewayError as e:
        print(f"ERROR: {e}")
        return 1

    if created:
        print(f"OK: headers written to {tab}")
    else:
        print(f"OK: {tab} already has a header row")
    return 0


def cmd_list(args):
    """Print records from the store, newest first."""
    from services.record_store import RecordStore

    config = load_config_from_env()
    store = RecordStore(config.store.db_path)
    records = store.list_records()
    if args.limit:
        records = records[:args.limit]

    if args.json:
        print(json.dumps([r.to_json() for r in records], indent=2))
        return 0

    for record in records:
        row = record.sheet_row if record.sheet_row else "-"
        print(f"{record.created_at}  row={row:<5}  {record.plate_no:<12}  {record.car_details}")
    print(f"\n{len(records)} record(s)")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Car Entry Tracker - records store with Google Sheets mirror",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py serve --reload
    python main.py validate --skip-sheets
    python main.py ensure-headers --sheet Drivers
    python main.py list --limit 20
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    validate_parser = subparsers.add_parser("validate", help="Validate configuration")
    validate_parser.add_argument(
        "--skip-sheets", action="store_true", help="Skip Google Sheets settings"
    )

    headers_parser = subparsers.add_parser("ensure-headers", help="Write the sheet header row")
    headers_parser.add_argument("--sheet", help="Tab name (default: SHEET_TAB)")

    list_parser = subparsers.add_parser("list", help="List stored records")
    list_parser.add_argument("--limit", type=int, help="Maximum records to print")
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    config = load_config_from_env()
    setup_logging(config.log_level, config.log_format)

    commands = {
        "serve": cmd_serve,
        "validate": cmd_validate,
        "ensure-headers": cmd_ensure_headers,
        "list": cmd_list,
    }
    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
