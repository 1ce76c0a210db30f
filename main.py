#!/usr/bin/env python3
"""
SDN Screening - CLI Entry Point

Screen customer names against the OFAC SDN watchlist.

Usage:
    python main.py serve                  # Start API server
    python main.py lookup --name <name>   # Look up watchlist records
    python main.py check <name>           # Screen one name
    python main.py bulk <name> <name>...  # Screen many names
    python main.py bulk --file names.txt  # Screen names from a file
"""

import asyncio
import argparse
import json
import sys
from pathlib import Path

import structlog
import uvicorn

from sdn_screening.config import get_settings
from sdn_screening.log import configure_logging
from sdn_screening.models import RiskLevel
from sdn_screening.services import SanctionsScreener

logger = structlog.get_logger()


RISK_ICONS = {
    RiskLevel.CRITICAL: "🔴",
    RiskLevel.CLEAR: "🟢",
    RiskLevel.UNKNOWN: "⚪",
}


def print_json(data: dict):
    print(json.dumps(data, indent=2, default=str))


async def cmd_serve(args):
    """Start the API server."""
    settings = get_settings()

    logger.info(
        "Starting SDN Screening API",
        host=settings.host,
        port=settings.port
    )

    config = uvicorn.Config(
        "sdn_screening.api:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info"
    )
    server = uvicorn.Server(config)
    await server.serve()
    return 0


async def cmd_lookup(args):
    """Look up watchlist records."""
    screener = SanctionsScreener()

    try:
        result = await screener.get_sdn_data(args.name, args.country, args.limit)
    finally:
        await screener.close()

    if args.json:
        print_json(result.to_dict())
        return 0 if result.success else 1

    if not result.success:
        print(f"❌ Lookup failed: {result.error}")
        return 1

    print(f"\n📋 {result.count} record(s) found")
    print("=" * 60)
    for record in result.data:
        icon = "👤" if record.is_person else "🏢"
        print(f"\n{icon} {record.name} [{record.schema_ or 'unknown'}] id={record.id}")
        if record.alias_list:
            print(f"  Aliases:   {', '.join(record.alias_list)}")
        if record.country_list:
            print(f"  Countries: {', '.join(record.country_list)}")
        if record.sanction_list:
            print(f"  Programs:  {', '.join(record.sanction_list)}")
    return 0


async def cmd_check(args):
    """Screen a single name."""
    screener = SanctionsScreener()

    try:
        result = await screener.check_customer(args.name, fuzzy_match=not args.exact)
    finally:
        await screener.close()

    if args.json:
        print_json(result.to_dict())
        return 0

    print(f"\nScreening: {result.customer_name}")
    print("=" * 60)
    print(f"{RISK_ICONS[result.risk_level]} Risk Level: {result.risk_level.value}")
    print(f"📊 Matches: {result.match_count}")
    if result.error:
        print(f"❌ Error: {result.error}")
    for record in result.matches:
        print(f"   • {record.name} ({record.dataset or 'unknown dataset'})")
    return 0


def read_names(path: str) -> list[str]:
    """Read one name per line, skipping blank lines."""
    text = Path(path).read_text(encoding="utf-8")
    return [line.strip() for line in text.splitlines() if line.strip()]


async def cmd_bulk(args):
    """Screen a batch of names."""
    names = list(args.names)
    if args.file:
        names.extend(read_names(args.file))

    screener = SanctionsScreener(max_concurrent=args.concurrency)

    try:
        result = await screener.bulk_check(names)
    finally:
        await screener.close()

    if args.json:
        print_json(result.to_dict())
        return 0 if result.success else 1

    if not result.success:
        print(f"❌ Error: {result.error}")
        return 1

    print(f"\nBulk screening: {result.total_checked} name(s)")
    print("=" * 60)
    for r in result.results:
        line = f"{RISK_ICONS[r.risk_level]} {r.risk_level.value:<8} {r.customer_name}"
        if r.match_count:
            line += f" ({r.match_count} match(es))"
        if r.error:
            line += f" - {r.error}"
        print(line)

    summary = result.summary
    print(f"\n🚨 Critical: {summary.critical}   ✅ Clear: {summary.clear}   ❓ Unknown: {summary.unknown}")

    retry = result.unknown_names()
    if retry:
        print(f"\n🔁 Retry candidates: {', '.join(retry)}")
    return 0


def positive_int(value: str) -> int:
    """argparse type for integers >= 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="SDN Screening CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # serve
    subparsers.add_parser("serve", help="Start API server")

    # lookup
    lookup_parser = subparsers.add_parser("lookup", help="Look up watchlist records")
    lookup_parser.add_argument("--name", "-n", help="Name to search for")
    lookup_parser.add_argument("--country", "-c", help="Country filter")
    lookup_parser.add_argument("--limit", "-l", type=positive_int, default=None)
    lookup_parser.add_argument("--json", action="store_true", help="Print JSON output")

    # check
    check_parser = subparsers.add_parser("check", help="Screen one name")
    check_parser.add_argument("name", help="Customer name to screen")
    check_parser.add_argument("--exact", action="store_true", help="Disable fuzzy matching")
    check_parser.add_argument("--json", action="store_true", help="Print JSON output")

    # bulk
    bulk_parser = subparsers.add_parser("bulk", help="Screen many names")
    bulk_parser.add_argument("names", nargs="*", help="Customer names to screen")
    bulk_parser.add_argument("--file", "-f", help="File with one name per line")
    bulk_parser.add_argument(
        "--concurrency", type=positive_int, default=None,
        help="Maximum lookups in flight"
    )
    bulk_parser.add_argument("--json", action="store_true", help="Print JSON output")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging()

    commands = {
        "serve": cmd_serve,
        "lookup": cmd_lookup,
        "check": cmd_check,
        "bulk": cmd_bulk,
    }

    sys.exit(asyncio.run(commands[args.command](args)))


if __name__ == "__main__":
    main()
