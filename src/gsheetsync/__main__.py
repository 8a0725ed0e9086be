"""CLI entry point for gsheetsync.

Usage:
    python -m gsheetsync read <spreadsheet> <start> [end]
    python -m gsheetsync write <spreadsheet> CELL=VALUE [CELL=VALUE ...]
    python -m gsheetsync clear <spreadsheet> <cell_or_range>
    python -m gsheetsync insert-row <spreadsheet> <index>
    python -m gsheetsync delete-row <spreadsheet> <index>
    python -m gsheetsync insert-column <spreadsheet> <index>
    python -m gsheetsync delete-column <spreadsheet> <index>
    python -m gsheetsync protect <spreadsheet> [start end]
    python -m gsheetsync unprotect <spreadsheet>

Every command accepts --sheet TITLE to target a sheet other than the first.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from gsheetsync.client import SheetConfig, SheetsClient
from gsheetsync.config import get_settings
from gsheetsync.exceptions import SheetsError
from gsheetsync.transport import (
    GoogleSheetsTransport,
    LocalFileTransport,
    Transport,
    TransportError,
)

Operation = Callable[[SheetsClient, SheetConfig], Awaitable[Any]]


def _make_transport(args: argparse.Namespace) -> Transport | None:
    if args.local:
        return LocalFileTransport(Path(args.local))
    token = args.token or get_settings().access_token
    if not token:
        print(
            "Error: No access token. Pass --token or set GSHEETSYNC_ACCESS_TOKEN.",
            file=sys.stderr,
        )
        return None
    return GoogleSheetsTransport(access_token=token)


async def _run(args: argparse.Namespace, operation: Operation) -> int:
    """Open the spreadsheet, select the sheet, run ``operation``, print JSON."""
    transport = _make_transport(args)
    if transport is None:
        return 1

    async with SheetsClient(transport) as client:
        try:
            config = await client.open(args.spreadsheet)
            if args.sheet:
                config = await client.use_sheet(config, args.sheet)
            result = await operation(client, config)
        except (SheetsError, TransportError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    print(json.dumps(result, indent=2))
    return 0


async def cmd_read(args: argparse.Namespace) -> int:
    """Print the non-blank cells between start and end."""
    return await _run(args, lambda client, config: client.get_data(config, args.start, args.end))


async def cmd_write(args: argparse.Namespace) -> int:
    """Write CELL=VALUE pairs to the sheet."""
    updates: dict[str, str] = {}
    for pair in args.updates:
        cell, sep, value = pair.partition("=")
        if not sep:
            print(f"Error: Expected CELL=VALUE, got '{pair}'", file=sys.stderr)
            return 1
        updates[cell] = value
    return await _run(args, lambda client, config: client.update_data(config, updates))


async def cmd_clear(args: argparse.Namespace) -> int:
    return await _run(args, lambda client, config: client.clear_cell(config, args.cell))


async def cmd_insert_row(args: argparse.Namespace) -> int:
    return await _run(args, lambda client, config: client.insert_row(config, args.index))


async def cmd_delete_row(args: argparse.Namespace) -> int:
    return await _run(args, lambda client, config: client.delete_row(config, args.index))


async def cmd_insert_column(args: argparse.Namespace) -> int:
    return await _run(
        args, lambda client, config: client.insert_column(config, args.index)
    )


async def cmd_delete_column(args: argparse.Namespace) -> int:
    return await _run(
        args, lambda client, config: client.delete_column(config, args.index)
    )


async def cmd_protect(args: argparse.Namespace) -> int:
    """Protect the whole sheet, or the cells from start to end."""
    if (args.start is None) != (args.end is None):
        print("Error: protect takes both start and end, or neither", file=sys.stderr)
        return 1
    if args.start is None:
        return await _run(args, lambda client, config: client.protect_sheet(config))
    return await _run(
        args,
        lambda client, config: client.protect_cells_in_range(
            config, args.start, args.end
        ),
    )


async def cmd_unprotect(args: argparse.Namespace) -> int:
    """Remove every protected range on the sheet."""
    return await _run(args, lambda client, config: client.unprotect_sheet(config))


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "spreadsheet",
        help="Spreadsheet ID or full Google Sheets URL",
    )
    common.add_argument(
        "--sheet",
        default=None,
        help="Sheet title (defaults to the first sheet)",
    )
    common.add_argument(
        "--token",
        default=None,
        help="OAuth2 access token (defaults to GSHEETSYNC_ACCESS_TOKEN)",
    )
    common.add_argument(
        "--local",
        default=None,
        metavar="GOLDEN_DIR",
        help="Read from golden files instead of the API (for testing)",
    )
    common.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser = argparse.ArgumentParser(
        prog="gsheetsync",
        description="Read, write and structure Google Sheets using A1 notation",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    read_parser = subparsers.add_parser(
        "read", parents=[common], help="Print cell values as JSON"
    )
    read_parser.add_argument("start", help="First cell, e.g. A1")
    read_parser.add_argument(
        "end", nargs="?", default=None, help="Last cell (defaults to start)"
    )
    read_parser.set_defaults(func=cmd_read)

    write_parser = subparsers.add_parser(
        "write", parents=[common], help="Write values to cells"
    )
    write_parser.add_argument(
        "updates", nargs="+", metavar="CELL=VALUE", help="e.g. A1=Name B2=42"
    )
    write_parser.set_defaults(func=cmd_write)

    clear_parser = subparsers.add_parser(
        "clear", parents=[common], help="Clear a cell or range"
    )
    clear_parser.add_argument("cell", help="Cell or range, e.g. B2 or A1:C3")
    clear_parser.set_defaults(func=cmd_clear)

    for name, func, what in (
        ("insert-row", cmd_insert_row, "Insert an empty row"),
        ("delete-row", cmd_delete_row, "Delete a row"),
        ("insert-column", cmd_insert_column, "Insert an empty column"),
        ("delete-column", cmd_delete_column, "Delete a column"),
    ):
        dimension_parser = subparsers.add_parser(name, parents=[common], help=what)
        dimension_parser.add_argument(
            "index", type=int, help="One-based row or column position"
        )
        dimension_parser.set_defaults(func=func)

    protect_parser = subparsers.add_parser(
        "protect", parents=[common], help="Protect the sheet or a range of cells"
    )
    protect_parser.add_argument("start", nargs="?", default=None, help="First cell")
    protect_parser.add_argument("end", nargs="?", default=None, help="Last cell")
    protect_parser.set_defaults(func=cmd_protect)

    unprotect_parser = subparsers.add_parser(
        "unprotect", parents=[common], help="Remove all protection from the sheet"
    )
    unprotect_parser.set_defaults(func=cmd_unprotect)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    level = logging.DEBUG if args.verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    result: int = asyncio.run(args.func(args))
    return result


if __name__ == "__main__":
    sys.exit(main())
