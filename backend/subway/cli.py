#!/usr/bin/env python3
"""CLI tool for inspecting and editing subway lines.

Usage:
    # Register a station
    python -m subway.cli create-station "Gangnam"

    # List stations and lines
    python -m subway.cli list-stations
    python -m subway.cli list-lines

    # Show a line's stations from head to tail
    python -m subway.cli show-line <line-id>

    # Add a section / remove a station
    python -m subway.cli add-section <line-id> <up-station-id> <down-station-id> <distance>
    python -m subway.cli remove-station <line-id> <station-id>
"""

import argparse
import asyncio
import sys
import uuid

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from subway.core.config import settings
from subway.core.database import get_engine, get_session_factory
from subway.core.logging import configure_logging
from subway.models import Base
from subway.schemas.subway import SectionRequest, StationRequest
from subway.services.line_service import LineService
from subway.services.station_service import StationService


def _print_error(e: HTTPException) -> int:
    print(f"❌ Error: {e.detail}", file=sys.stderr)
    return 1


async def cmd_create_station(args: argparse.Namespace, session: AsyncSession) -> int:
    """
    Register a station.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        station = await StationService(session).create_station(StationRequest(name=args.name))
    except HTTPException as e:
        return _print_error(e)

    print("✅ Created station successfully!")
    print(f"   Station ID: {station.id}")
    print(f"   Name:       {station.name}")
    return 0


async def cmd_list_stations(args: argparse.Namespace, session: AsyncSession) -> int:
    stations = await StationService(session).list_stations()
    if not stations:
        print("No stations registered.")
        return 0

    print(f"Stations ({len(stations)}):")
    for station in stations:
        print(f"   {station.id}  {station.name}")
    return 0


async def cmd_list_lines(args: argparse.Namespace, session: AsyncSession) -> int:
    lines = await LineService(session).list_lines()
    if not lines:
        print("No lines registered.")
        return 0

    print(f"Lines ({len(lines)}):")
    for line in lines:
        print(f"   {line.id}  {line.name} ({line.color})")
    return 0


async def cmd_show_line(args: argparse.Namespace, session: AsyncSession) -> int:
    """
    Print a line's stations from head to tail with section distances.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        line = await LineService(session).get_line(uuid.UUID(args.line_id))
    except HTTPException as e:
        return _print_error(e)

    print(f"{line.name} ({line.color})")
    for section in line.sections:
        print(f"   {section.up_station.name} -[{section.distance}]-> {section.down_station.name}")
    print(f"   Stations: {len(line.get_stations())}, total distance: {line.sections.total_distance}")
    return 0


async def cmd_add_section(args: argparse.Namespace, session: AsyncSession) -> int:
    try:
        request = SectionRequest(
            up_station_id=uuid.UUID(args.up_station_id),
            down_station_id=uuid.UUID(args.down_station_id),
            distance=args.distance,
        )
        section = await LineService(session).add_section(uuid.UUID(args.line_id), request)
    except HTTPException as e:
        return _print_error(e)

    print(f"✅ Added section {section.up_station.name} -> {section.down_station.name} ({section.distance})")
    return 0


async def cmd_remove_station(args: argparse.Namespace, session: AsyncSession) -> int:
    try:
        result = await LineService(session).remove_station(uuid.UUID(args.line_id), uuid.UUID(args.station_id))
    except HTTPException as e:
        return _print_error(e)

    if result.survivor is not None:
        survivor = result.survivor
        print(
            f"✅ Merged sections: {survivor.up_station.name} -> {survivor.down_station.name} ({survivor.distance})"
        )
    else:
        print(f"✅ Removed end section {result.removed_section_id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Subway line management CLI tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    create_station_parser = subparsers.add_parser("create-station", help="Register a new station")
    create_station_parser.add_argument("name", type=str, help="Station name")

    subparsers.add_parser("list-stations", help="List all stations")
    subparsers.add_parser("list-lines", help="List all lines")

    show_line_parser = subparsers.add_parser("show-line", help="Show a line's stations in order")
    show_line_parser.add_argument("line_id", type=str, help="Line UUID")

    add_section_parser = subparsers.add_parser("add-section", help="Add a section to a line")
    add_section_parser.add_argument("line_id", type=str, help="Line UUID")
    add_section_parser.add_argument("up_station_id", type=str, help="Up-station UUID")
    add_section_parser.add_argument("down_station_id", type=str, help="Down-station UUID")
    add_section_parser.add_argument("distance", type=int, help="Section distance")

    remove_station_parser = subparsers.add_parser("remove-station", help="Remove a station from a line")
    remove_station_parser.add_argument("line_id", type=str, help="Line UUID")
    remove_station_parser.add_argument("station_id", type=str, help="Station UUID")

    return parser


def main() -> int:
    """
    Main entry point for the CLI tool.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    command_handlers = {
        "create-station": cmd_create_station,
        "list-stations": cmd_list_stations,
        "list-lines": cmd_list_lines,
        "show-line": cmd_show_line,
        "add-section": cmd_add_section,
        "remove-station": cmd_remove_station,
    }

    configure_logging(log_level=settings.LOG_LEVEL)

    if handler := command_handlers.get(args.command):

        async def run_with_session() -> int:
            if settings.DATABASE_CREATE_TABLES:
                async with get_engine().begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
            async with get_session_factory()() as session:
                try:
                    return await handler(args, session)
                except ValueError as e:
                    print(f"❌ Error: {e}", file=sys.stderr)
                    return 1

        return asyncio.run(run_with_session())

    print(f"❌ Unknown command: {args.command}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
