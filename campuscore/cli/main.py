#!/usr/bin/env python3
"""
CampusCore CLI - Main Entry Point

Usage:
    campuscore students list                          # List all students
    campuscore students list --filter search=emma     # Filter locally
    campuscore courses list --filter department=Physics --remote
    campuscore students add name="Emma Stone" email=emma@uni.edu ...
    campuscore students edit 12 gpa=3.6
    campuscore students delete 12
    campuscore attendance export --format json --filter status=Absent
"""

import argparse
import asyncio
import sys
from typing import Any, Dict, List, Optional, Sequence

from rich.console import Console

from campuscore import __version__
from campuscore.core.exceptions import CampusCoreError
from campuscore.core.logging_config import logger
from campuscore.modules.entities import ENTITY_SCHEMAS, get_schema
from campuscore.modules.reconciliation.list_controller import EntityListController
from campuscore.modules.reconciliation.notifications import NotificationCenter, Severity
from campuscore.modules.reconciliation.result import Invalid, LoadFailure, Success
from campuscore.services.entity_api import RecordsEntityApi
from campuscore.services.export_service import ExportService
from campuscore.services.records_client import RecordsClient
from campuscore.cli.renderer import RecordRenderer


def parse_assignments(pairs: Optional[Sequence[str]]) -> Dict[str, str]:
    """Parse `key=value` arguments into a dict; values may contain '='"""
    result: Dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Expected key=value, got '{pair}'")
        result[key] = value
    return result


def parse_record_id(value: str) -> Any:
    value = value.strip()
    return int(value) if value.isdigit() else value


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI"""
    parser = argparse.ArgumentParser(
        prog="campuscore",
        description="CampusCore - manage students, courses, schedules, attendance and reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  campuscore students list                              List all students
  campuscore students list --filter search=emma         Filter the loaded list
  campuscore courses list --filter department=Physics --remote
  campuscore students add name="Emma" email=e@uni.edu student_id=S1 department=Physics year=2
  campuscore students edit 12 gpa=3.6                   Update one field
  campuscore students delete 12                         Delete by ID
  campuscore attendance export --format csv             Write a CSV snapshot

Configuration:
  RECORDS_API_URL and RECORDS_PROJECT_ID must be set (environment or .env).
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    parser.add_argument(
        "entity",
        choices=sorted(ENTITY_SCHEMAS),
        help="Entity to work with"
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Commands")

    # List command
    list_parser = subparsers.add_parser("list", help="List records")
    list_parser.add_argument(
        "--filter", "-f",
        dest="filters",
        action="append",
        metavar="KEY=VALUE",
        help="Filter criterion (repeatable)"
    )
    list_parser.add_argument(
        "--remote",
        action="store_true",
        help="Also send the criteria to the record service"
    )

    # Add command
    add_parser = subparsers.add_parser("add", help="Create a record")
    add_parser.add_argument("fields", nargs="*", metavar="FIELD=VALUE")

    # Edit command
    edit_parser = subparsers.add_parser("edit", help="Update a record")
    edit_parser.add_argument("record_id", type=parse_record_id, help="Record ID")
    edit_parser.add_argument("fields", nargs="*", metavar="FIELD=VALUE")

    # Delete command
    delete_parser = subparsers.add_parser("delete", help="Delete a record")
    delete_parser.add_argument("record_id", type=parse_record_id, help="Record ID")

    # Export command
    export_parser = subparsers.add_parser("export", help="Export records to a file")
    export_parser.add_argument(
        "--format",
        dest="fmt",
        choices=["csv", "json"],
        default="csv",
        help="Export format (default: csv)"
    )
    export_parser.add_argument(
        "--filter", "-f",
        dest="filters",
        action="append",
        metavar="KEY=VALUE",
        help="Filter criterion (repeatable)"
    )

    return parser


async def run_command(
    args: argparse.Namespace,
    client: RecordsClient,
    renderer: RecordRenderer,
    exporter: Optional[ExportService] = None,
) -> int:
    """Run one command against the record service; returns the exit code"""
    schema = get_schema(args.entity)
    notifications = NotificationCenter()
    notifications.subscribe(renderer.render_notification)
    controller = EntityListController(schema, RecordsEntityApi(schema, client), notifications)

    command = args.command

    if command in ("list", "export"):
        criteria = parse_assignments(args.filters)
        remote = getattr(args, "remote", False)
        loaded = await controller.refresh(criteria if remote else None)
        if not loaded:
            return 1
        controller.set_criteria(criteria)

        if command == "list":
            renderer.render_records(schema, controller.projection, criteria)
            return 0

        path = await (exporter or ExportService()).export(controller.projection, schema, args.fmt)
        renderer.render_export(path, len(controller.projection))
        return 0

    if command == "add":
        controller.start_add()
        controller.form.update(parse_assignments(args.fields))
        result = await controller.submit()

    elif command == "edit":
        record = await controller.store.get(args.record_id)
        if isinstance(record, LoadFailure):
            notifications.error(record.message, schema.name)
            return 1
        controller.collection.append(record)
        controller.start_edit(record.id)
        controller.form.update(parse_assignments(args.fields))
        result = await controller.submit()

    else:
        result = await controller.delete(args.record_id)

    if isinstance(result, Invalid):
        renderer.render_field_errors(schema, result.errors)
    elif isinstance(result, Success) and result.record is not None:
        renderer.render_record(schema, result.record)

    last = notifications.last
    return 1 if last is not None and last.severity == Severity.ERROR else 0


async def run(args: argparse.Namespace, renderer: RecordRenderer) -> int:
    async with RecordsClient.from_settings() as client:
        return await run_command(args, client, renderer)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    console = Console()
    renderer = RecordRenderer(console)

    try:
        return asyncio.run(run(args, renderer))
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))
    except KeyError as e:
        renderer.render_error(str(e.args[0]) if e.args else str(e))
        return 2
    except CampusCoreError as e:
        logger.debug(f"CLI command failed: {e.code}", extra={"error": e.to_dict()})
        renderer.render_error(e.message, details=e.code)
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        return 130


if __name__ == "__main__":
    sys.exit(main())
