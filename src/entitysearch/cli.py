"""
Entity Search Tool.

Command-line front end for the entity search session: loads the schema of an
entity, applies the given filters, runs the query and prints the matching rows.

Typical usage:
    $ entity-search user --filter email=a@b.com --user admin
    $ entity-search user --list-fields
    $ entity-search --list-entities
"""

import argparse
import datetime
import sys
from typing import Any, List, Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .comm import EntityClient
from .comm.config import DEFAULT_BASE_PATH, DEFAULT_PORT, DEFAULT_TIMEOUT
from .errors import EntitySearchError, MetadataError
from .handlers import EntitySearchHandler
from .logging_config import get_logger, setup_logging
from .models.response import QueryResult

# Set the hierarchical logger
logger = get_logger(__name__)

console = Console()
err_console = Console(stderr=True)


def _parse_filter_arg(filter_arg: str) -> Tuple[str, str]:
    field_name, sep, text = filter_arg.partition("=")
    field_name = field_name.strip()
    if not sep or not field_name:
        raise argparse.ArgumentTypeError(
            f"Filter '{filter_arg}' is not of the form FIELD=VALUE"
        )
    return field_name, text


def _render_cell(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, datetime.datetime):
        return value.isoformat(sep=" ", timespec="seconds")
    return str(value)


def _render_result(entity_name: str, result: QueryResult) -> Table:
    table = Table(title=f"{entity_name} ({len(result)} rows)")
    for column in result.header:
        table.add_column(column)
    for row in result:
        table.add_row(*[_render_cell(row.get(column)) for column in result.header])
    return table


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="entity-search", description="Search entities of a remote service."
    )

    parser.add_argument("entity", nargs="?", help="Name of the entity type to search")

    # Filter Arguments
    parser.add_argument(
        "--filter",
        "-f",
        dest="filters",
        action="append",
        default=[],
        type=_parse_filter_arg,
        metavar="FIELD=VALUE",
        help="Filter on a searchable field (repeatable). An empty VALUE clears the filter.",
    )
    parser.add_argument("--user", "-u", help="Session user forwarded to the service")

    # Connection Arguments
    parser.add_argument("--host", default="localhost", help="Service host")
    parser.add_argument(
        "--port", type=int, default=DEFAULT_PORT, help=f"Service port (Default: {DEFAULT_PORT})"
    )
    parser.add_argument(
        "--base-path", default=DEFAULT_BASE_PATH, help="Path prefix of the service endpoints"
    )
    parser.add_argument(
        "--timeout", type=float, default=DEFAULT_TIMEOUT, help="Request timeout in seconds"
    )

    # Output Arguments
    parser.add_argument(
        "--list-entities", action="store_true", help="List the available entity types and exit"
    )
    parser.add_argument(
        "--list-fields", action="store_true", help="List the searchable fields and exit"
    )
    parser.add_argument("--show-query", action="store_true", help="Print the generated query")
    parser.add_argument(
        "--dry-run", action="store_true", help="Print the generated query without running it"
    )
    parser.add_argument(
        "--log",
        "-l",
        help="Set the logging verbosity level",
        default="WARNING",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Runs the tool and returns the process exit code.

    Args:
        argv: Command-line arguments, defaults to `sys.argv[1:]`.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(level=args.log, pretty=True, console=err_console)

    client = EntityClient.connect(
        host=args.host,
        port=args.port,
        timeout=args.timeout,
        base_path=args.base_path,
    )
    with client:
        if args.list_entities:
            try:
                names = client.list_entities()
            except (ConnectionError, MetadataError) as e:
                err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
                return 1
            for name in names:
                console.print(name)
            return 0

        if not args.entity:
            parser.error("the entity name is required unless --list-entities is given")

        handler = EntitySearchHandler(client, args.entity)
        if not handler.load_metadata():
            err_console.print(f"[bold red]Error:[/bold red] {escape(str(handler.error))}")
            return 1

        if args.list_fields:
            table = Table(title=f"{args.entity} searchable fields")
            table.add_column("field")
            table.add_column("type")
            for sfield in handler.search_fields:
                table.add_row(sfield.name, str(sfield.type))
            console.print(table)
            return 0

        try:
            for field_name, text in args.filters:
                handler.set_text(field_name, text)
        except EntitySearchError as e:
            err_console.print(f"[bold red]Invalid filter:[/bold red] {escape(str(e))}")
            return 1

        query = handler.build_query()
        logger.debug(f"Generated query '{query}'")
        if args.show_query or args.dry_run:
            console.print(query, markup=False, highlight=False, soft_wrap=True)
        if args.dry_run:
            return 0

        result = handler.search(user=args.user)
        if result is None:
            err_console.print(f"[bold red]Search failed:[/bold red] {escape(str(handler.error))}")
            return 1

        console.print(_render_result(args.entity, result))
        return 0


def entity_search():
    """
    Console script entry point.
    """
    sys.exit(main())


if __name__ == "__main__":
    entity_search()
