"""
prefill.cli - Command-line interface.

Main entry point for the prefill CLI tool.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from prefill import __version__
from prefill.commands import forms, map_cmd, serve
from prefill.errors import PrefillError


def _add_fetch_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--base-url",
        help="Upstream base URL (overrides api.base_url / PREFILL_API_BASE_URL)",
        metavar="URL",
    )
    parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output JSON",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="prefill",
        description="Form dependency graph prefill mapping",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  prefill serve                       # Serve the sample graph on :4000
  prefill forms                       # List forms from the upstream graph
  prefill sources FORM_ID             # Direct, transitive and global sources
  prefill fields FORM_ID              # Fields and their prefill mappings
  prefill map FORM_ID email form:OTHER_FORM.email

Configuration:
  .prefill.toml in the current directory or any parent, then
  PREFILL_<SECTION>_<KEY> environment variables (e.g. PREFILL_API_BASE_URL).
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"prefill {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output (debug logging, tracebacks on error)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the mock data server",
    )
    serve_parser.add_argument("--host", help="Bind address", metavar="HOST")
    serve_parser.add_argument("--port", type=int, help="Port to listen on", metavar="PORT")
    serve_parser.add_argument(
        "--data",
        type=Path,
        help="Graph JSON file to serve (defaults to the bundled sample)",
        metavar="PATH",
    )

    # forms command
    forms_parser = subparsers.add_parser(
        "forms",
        help="List forms in the upstream graph",
    )
    _add_fetch_options(forms_parser)

    # fields command
    fields_parser = subparsers.add_parser(
        "fields",
        help="Show a form's fields and their prefill mappings",
    )
    fields_parser.add_argument("form_id", help="Form to inspect", metavar="FORM_ID")
    _add_fetch_options(fields_parser)

    # sources command
    sources_parser = subparsers.add_parser(
        "sources",
        help="Show prefill sources available to a form",
    )
    sources_parser.add_argument("form_id", help="Selected form", metavar="FORM_ID")
    _add_fetch_options(sources_parser)

    # map command
    map_parser = subparsers.add_parser(
        "map",
        help="Map a field to a prefill source",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
SOURCE formats:
  form:<form_id>.<field_id>      Field of a direct or transitive dependency
  global:<catalog_id>.<field_id> Global property (e.g. global:global_client_org.org_name)
""",
    )
    map_parser.add_argument("form_id", help="Form whose field is mapped", metavar="FORM_ID")
    map_parser.add_argument("field_id", help="Field to prefill", metavar="FIELD_ID")
    map_parser.add_argument("source", help="Source to prefill from", metavar="SOURCE")
    _add_fetch_options(map_parser)

    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    from prefill.config import get_config
    from prefill.utilities.logging import configure_logging

    log_config = get_config(getattr(args, "config", None)).get("logging", {})
    level = "DEBUG" if args.verbose else str(log_config.get("level", "WARNING"))
    configure_logging(level=level, json_output=bool(log_config.get("json", False)))


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        _configure_logging(args)

        if args.command == "serve":
            return serve.run(args)
        elif args.command in ("forms", "fields", "sources"):
            return forms.run(args)
        elif args.command == "map":
            return map_cmd.run(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except PrefillError as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
