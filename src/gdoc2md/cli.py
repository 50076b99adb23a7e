#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Command-line interface for gdoc2md.

Commands
--------
- ``gdoc2md convert INPUT``: convert a saved Docs API JSON file, or fetch a
  document by id or URL and convert it.
- ``gdoc2md serve``: run the HTTP server.

"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from gdoc2md import __version__
from gdoc2md.config import load_config_from_args
from gdoc2md.constants import DEFAULT_CREDENTIALS_PATH
from gdoc2md.converter import convert, convert_json
from gdoc2md.document import ConversionResult
from gdoc2md.exceptions import ConfigurationError, FetchError, Gdoc2MdError, InputError
from gdoc2md.fetch import GoogleDocsClient
from gdoc2md.logging_utils import configure_logging
from gdoc2md.server import extract_document_id, run_server

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 3
EXIT_FETCH_ERROR = 4
EXIT_INPUT_ERROR = 10


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to an appropriate CLI exit code."""
    if isinstance(exception, ConfigurationError):
        return EXIT_CONFIG_ERROR
    if isinstance(exception, FetchError):
        return EXIT_FETCH_ERROR
    if isinstance(exception, InputError):
        return EXIT_INPUT_ERROR
    return EXIT_ERROR


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with ``convert`` and ``serve`` subcommands."""
    parser = argparse.ArgumentParser(
        prog="gdoc2md",
        description="Convert Google Docs documents to Markdown.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gdoc2md convert document.json                      Convert a saved API response
  gdoc2md convert 1hfLONQb1TJdHQ5Sm044gvi9UJtzhjlOMiXVymwFQgmA -o notes.md
  gdoc2md convert https://docs.google.com/document/d/<id>/edit --json
  gdoc2md serve --port 8080
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", help="Logging level: DEBUG, INFO, WARNING, ERROR (default: WARNING)")
    parser.add_argument("--log-file", help="Also write log records to this file")
    parser.add_argument("--trace", action="store_true", help="Include timestamps and logger names in log output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    convert_parser = subparsers.add_parser("convert", help="Convert a document to Markdown")
    convert_parser.add_argument("input", help="Docs API JSON file, document id, or Google Docs URL")
    convert_parser.add_argument("-o", "--output", type=Path, help="Write Markdown to this file instead of stdout")
    convert_parser.add_argument(
        "--credentials",
        default=DEFAULT_CREDENTIALS_PATH,
        help=f"Service account key used when fetching by id (default: {DEFAULT_CREDENTIALS_PATH})",
    )
    output_group = convert_parser.add_mutually_exclusive_group()
    output_group.add_argument("--title", action="store_true", help="Prepend the document title as a heading")
    output_group.add_argument("--json", action="store_true", help="Emit {title, content} as JSON")
    convert_parser.add_argument(
        "--rich", action="store_true", help="Render the Markdown in the terminal instead of printing it raw"
    )

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP server")
    serve_parser.add_argument("--host", help="Interface to bind")
    serve_parser.add_argument("--port", type=int, help="Port to listen on")
    serve_parser.add_argument("--credentials", help="Service account key file")
    serve_parser.add_argument("--cache-ttl", type=int, help="Seconds before cached content is refetched")
    serve_parser.add_argument("--default-doc-id", help="Document served when no id is requested")
    serve_parser.add_argument("--static-dir", help="Directory holding index.html and assets")

    return parser


def load_result(source: str, credentials: str) -> ConversionResult:
    """Convert ``source``, which is either a JSON file or a document id/URL.

    Raises
    ------
    InputError
        If the file is not a document resource or ``source`` holds no id.
    FetchError
        If fetching the document fails.

    """
    path = Path(source)
    if path.is_file():
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except ValueError as e:
            raise InputError(f"{path} is not valid JSON: {e}", parameter_name="input", original_error=e) from e
        return convert_json(payload)

    doc_id, _ = extract_document_id(source)
    if doc_id is None:
        raise InputError(f"Not a file, document id or Google Docs URL: {source}", parameter_name="input")

    with GoogleDocsClient.from_service_account_file(credentials) as client:
        return convert(client.fetch_document(doc_id))


def format_result(result: ConversionResult, as_json: bool = False, with_title: bool = False) -> str:
    """Format a conversion result for output."""
    if as_json:
        return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    if with_title and result.title:
        return f"# {result.title}\n\n{result.content}"
    return result.content


def _print_rich(markdown: str, console: Any = None) -> None:
    from rich.console import Console
    from rich.markdown import Markdown

    console = console or Console()
    console.print(Markdown(markdown))


def run_convert(args: argparse.Namespace) -> int:
    """Execute the ``convert`` command."""
    result = load_result(args.input, args.credentials)
    output = format_result(result, as_json=args.json, with_title=args.title)

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output + "\n", encoding="utf-8")
        logger.info("Wrote %s", args.output)
    elif args.rich and not args.json:
        _print_rich(output)
    else:
        print(output)
    return EXIT_SUCCESS


def run_serve(args: argparse.Namespace) -> int:
    """Execute the ``serve`` command."""
    config = load_config_from_args(args)
    config.validate()
    if args.log_level is None:
        configure_logging(config.log_level, log_file=args.log_file, trace_mode=args.trace)
    run_server(config)
    return EXIT_SUCCESS


def main(args: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI.

    Parameters
    ----------
    args : list[str], optional
        Command-line arguments. Uses sys.argv if None.

    Returns
    -------
    int
        Exit code (0 for success).

    """
    parsed_args = create_parser().parse_args(args)
    configure_logging(parsed_args.log_level or "WARNING", log_file=parsed_args.log_file, trace_mode=parsed_args.trace)

    try:
        if parsed_args.command == "serve":
            return run_serve(parsed_args)
        return run_convert(parsed_args)
    except Gdoc2MdError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e.message}", file=sys.stderr)
        return get_exit_code_for_exception(e)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
