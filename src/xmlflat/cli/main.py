"""Main CLI entry point for the xmlflat command-line tool.

Provides commands to convert XML files to JSON, YAML, CSV and visualization
formats, to print the inferred table of a document, and to check files for
well-formedness.
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from xmlflat import __version__
from xmlflat.api import OutputFormat, XMLConverter
from xmlflat.shared import ConverterConfig, get_logger
from xmlflat.shared.config import DEFAULT_MAX_DEPTH

TABLE_FORMATS = ("csv", "json", "text")
CHECK_FORMATS = ("text", "json")
MAX_ERRORS_SHOWN = 3


class CLIConfig:
    """Builds the converter configuration for one CLI invocation."""

    def __init__(self, converter_config: Optional[ConverterConfig] = None):
        self.converter_config = converter_config or ConverterConfig()

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load converter configuration from a JSON file.

        Raises:
            OSError: the file cannot be read
            ValueError: the file is not valid JSON or has unknown options
        """
        return cls(ConverterConfig.from_file(config_path))

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "CLIConfig":
        """Apply the shared command-line overrides on top of ``--config``."""
        config_path = getattr(args, "config", None)
        cli_config = cls.from_file(config_path) if config_path else cls()
        converter_config = cli_config.converter_config

        if getattr(args, "lenient", False):
            converter_config.parser = replace(converter_config.parser, strict_attributes=False)
        max_depth = getattr(args, "max_depth", None)
        if max_depth is not None:
            converter_config.parser = replace(converter_config.parser, max_depth=max_depth)
        row_tag = getattr(args, "row_tag", None)
        if row_tag:
            converter_config.table = replace(converter_config.table, row_tag=row_tag)
        if getattr(args, "include_attributes", False):
            converter_config.table = replace(converter_config.table, include_attributes=True)

        return cli_config


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xmlflat",
        description="Parse XML and flatten it into JSON, YAML or CSV"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Convert command
    convert_parser = subparsers.add_parser("convert", help="Convert an XML file")
    convert_parser.add_argument("path", type=Path, help="XML file to convert")
    convert_parser.add_argument(
        "--to", "-t",
        dest="output_format",
        choices=[fmt.value for fmt in OutputFormat],
        default=OutputFormat.JSON.value,
        help="Output format (default: json)"
    )
    convert_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    _add_common_options(convert_parser)

    # Table command
    table_parser = subparsers.add_parser("table", help="Print the inferred table of an XML file")
    table_parser.add_argument("path", type=Path, help="XML file to tabulate")
    table_parser.add_argument(
        "--format", "-f",
        choices=TABLE_FORMATS,
        default="csv",
        help="Output format (default: csv)"
    )
    _add_common_options(table_parser)

    # Check command
    check_parser = subparsers.add_parser("check", help="Check XML files for well-formedness")
    check_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to check"
    )
    check_parser.add_argument(
        "--format", "-f",
        choices=CHECK_FORMATS,
        default="text",
        help="Output format (default: text)"
    )
    check_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )
    check_parser.add_argument(
        "--lenient",
        action="store_true",
        help="Drop dangling attributes instead of failing"
    )

    return parser


def _add_common_options(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--row-tag",
        help="Child tag to use as table rows (default: most repeated tag)"
    )
    subparser.add_argument(
        "--include-attributes",
        action="store_true",
        help="Add row attributes as @-prefixed columns"
    )
    subparser.add_argument(
        "--max-depth",
        type=int,
        help=f"Maximum element nesting depth (default: {DEFAULT_MAX_DEPTH})"
    )
    subparser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )
    subparser.add_argument(
        "--lenient",
        action="store_true",
        help="Drop dangling attributes instead of failing"
    )


def _load_config(args: argparse.Namespace) -> Optional[ConverterConfig]:
    try:
        return CLIConfig.from_args(args).converter_config
    except (OSError, ValueError) as e:
        print(f"Error: could not load configuration: {e}", file=sys.stderr)
        return None


def _print_errors(result_errors: List[str]) -> None:
    for message in result_errors[:MAX_ERRORS_SHOWN]:
        print(f"Error: {message}", file=sys.stderr)


def cmd_convert(args: argparse.Namespace) -> int:
    """Handle convert command."""
    config = _load_config(args)
    if config is None:
        return 1

    result = XMLConverter(config).convert_file(args.path, args.output_format)
    if not result.success:
        _print_errors([d.message for d in result.errors])
        return 1

    if args.output:
        try:
            args.output.write_text(result.output, encoding="utf-8")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
        print(f"Output written to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(result.output)
        if not result.output.endswith("\n"):
            sys.stdout.write("\n")
    return 0


def format_table_text(headers: List[str], rows: List[List[str]]) -> str:
    """Render a table as left-aligned columns separated by two spaces."""
    widths = [len(header) for header in headers]
    for row in rows:
        for index, cell in enumerate(row):
            widths[index] = max(widths[index], len(cell))

    def line(cells: List[str]) -> str:
        return "  ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()

    lines = [line(headers), line(["-" * width for width in widths])]
    lines.extend(line(row) for row in rows)
    return "\n".join(lines) + "\n"


def cmd_table(args: argparse.Namespace) -> int:
    """Handle table command."""
    config = _load_config(args)
    if config is None:
        return 1

    result = XMLConverter(config).convert_file(args.path, OutputFormat.CSV)
    if not result.success or result.table is None:
        _print_errors([d.message for d in result.errors])
        return 1

    table = result.table
    if args.format == "json":
        sys.stdout.write(json.dumps(table.to_dict(), indent=2, ensure_ascii=False) + "\n")
    elif args.format == "text":
        sys.stdout.write(format_table_text(table.headers, table.rows))
    else:
        sys.stdout.write(result.output)
    return 0


def check_file(converter: XMLConverter, path: Path) -> Dict[str, Any]:
    """Parse one file and summarize the outcome."""
    result = converter.convert_file(path, OutputFormat.JSON)
    summary: Dict[str, Any] = {
        "file": str(path),
        "well_formed": result.success,
        "element_count": result.element_count,
        "root": result.element.name if result.element is not None else None,
        "processing_time_ms": round(result.performance.processing_time_ms, 3),
    }
    if not result.success:
        error = result.errors[0] if result.errors else None
        summary["error_kind"] = result.error_kind.value if result.error_kind else None
        summary["error"] = error.message if error else "unknown error"
        summary["position"] = error.position if error else None
    return summary


def format_check_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format check results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2)

    lines = []
    valid_count = sum(1 for r in results if r["well_formed"])
    lines.append(f"Checked {len(results)} files, {valid_count} well-formed")
    lines.append("-" * 50)
    for result in results:
        if result["well_formed"]:
            lines.append(
                f"OK   {result['file']} (root <{result['root']}>, "
                f"{result['element_count']} elements)"
            )
        else:
            lines.append(f"FAIL {result['file']}")
            lines.append(f"   Error: {result['error']}")
    return "\n".join(lines)


def cmd_check(args: argparse.Namespace) -> int:
    """Handle check command."""
    config = _load_config(args)
    if config is None:
        return 1

    converter = XMLConverter(config)
    results = [check_file(converter, path) for path in args.paths]
    print(format_check_results(results, args.format))

    valid_count = sum(1 for r in results if r["well_formed"])
    return 0 if valid_count == len(results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    logger = get_logger(__name__, None, "cli")
    logger.debug("Running command", extra={"command": args.command})

    try:
        if args.command == "convert":
            return cmd_convert(args)
        if args.command == "table":
            return cmd_table(args)
        if args.command == "check":
            return cmd_check(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
