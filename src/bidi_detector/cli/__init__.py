"""
bidi-detector CLI.

Commands:
- bidi-detector scan: Scan files selected by the configuration (default command)
- bidi-detector chars: List the detected control characters

Exit codes for ``scan``:
- 0: no bidirectional control characters found
- 1: at least one found
- 2: fatal configuration or glob pattern error
"""

import argparse
import logging
import sys
from typing import Any

from bidi_detector.config.loader import ConfigLoader
from bidi_detector.config.schema import ScanConfig, validate_config_dict
from bidi_detector.core.characters import CONTROL_CHARACTERS
from bidi_detector.core.orchestrator import ScanOrchestrator, summary_message
from bidi_detector.observability.logger import EventType, configure_logging
from bidi_detector.utils.errors import ConfigurationError, ErrorCode

logger = logging.getLogger(__name__)

COMMANDS = ("scan", "chars")

EXIT_FATAL = 2


def _apply_cli_overrides(config: ScanConfig, args: argparse.Namespace) -> ScanConfig:
    """Merge command-line options over the loaded configuration."""
    data: dict[str, Any] = config.model_dump()
    general = data["general"]
    display = data["display"]

    if args.include:
        general["includes"] = list(args.include)
    if args.exclude:
        general["excludes"] = list(args.exclude)
    if args.jobs is not None:
        general["jobs"] = args.jobs
    if args.details is not None:
        display["show_details"] = args.details
    if args.verbose is not None:
        display["verbose"] = args.verbose
    if args.ignore_invalid_data is not None:
        display["ignore_invalid_data"] = args.ignore_invalid_data

    try:
        return validate_config_dict(data)
    except ValueError as e:
        raise ConfigurationError(
            ErrorCode.E802_CONFIG_VALIDATION_FAILED,
            f"Invalid command-line option: {e}",
        ) from e


def cmd_scan(args: argparse.Namespace) -> int:
    """Scan the selected files and report bidirectional control characters."""
    configure_logging(args.log_level, json_output=args.log_json)

    try:
        config = ConfigLoader.load_or_default(args.config)
        config = _apply_cli_overrides(config, args)
        logger.debug(
            "Effective configuration: %s",
            config.model_dump(),
            extra={"event_type": EventType.CONFIG_LOADED},
        )
        summary = ScanOrchestrator(config, root=args.root).run()
    except ConfigurationError as e:
        e.log(logging.DEBUG)
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_FATAL

    if summary.total > 0:
        print(summary_message(summary.total), file=sys.stderr)
    return summary.exit_code


def cmd_chars(args: argparse.Namespace) -> int:
    """List the control characters the scanner looks for."""
    for entry in CONTROL_CHARACTERS:
        line = f"{entry.code_point}  {entry.abbreviation}  {entry.name}"
        if args.describe:
            line += f" - {entry.description}"
        print(line)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bidi-detector",
        description="Detect Unicode bidirectional control characters (Trojan Source).",
    )

    try:
        from bidi_detector import __version__

        version_str = f"%(prog)s {__version__}"
    except ImportError:
        version_str = "%(prog)s"

    parser.add_argument(
        "--version",
        action="version",
        version=version_str,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Scan command
    scan_parser = subparsers.add_parser("scan", help="Scan files (default command)")
    scan_parser.add_argument(
        "-c",
        "--config",
        type=str,
        help="Path to a TOML or YAML configuration file "
        "(default: bidi_config.toml/.yaml/.yml in the working directory)",
    )
    scan_parser.add_argument(
        "--root",
        type=str,
        default=".",
        help="Directory that relative include patterns are expanded from (default: .)",
    )
    scan_parser.add_argument(
        "-i",
        "--include",
        action="append",
        metavar="GLOB",
        help="Include pattern; can be repeated. Replaces the configured includes.",
    )
    scan_parser.add_argument(
        "-e",
        "--exclude",
        action="append",
        metavar="GLOB",
        help="Exclude pattern; can be repeated. Replaces the configured excludes.",
    )
    scan_parser.add_argument(
        "--details",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Print one line per occurrence to stderr",
    )
    scan_parser.add_argument(
        "-v",
        "--verbose",
        action="store_const",
        const=True,
        default=None,
        help="Also print files without occurrences",
    )
    scan_parser.add_argument(
        "-q",
        "--quiet",
        dest="verbose",
        action="store_const",
        const=False,
        help="Only print files with occurrences",
    )
    scan_parser.add_argument(
        "--ignore-invalid-data",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Silently skip files that are not valid UTF-8",
    )
    scan_parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=None,
        help="Number of files scanned concurrently",
    )
    scan_parser.add_argument(
        "--log-level",
        type=str,
        default="warning",
        choices=["debug", "info", "warning", "error"],
        help="Log level (default: warning)",
    )
    scan_parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit logs as JSON lines",
    )

    # Chars command
    chars_parser = subparsers.add_parser("chars", help="List detected control characters")
    chars_parser.add_argument(
        "-d",
        "--describe",
        action="store_true",
        help="Include the effect of each character",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    # "scan" is implied when no command is given.
    if not argv or (argv[0] not in COMMANDS and argv[0] not in ("-h", "--help", "--version")):
        argv.insert(0, "scan")

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "scan":
        return cmd_scan(args)
    elif args.command == "chars":
        return cmd_chars(args)
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
