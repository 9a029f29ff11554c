"""
=============================================================================
REQX CLI ENTRY POINT
=============================================================================

    # Run every request in a file
    python -m reqx api.reqx

    # Show what would be sent, send nothing
    python -m reqx api.reqx --dry-run --verbose

    # Only the second request / only POST requests
    python -m reqx api.reqx --request 2
    python -m reqx api.reqx --method post

    # Machine-readable output, one JSON object per request
    python -m reqx api.reqx --format json

=============================================================================
EXIT CODES
=============================================================================

    0   every section parsed and every selected request got a response
    1   the file could not be read, or --request / --method is invalid
    2   some sections failed to parse or some requests failed to send
        (the others still ran)

=============================================================================
"""

import argparse
import sys
from typing import Optional, Sequence

from . import __version__
from .config import LOG_LEVELS, OUTPUT_FORMATS, ReqxConfig
from .document import parse_file
from .errors import DocumentError, SectionError, SelectionError
from .runner import Runner, setup_logging


EXIT_OK = 0
EXIT_USAGE = 1
EXIT_FAILURES = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reqx",
        description="Execute HTTP requests defined in .reqx files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  reqx api.reqx                     # Run every request
  reqx api.reqx -d -v               # Dry run, show headers and bodies
  reqx api.reqx -r 2                # Only the second request
  reqx api.reqx -m POST             # Only POST requests
  reqx api.reqx --format json       # One JSON object per request
        """,
    )

    parser.add_argument("file", help="Path to the .reqx file to execute")

    # ─────────────────────────────────────────────────────────────────────
    # SELECTION
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--request", "-r",
        dest="request_index",
        type=int,
        default=None,
        help="Execute only the request at this index (1-based)",
    )

    parser.add_argument(
        "--method", "-m",
        dest="method_filter",
        default=None,
        help="Execute only requests with this HTTP method (e.g. GET, POST)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # OUTPUT
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show request and response headers and bodies",
    )

    parser.add_argument(
        "--dry-run", "-d",
        action="store_true",
        help="Show requests without sending them",
    )

    parser.add_argument(
        "--format", "-f",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (default: text)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # PARSING
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail a request that uses an undefined {{variable}}",
    )

    parser.add_argument(
        "--abort-on-error",
        action="store_true",
        help="Stop at the first request that fails to parse",
    )

    # ─────────────────────────────────────────────────────────────────────
    # TRANSPORT
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=None,
        help="Seconds to wait for each response, 0 for no limit (default: 30)",
    )

    parser.add_argument(
        "--insecure", "-k",
        action="store_true",
        help="Do not verify TLS certificates",
    )

    # ─────────────────────────────────────────────────────────────────────
    # META
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: WARNING)",
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"reqx {__version__}",
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ReqxConfig:
    """Environment first, then command-line flags on top."""
    config = ReqxConfig.from_env()

    config.verbose = args.verbose
    config.dry_run = args.dry_run
    if args.output_format:
        config.output_format = args.output_format
    if args.strict:
        config.strict_variables = True
    if args.abort_on_error:
        config.error_policy = "abort"
    if args.timeout is not None:
        # 0 means no limit, as with REQX_TIMEOUT
        config.timeout = args.timeout or None
    if args.insecure:
        config.verify_tls = False
    if args.log_level:
        config.log_level = args.log_level

    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        config.validate()
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE

    setup_logging(config.log_level)

    # =========================================================================
    # PARSE
    # =========================================================================
    try:
        result = parse_file(args.file, config)
    except DocumentError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except SectionError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_FAILURES

    for error in result.errors:
        print(f"error: {error}", file=sys.stderr)

    # =========================================================================
    # RUN
    # =========================================================================
    runner = Runner(config=config, stream=sys.stdout)
    try:
        report = runner.run(
            result,
            index=args.request_index,
            method=args.method_filter,
        )
    except SelectionError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE
    finally:
        runner.close()

    if not report.exchanges and args.method_filter:
        print(f"No requests matched the method filter: {args.method_filter}", file=sys.stderr)

    return EXIT_OK if report.ok else EXIT_FAILURES


# =============================================================================
# ENTRY POINT
# =============================================================================
# This allows running: python -m reqx

if __name__ == "__main__":
    sys.exit(main())
