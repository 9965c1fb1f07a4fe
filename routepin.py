#!/usr/bin/env python3
"""Routepin - static and multi-default route reconciliation.

Main entry point for the routepin command-line tool.
"""

import argparse
import sys
import traceback
from pathlib import Path

import config
from config import ExitCode
from desired_state import DesiredStateError, load_desired_state, validate_desired_state
from display import format_results, format_route_table
from export import export_to_json
from logging_config import get_logger, setup_logging
from models import ReconciliationReport
from reconciler import check_dependencies, reconcile
from routing import WindowsRoutingSystem
from utils import sanitize_for_log


def parse_arguments() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments namespace.

    Exits:
        Code 4 if invalid argument combinations.
    """
    parser = argparse.ArgumentParser(
        description="Pin static routes, per-adapter default routes and interface metrics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  routepin                          # Apply routes.yaml
  routepin -c wan.yaml -v           # Apply another file, log every command
  routepin --check                  # Validate the state file only
  routepin --dry-run                # Show what would be changed
  routepin --settle-seconds 30      # Longer pause after adapter restarts
  routepin --export json --output report.json

WARNING: the route table is flushed before routes are installed. Routes not
listed in the state file are removed. If the run is interrupted after the
flush, run routepin again to restore the desired routes.

Exit codes:
  0 - Success
  1 - General error
  2 - Missing dependencies
  4 - Invalid arguments
  5 - Invalid state file
  6 - Route table flush failed (nothing installed)
  7 - Incomplete (a route failed or a default route was skipped)
        """,
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=config.DEFAULT_STATE_FILE,
        metavar="PATH",
        help=f"Desired-state YAML file (default: {config.DEFAULT_STATE_FILE})",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        metavar="PATH",
        help="Write logs to file",
    )

    parser.add_argument(
        "--settle-seconds",
        type=float,
        default=float(config.SETTLE_SECONDS),
        metavar="N",
        help=f"Pause after adapter restarts (default: {config.SETTLE_SECONDS})",
    )

    parser.add_argument(
        "--skip-settle",
        action="store_true",
        help="Do not restart adapters",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log changes without executing them",
    )

    parser.add_argument(
        "--check",
        action="store_true",
        help="Validate the state file and exit",
    )

    parser.add_argument(
        "--export",
        choices=["json"],
        metavar="FORMAT",
        help="Export format (json)",
    )

    parser.add_argument(
        "--output",
        type=Path,
        metavar="PATH",
        help="Export destination file (requires --export)",
    )

    args = parser.parse_args()

    if args.output and not args.export:
        print("Error: --output requires --export", file=sys.stderr)
        sys.exit(ExitCode.INVALID_ARGUMENTS)

    if args.settle_seconds < 0:
        print("Error: --settle-seconds must not be negative", file=sys.stderr)
        sys.exit(ExitCode.INVALID_ARGUMENTS)

    return args


def exit_code_for(report: ReconciliationReport) -> ExitCode:
    """Map a reconciliation report to the process exit code."""
    if report.fatal:
        return ExitCode.RESET_FAILED
    if report.incomplete:
        return ExitCode.INCOMPLETE
    return ExitCode.SUCCESS


def main() -> None:
    """Main execution flow.

    Exit codes:
        0: Success
        1: General error
        2: Missing dependencies
        4: Invalid arguments
        5: Invalid state file
        6: Route table flush failed
        7: Incomplete
    """
    args = parse_arguments()

    # Setup logging (must be called before any logger usage)
    setup_logging(
        verbose=args.verbose,
        log_file=args.log_file,
        use_colors=True,
    )

    logger = get_logger(__name__)

    # Load and validate desired state before touching anything
    try:
        state = load_desired_state(args.config)
        validate_desired_state(state)
    except DesiredStateError as e:
        for problem in e.problems:
            logger.error("Invalid state: %s", sanitize_for_log(problem))
        sys.exit(ExitCode.INVALID_STATE)

    logger.info(
        "Desired state: %d adapters, %d static routes, %d default routes",
        len(state.adapters),
        len(state.static_routes),
        len(state.default_routes),
    )

    if args.check:
        logger.info("State file %s is valid", sanitize_for_log(str(args.config)))
        sys.exit(ExitCode.SUCCESS)

    system = WindowsRoutingSystem(dry_run=args.dry_run)

    if not check_dependencies(system):
        logger.error("Missing required dependencies - cannot continue")
        sys.exit(ExitCode.MISSING_DEPENDENCIES)

    try:
        report = reconcile(
            state,
            system,
            settle_seconds=args.settle_seconds,
            skip_settle=args.skip_settle,
        )
        exit_code = exit_code_for(report)

        if args.export:
            json_data = export_to_json(report, exit_code=int(exit_code))
            if args.output:
                args.output.write_text(json_data)
                logger.info("Exported to %s", sanitize_for_log(str(args.output)))
            else:
                print(json_data)
        else:
            format_results(report)
            format_route_table(report.final_routes)

        sys.exit(exit_code)

    except KeyboardInterrupt:
        logger.error("Interrupted by user")
        logger.error(
            "The route table may be empty or partial - run %s again to restore it",
            config.TOOL_NAME,
        )
        sys.exit(ExitCode.GENERAL_ERROR)
    except (OSError, ValueError, RuntimeError) as e:
        logger.error("Error during execution: %s", sanitize_for_log(str(e)))
        if args.verbose:
            traceback.print_exc()
        sys.exit(ExitCode.GENERAL_ERROR)


if __name__ == "__main__":
    main()
