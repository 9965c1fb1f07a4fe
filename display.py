"""Table output formatting and display.

Prints the per-operation result table and the final route table so the
operator can check convergence by eye.
"""

import sys
from typing import TextIO

import config
from colors import OUTCOME_COLORS, Color
from enums import Outcome
from models import ReconciliationReport, RouteEntry
from utils import mask_to_prefix, shorten_text

_RULE_WIDTH = 150


def format_results(report: ReconciliationReport, file: TextIO | None = None) -> None:
    """Print one row per attempted operation, colored by outcome.

    Process:
        1. Print header and column headers
        2. Print each result (static, default, metric order)
        3. Print settle failures and a summary line

    Args:
        report: Reconciliation report
        file: Optional file handle (default: sys.stdout)
    """
    if file is None:
        file = sys.stdout

    print("=" * _RULE_WIDTH, file=file)
    print("Route Reconciliation Results", file=file)
    print("=" * _RULE_WIDTH, file=file)

    if report.fatal:
        print(f"{Color.RED}FATAL: {report.fatal_error}{Color.RESET}", file=file)
        print("No routes were installed. Re-run once the cause is fixed.", file=file)
        print("=" * _RULE_WIDTH, file=file)
        return

    headers = [name.ljust(width) for name, width in config.RESULT_COLUMNS]
    print(config.COLUMN_SEPARATOR.join(headers), file=file)
    print("=" * _RULE_WIDTH, file=file)

    for result in report.results:
        row_data = [
            result.kind.value,
            result.descriptor,
            result.outcome.value,
            result.reason or "--",
        ]

        row_parts = []
        for (_, width), data in zip(config.RESULT_COLUMNS, row_data):
            row_parts.append(shorten_text(str(data), width).ljust(width))

        row = config.COLUMN_SEPARATOR.join(row_parts).rstrip()
        color = OUTCOME_COLORS.get(result.outcome, "")
        if color:
            print(f"{color}{row}{Color.RESET}", file=file)
        else:
            print(row, file=file)

    print("=" * _RULE_WIDTH, file=file)

    for name in report.settle_failures:
        print(f"{Color.YELLOW}Adapter restart failed: {name}{Color.RESET}", file=file)

    print(_summary_line(report), file=file)


def format_route_table(routes: list[RouteEntry], file: TextIO | None = None) -> None:
    """Print the route table as read back from the OS.

    Args:
        routes: Route entries (already sorted)
        file: Optional file handle (default: sys.stdout)
    """
    if file is None:
        file = sys.stdout

    print("\nIPv4 Route Table", file=file)
    print("=" * 90, file=file)

    headers = [name.ljust(width) for name, width in config.ROUTE_COLUMNS]
    print(config.COLUMN_SEPARATOR.join(headers), file=file)
    print("=" * 90, file=file)

    if not routes:
        print("(no routes)", file=file)

    for entry in routes:
        row_data = [
            f"{entry.destination}{mask_to_prefix(entry.mask)}",
            entry.gateway,
            entry.interface,
            entry.metric,
            "yes" if entry.persistent else "no",
        ]
        row_parts = []
        for (_, width), data in zip(config.ROUTE_COLUMNS, row_data):
            row_parts.append(shorten_text(str(data), width).ljust(width))
        print(config.COLUMN_SEPARATOR.join(row_parts).rstrip(), file=file)

    print("=" * 90, file=file)

    defaults = sum(1 for entry in routes if entry.is_default and not entry.persistent)
    print(f"{defaults} active default route(s)", file=file)


def _summary_line(report: ReconciliationReport) -> str:
    """Build the one-line summary printed under the results table."""
    counts = {outcome: 0 for outcome in Outcome}
    for result in report.results:
        counts[result.outcome] += 1

    skipped = (
        counts[Outcome.SKIPPED_UNRESOLVED_ADAPTER]
        + counts[Outcome.SKIPPED_UNKNOWN_ADAPTER]
        + counts[Outcome.SKIPPED_ADAPTER_NOT_FOUND]
    )
    parts = [
        f"{counts[Outcome.APPLIED]} applied",
        f"{skipped} skipped",
        f"{counts[Outcome.FAILED]} failed",
    ]
    if counts[Outcome.PLANNED]:
        parts.insert(0, f"{counts[Outcome.PLANNED]} planned (dry run)")
    return "Summary: " + ", ".join(parts)
