"""JSON export functionality.

Exports a reconciliation report to JSON with metadata, for callers that
decide on re-runs or alerting from the structured results.
"""

import json
from datetime import datetime, timezone
from typing import Any

import config
from enums import Outcome
from models import Adapter, ReconciliationReport, ReconciliationResult, RouteEntry


def export_to_json(
    report: ReconciliationReport,
    exit_code: int | None = None,
    indent: int | None = 2,
) -> str:
    """Export to JSON format with metadata.

    Args:
        report: Reconciliation report
        exit_code: Process exit status the run will end with (optional)
        indent: JSON indentation (default 2)

    Returns:
        JSON string with metadata, adapters, results and the route table.
    """
    results = report.results

    metadata = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "tool": config.TOOL_NAME,
        "version": config.VERSION,
        "exit_code": exit_code,
        "summary": {
            "fatal": report.fatal,
            "incomplete": report.incomplete,
            "applied": sum(1 for r in results if r.outcome == Outcome.APPLIED),
            "planned": sum(1 for r in results if r.outcome == Outcome.PLANNED),
            "skipped": sum(1 for r in results if r.skipped),
            "failed": sum(1 for r in results if r.failed),
        },
    }

    output = {
        "metadata": metadata,
        "fatal_error": report.fatal_error,
        "adapters": [_adapter_to_dict(a) for a in report.adapters.values()],
        "settle_failures": list(report.settle_failures),
        "results": [_result_to_dict(r) for r in results],
        "routes": [_route_to_dict(r) for r in report.final_routes],
    }

    return json.dumps(output, indent=indent)


def _adapter_to_dict(adapter: Adapter) -> dict[str, Any]:
    return {
        "key": adapter.key,
        "name": adapter.display_name,
        "interface_metric": adapter.interface_metric,
        "interface_index": adapter.interface_index,
    }


def _result_to_dict(result: ReconciliationResult) -> dict[str, Any]:
    return {
        "kind": result.kind.value,
        "target": result.descriptor,
        "outcome": result.outcome.name,
        "reason": result.reason,
    }


def _route_to_dict(entry: RouteEntry) -> dict[str, Any]:
    return {
        "destination": entry.destination,
        "mask": entry.mask,
        "gateway": entry.gateway,
        "interface": entry.interface,
        "metric": entry.metric,
        "persistent": entry.persistent,
    }
