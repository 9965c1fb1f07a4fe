"""Tests for export.py.

Tests JSON export of reconciliation reports.
"""

import json

from enums import Outcome, ResultKind
from export import export_to_json
from models import Adapter, ReconciliationReport, ReconciliationResult, RouteEntry


def build_report() -> ReconciliationReport:
    return ReconciliationReport(
        adapters={
            "A": Adapter("A", "Ethernet", 10, interface_index=5),
            "B": Adapter("B", "Cellular", 50),
        },
        default_results=[
            ReconciliationResult(ResultKind.DEFAULT, "default via 10.0.0.1 metric 20 (A)", Outcome.APPLIED),
            ReconciliationResult(
                ResultKind.DEFAULT, "default via 10.1.0.1 metric 10 (B)", Outcome.SKIPPED_UNRESOLVED_ADAPTER
            ),
        ],
        final_routes=[RouteEntry("0.0.0.0", "0.0.0.0", "10.0.0.1", "5", "20", persistent=True)],
    )


class TestExportToJson:
    """Tests for export_to_json function."""

    def test_valid_json(self) -> None:
        data = json.loads(export_to_json(build_report()))

        assert set(data) == {
            "metadata",
            "fatal_error",
            "adapters",
            "settle_failures",
            "results",
            "routes",
        }

    def test_metadata(self) -> None:
        data = json.loads(export_to_json(build_report(), exit_code=7))

        metadata = data["metadata"]
        assert metadata["tool"] == "routepin"
        assert metadata["exit_code"] == 7
        assert "timestamp" in metadata
        assert metadata["summary"] == {
            "fatal": False,
            "incomplete": True,
            "applied": 1,
            "planned": 0,
            "skipped": 1,
            "failed": 0,
        }

    def test_adapters(self) -> None:
        data = json.loads(export_to_json(build_report()))

        assert data["adapters"][0] == {
            "key": "A",
            "name": "Ethernet",
            "interface_metric": 10,
            "interface_index": 5,
        }
        assert data["adapters"][1]["interface_index"] is None

    def test_results_use_outcome_names(self) -> None:
        """Test outcomes are exported as stable identifiers."""
        data = json.loads(export_to_json(build_report()))

        assert [r["outcome"] for r in data["results"]] == [
            "APPLIED",
            "SKIPPED_UNRESOLVED_ADAPTER",
        ]
        assert data["results"][0]["kind"] == "default"
        assert data["results"][0]["reason"] is None

    def test_routes(self) -> None:
        data = json.loads(export_to_json(build_report()))

        assert data["routes"] == [{
            "destination": "0.0.0.0",
            "mask": "0.0.0.0",
            "gateway": "10.0.0.1",
            "interface": "5",
            "metric": "20",
            "persistent": True,
        }]

    def test_fatal_report(self) -> None:
        report = ReconciliationReport(fatal_error="route table flush failed: Access is denied.")

        data = json.loads(export_to_json(report, exit_code=6))

        assert data["fatal_error"] == "route table flush failed: Access is denied."
        assert data["metadata"]["summary"]["fatal"] is True
        assert data["results"] == []

    def test_indent(self) -> None:
        assert "\n" not in export_to_json(ReconciliationReport(), indent=None)
