"""Pytest configuration and shared fixtures.

Provides an in-memory RoutingSystem and sample desired states.
"""

import sys
from pathlib import Path
from types import MappingProxyType
from typing import Generator

import pytest

# Add parent directory to path so imports work
# This allows: from models import ... to find /project/models.py
sys.path.insert(0, str(Path(__file__).parent.parent))

from logging_config import setup_logging
from models import (
    Adapter,
    CommandResult,
    DefaultRoute,
    DesiredState,
    RouteEntry,
    StaticRoute,
)
from routing.base import RoutingSystem


class FakeRoutingSystem(RoutingSystem):
    """In-memory route table and adapter set.

    Mimics the behaviours the reconciler has to cope with:
        - duplicate adds are rejected ("The object already exists")
        - binding a route to an interface re-enables automatic metric
        - flush, restart and metric calls can be made to fail

    Every call is appended to `calls` as (method, *args) for ordering checks.
    """

    def __init__(self, interfaces: dict[str, int] | None = None) -> None:
        self.interfaces: dict[str, int] = dict(interfaces or {})
        self.routes: list[RouteEntry] = []
        # display name -> (automatic metric enabled, interface metric)
        self.interface_metrics: dict[str, tuple[bool, int | None]] = {
            name: (True, None) for name in self.interfaces
        }
        self.calls: list[tuple] = []

        self.flush_fails = False
        self.failing_destinations: set[str] = set()
        self.restart_failures: set[str] = set()
        self.metric_failures: set[str] = set()

    @property
    def required_commands(self) -> list[str]:
        return ["route", "netsh", "powershell"]

    def find_interface_index(self, display_name: str) -> int | None:
        self.calls.append(("find_interface_index", display_name))
        return self.interfaces.get(display_name)

    def flush_routes(self) -> CommandResult:
        self.calls.append(("flush_routes",))
        if self.flush_fails:
            return CommandResult(
                command=("route", "-f"),
                returncode=1,
                stdout="The requested operation requires elevation.",
            )
        self.routes = []
        return CommandResult.success(["route", "-f"])

    def add_route(
        self,
        destination: str,
        mask: str,
        gateway: str,
        metric: int,
        interface_index: int | None = None,
    ) -> CommandResult:
        self.calls.append(("add_route", destination, mask, gateway, metric, interface_index))
        cmd = ["route", "-p", "add", destination, "mask", mask, gateway]

        if destination in self.failing_destinations:
            return CommandResult(
                command=tuple(cmd),
                returncode=1,
                stdout="The route addition failed: The parameter is incorrect.",
            )

        interface = str(interface_index) if interface_index is not None else "--"
        entry = RouteEntry(
            destination=destination,
            mask=mask,
            gateway=gateway,
            interface=interface,
            metric=str(metric),
            persistent=True,
        )
        if any(
            (r.destination, r.mask, r.gateway, r.interface)
            == (entry.destination, entry.mask, entry.gateway, entry.interface)
            for r in self.routes
        ):
            return CommandResult(
                command=tuple(cmd),
                returncode=1,
                stdout="The route addition failed: The object already exists.",
            )
        self.routes.append(entry)

        # Binding a route re-enables automatic metric on that interface
        if interface_index is not None:
            for name, index in self.interfaces.items():
                if index == interface_index:
                    _, pinned = self.interface_metrics.get(name, (True, None))
                    self.interface_metrics[name] = (True, pinned)

        return CommandResult.success(cmd, stdout=" OK!")

    def restart_adapter(self, display_name: str) -> CommandResult:
        self.calls.append(("restart_adapter", display_name))
        if display_name in self.restart_failures or display_name not in self.interfaces:
            return CommandResult(
                command=("netsh", "interface", "set", "interface", display_name),
                returncode=1,
                stdout="The interface is not known.",
            )
        return CommandResult.success(["netsh"])

    def set_interface_metric(self, display_name: str, metric: int) -> CommandResult:
        self.calls.append(("set_interface_metric", display_name, metric))
        if display_name in self.metric_failures:
            return CommandResult(
                command=("powershell",),
                returncode=1,
                stderr="Access is denied.",
            )
        self.interface_metrics[display_name] = (False, metric)
        return CommandResult.success(["powershell"])

    def list_routes(self) -> list[RouteEntry]:
        self.calls.append(("list_routes",))
        return list(self.routes)

    def call_names(self) -> list[str]:
        """Method names in call order."""
        return [call[0] for call in self.calls]


# Configure logging once for entire test session
@pytest.fixture(scope="session", autouse=True)
def configure_logging() -> Generator[None, None, None]:
    """Configure logging for all tests (runs once per session)."""
    setup_logging(verbose=False, use_colors=False)
    yield


@pytest.fixture
def fake_system() -> FakeRoutingSystem:
    """Routing system where adapter A resolves to 5 and B is absent."""
    return FakeRoutingSystem(interfaces={"Ethernet": 5, "Wi-Fi": 7})


@pytest.fixture
def adapter_a() -> Adapter:
    """Adapter present on the fake system (interface 5)."""
    return Adapter(key="A", display_name="Ethernet", interface_metric=10)


@pytest.fixture
def adapter_b() -> Adapter:
    """Adapter missing from the fake system."""
    return Adapter(key="B", display_name="Cellular", interface_metric=50)


@pytest.fixture
def sample_state(adapter_a: Adapter, adapter_b: Adapter) -> DesiredState:
    """Two adapters (one absent), one static route, two default routes."""
    return DesiredState(
        adapters=MappingProxyType({"A": adapter_a, "B": adapter_b}),
        static_routes=(
            StaticRoute(
                destination="192.168.0.0",
                mask="255.255.255.0",
                gateway="192.168.0.1",
                metric=10,
            ),
        ),
        default_routes=(
            DefaultRoute(adapter_key="A", gateway="10.0.0.1", metric=20),
            DefaultRoute(adapter_key="B", gateway="10.1.0.1", metric=10),
        ),
    )


@pytest.fixture
def sample_state_data() -> dict:
    """Parsed YAML document matching routes.example.yaml in shape."""
    return {
        "adapters": {
            "wan1": {"name": "Ethernet", "metric": 10},
            "lte": {"name": "Cellular", "metric": 50},
        },
        "static_routes": [
            {
                "destination": "192.168.0.0",
                "mask": "255.255.255.0",
                "gateway": "192.168.0.1",
                "metric": 10,
            },
        ],
        "default_routes": [
            {"adapter": "wan1", "gateway": "203.0.113.1", "metric": 20},
            {"adapter": "lte", "gateway": "100.64.0.1", "metric": 100},
        ],
    }
