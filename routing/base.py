"""RoutingSystem capability interface.

The reconciler only talks to the OS through this interface. One concrete
backend exists per target OS (see windows.py); tests use an in-memory fake.

Contract notes:
- Every mutating call returns a CommandResult and never raises for an OS
  rejection. Callers decide whether a failure is fatal.
- Calls are synchronous: when a method returns, its effect is committed.
- The backend assumes exclusive ownership of the route table for the run.
"""

from abc import ABC, abstractmethod

from models import CommandResult, RouteEntry


class RoutingSystem(ABC):
    """Narrow view of the OS network stack needed for reconciliation."""

    # True when mutating commands are only logged, never executed
    dry_run: bool = False

    @property
    @abstractmethod
    def required_commands(self) -> list[str]:
        """External commands this backend shells out to."""

    @abstractmethod
    def find_interface_index(self, display_name: str) -> int | None:
        """Return the current interface index for an adapter.

        Returns None if the adapter does not exist or is disabled.
        Read-only, point-in-time.
        """

    @abstractmethod
    def flush_routes(self) -> CommandResult:
        """Remove every route from the table, managed or not."""

    @abstractmethod
    def add_route(
        self,
        destination: str,
        mask: str,
        gateway: str,
        metric: int,
        interface_index: int | None = None,
    ) -> CommandResult:
        """Add a persistent route, optionally bound to an interface index."""

    @abstractmethod
    def restart_adapter(self, display_name: str) -> CommandResult:
        """Cycle the adapter link (disable, then enable)."""

    @abstractmethod
    def set_interface_metric(self, display_name: str, metric: int) -> CommandResult:
        """Disable automatic metric for the adapter and pin an explicit one."""

    @abstractmethod
    def list_routes(self) -> list[RouteEntry]:
        """Read the current route table. Empty list if it cannot be read."""
