"""Data models for routing reconciliation.

Desired-state values are frozen dataclasses: a DesiredState is built once
from the state file and handed to the reconciler unchanged.

Architecture:
- Adapter, StaticRoute, DefaultRoute: desired-state elements
- DesiredState: the complete, immutable input of one run
- CommandResult: outcome of one OS command
- RouteEntry: one row read back from the OS route table
- ReconciliationResult / ReconciliationReport: what a run did
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace

import config
from enums import Outcome, ResultKind


@dataclass(frozen=True)
class Adapter:
    """A network adapter the operator wants routes and a metric on.

    interface_index is never read from configuration: it is filled in by
    the resolver on every run because the OS may renumber adapters after
    a reboot or driver reload.
    """

    key: str  # Operator-chosen logical name (e.g. "wan1")
    display_name: str  # Name the OS knows the adapter by (e.g. "Ethernet 2")
    interface_metric: int  # Explicit interface metric to pin
    interface_index: int | None = None  # Resolved numeric interface identifier

    @property
    def resolved(self) -> bool:
        """True once the resolver found an interface index."""
        return self.interface_index is not None

    def with_index(self, interface_index: int | None) -> "Adapter":
        """Return a copy carrying the given interface index."""
        return replace(self, interface_index=interface_index)


@dataclass(frozen=True)
class StaticRoute:
    """A fixed route to a specific subnet."""

    destination: str
    mask: str
    gateway: str
    metric: int

    @property
    def descriptor(self) -> str:
        """Human-readable description used in narration and results."""
        return (
            f"{self.destination} mask {self.mask} via {self.gateway} "
            f"metric {self.metric}"
        )


@dataclass(frozen=True)
class DefaultRoute:
    """A 0.0.0.0/0 route bound to one adapter."""

    adapter_key: str
    gateway: str
    metric: int

    @property
    def destination(self) -> str:
        return config.DEFAULT_DESTINATION

    @property
    def mask(self) -> str:
        return config.DEFAULT_MASK

    @property
    def descriptor(self) -> str:
        """Human-readable description used in narration and results."""
        return f"default via {self.gateway} metric {self.metric} ({self.adapter_key})"


@dataclass(frozen=True)
class DesiredState:
    """Complete desired routing state for one reconciliation run.

    Routes keep configuration order; results are reported in that order.
    """

    adapters: Mapping[str, Adapter] = field(default_factory=dict)
    static_routes: tuple[StaticRoute, ...] = ()
    default_routes: tuple[DefaultRoute, ...] = ()

    def adapter(self, key: str) -> Adapter | None:
        """Look up an adapter by its logical key."""
        return self.adapters.get(key)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a single OS command invocation.

    returncode is -1 when the command could not be started or timed out;
    stderr then carries the cause.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def reason(self) -> str:
        """Best available failure text (stderr, then stdout, then exit code)."""
        text = self.stderr.strip() or self.stdout.strip()
        if text:
            return " ".join(text.split())
        return f"exit code {self.returncode}"

    @classmethod
    def success(cls, command: list[str] | tuple[str, ...], stdout: str = "") -> "CommandResult":
        """Create a successful result (used for dry runs)."""
        return cls(command=tuple(command), returncode=0, stdout=stdout)

    @classmethod
    def failure(cls, command: list[str] | tuple[str, ...], reason: str) -> "CommandResult":
        """Create a failed result for a command that never produced an exit code."""
        return cls(command=tuple(command), returncode=-1, stderr=reason)


@dataclass(frozen=True)
class RouteEntry:
    """One row of the OS route table as read back after reconciliation."""

    destination: str
    mask: str
    gateway: str  # Gateway address or "On-link"
    interface: str  # Local interface address, or "--" for persistent entries
    metric: str  # Metric as printed ("Default" is possible on persistent entries)
    persistent: bool = False

    @property
    def is_default(self) -> bool:
        return self.destination == config.DEFAULT_DESTINATION and self.mask == config.DEFAULT_MASK


@dataclass(frozen=True)
class ReconciliationResult:
    """Outcome of one attempted route or metric operation."""

    kind: ResultKind
    descriptor: str
    outcome: Outcome
    reason: str | None = None

    @property
    def failed(self) -> bool:
        return self.outcome == Outcome.FAILED

    @property
    def skipped(self) -> bool:
        return self.outcome in (
            Outcome.SKIPPED_UNRESOLVED_ADAPTER,
            Outcome.SKIPPED_UNKNOWN_ADAPTER,
            Outcome.SKIPPED_ADAPTER_NOT_FOUND,
        )


@dataclass
class ReconciliationReport:
    """Everything a reconciliation run did, stage by stage.

    Filled in progressively by reconcile(). A report with fatal_error set
    stopped after the reset stage; the route lists are then empty.
    """

    adapters: dict[str, Adapter] = field(default_factory=dict)
    reset: CommandResult | None = None
    fatal_error: str | None = None
    settle_failures: list[str] = field(default_factory=list)
    static_results: list[ReconciliationResult] = field(default_factory=list)
    default_results: list[ReconciliationResult] = field(default_factory=list)
    metric_results: list[ReconciliationResult] = field(default_factory=list)
    final_routes: list[RouteEntry] = field(default_factory=list)

    @property
    def results(self) -> list[ReconciliationResult]:
        """All results in execution order."""
        return self.static_results + self.default_results + self.metric_results

    @property
    def fatal(self) -> bool:
        return self.fatal_error is not None

    @property
    def incomplete(self) -> bool:
        """True if any operation failed or any default route was skipped.

        A metric skip for an absent adapter is reported but does not make
        the run incomplete: no route depended on it.
        """
        if any(r.failed for r in self.results):
            return True
        return any(r.skipped for r in self.default_results)
