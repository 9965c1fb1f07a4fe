"""Type-safe enumerations for routepin.

All categorical values use enum types for type safety and consistency.
"""

from enum import Enum


class Outcome(str, Enum):
    """Outcome of one attempted route or metric operation.

    APPLIED: The OS accepted the change
    SKIPPED_UNRESOLVED_ADAPTER: Default route not installed, adapter has no interface index
    SKIPPED_UNKNOWN_ADAPTER: Default route references an adapter key that is not configured
    SKIPPED_ADAPTER_NOT_FOUND: Metric not set, adapter not found by display name
    FAILED: The OS rejected the change (reason attached)
    PLANNED: Dry run, the change was logged but not executed
    """

    APPLIED = "APPLIED"
    SKIPPED_UNRESOLVED_ADAPTER = "SKIPPED (UNRESOLVED ADAPTER)"
    SKIPPED_UNKNOWN_ADAPTER = "SKIPPED (UNKNOWN ADAPTER)"
    SKIPPED_ADAPTER_NOT_FOUND = "SKIPPED (ADAPTER NOT FOUND)"
    FAILED = "FAILED"
    PLANNED = "PLANNED"


class ResultKind(str, Enum):
    """What a reconciliation result refers to."""

    STATIC = "static"
    DEFAULT = "default"
    METRIC = "metric"


class Stage(str, Enum):
    """Reconciliation stages, in execution order."""

    RESOLVE = "resolve"
    RESET = "reset"
    SETTLE = "settle"
    INSTALL_STATIC = "install-static"
    INSTALL_DEFAULT = "install-default"
    ENFORCE_METRICS = "enforce-metrics"
    VERIFY = "verify"
