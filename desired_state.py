"""Desired-state loading and validation.

The state file is YAML:

    adapters:
      wan1:
        name: "Ethernet"        # display name known to the OS
        metric: 10              # interface metric to pin
      lte:
        name: "Cellular"
        metric: 50

    static_routes:
      - destination: 192.168.0.0
        mask: 255.255.255.0
        gateway: 192.168.0.1
        metric: 10

    default_routes:
      - adapter: wan1
        gateway: 10.0.0.1
        metric: 20

Loading builds an immutable DesiredState; validation rejects anything that
would make the run unsafe before a single route is touched.
"""

from collections import Counter
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from logging_config import get_logger
from models import Adapter, DefaultRoute, DesiredState, StaticRoute
from utils import (
    is_valid_ipv4,
    is_valid_metric,
    is_valid_netmask,
    is_valid_network,
    sanitize_for_log,
    validate_adapter_name,
)

logger = get_logger(__name__)


class DesiredStateError(ValueError):
    """Raised when the desired state cannot be loaded or is invalid.

    Attributes:
        problems: Every problem found, one message each.
    """

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        super().__init__("; ".join(problems))


def load_desired_state(path: Path) -> DesiredState:
    """Load desired state from a YAML file.

    Args:
        path: State file path

    Returns:
        Parsed (not yet validated) DesiredState.

    Raises:
        DesiredStateError: File unreadable, not YAML, or wrong structure.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DesiredStateError([f"cannot read {path}: {e.strerror or e}"]) from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DesiredStateError([f"invalid YAML in {path}: {e}"]) from e

    logger.debug("Loaded state file %s", sanitize_for_log(str(path)))
    return parse_desired_state(data)


def parse_desired_state(data: Any) -> DesiredState:
    """Build a DesiredState from an already parsed document.

    Structural problems (missing keys, wrong types) are collected and raised
    together. Value checks are left to validate_desired_state().

    Args:
        data: Parsed YAML document

    Returns:
        DesiredState with routes in document order.

    Raises:
        DesiredStateError: Document structure is wrong.
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise DesiredStateError(["state file must contain a mapping at top level"])

    problems: list[str] = []

    unknown = sorted(set(data) - {"adapters", "static_routes", "default_routes"})
    if unknown:
        problems.append(f"unknown top-level keys: {', '.join(map(str, unknown))}")

    adapters = _parse_adapters(data.get("adapters") or {}, problems)
    static_routes = _parse_static_routes(data.get("static_routes") or [], problems)
    default_routes = _parse_default_routes(data.get("default_routes") or [], problems)

    if problems:
        raise DesiredStateError(problems)

    return DesiredState(
        adapters=MappingProxyType(adapters),
        static_routes=tuple(static_routes),
        default_routes=tuple(default_routes),
    )


def validate_desired_state(state: DesiredState) -> list[str]:
    """Validate values in a desired state.

    Errors (raised together):
        - invalid IPv4 destination/gateway, non-contiguous mask
        - destination with host bits set for its mask
        - metric outside config.MIN_METRIC..config.MAX_METRIC
        - invalid adapter display name
        - two default routes on the same adapter key
        - default routes on two adapters with the same display name (Windows
          compares names case-insensitively, so both resolve to one interface)

    Warnings (returned):
        - default route referencing an adapter key that is not configured
          (the installer skips it)
        - adapter with no default route

    Args:
        state: DesiredState to check

    Returns:
        List of warning messages.

    Raises:
        DesiredStateError: At least one error was found.
    """
    errors: list[str] = []
    warnings: list[str] = []

    for key, adapter in state.adapters.items():
        if not validate_adapter_name(adapter.display_name):
            errors.append(f"adapter '{key}': invalid display name {adapter.display_name!r}")
        if not is_valid_metric(adapter.interface_metric):
            errors.append(f"adapter '{key}': invalid metric {adapter.interface_metric!r}")

    for position, route in enumerate(state.static_routes, start=1):
        label = f"static route #{position}"
        if not is_valid_ipv4(route.destination):
            errors.append(f"{label}: invalid destination {route.destination!r}")
        elif not is_valid_netmask(route.mask):
            errors.append(f"{label}: invalid or non-contiguous mask {route.mask!r}")
        elif not is_valid_network(route.destination, route.mask):
            errors.append(
                f"{label}: {route.destination} has host bits set for mask {route.mask}"
            )
        if not is_valid_ipv4(route.gateway):
            errors.append(f"{label}: invalid gateway {route.gateway!r}")
        if not is_valid_metric(route.metric):
            errors.append(f"{label}: invalid metric {route.metric!r}")

    for position, route in enumerate(state.default_routes, start=1):
        label = f"default route #{position}"
        if not is_valid_ipv4(route.gateway):
            errors.append(f"{label}: invalid gateway {route.gateway!r}")
        if not is_valid_metric(route.metric):
            errors.append(f"{label}: invalid metric {route.metric!r}")
        if route.adapter_key not in state.adapters:
            warnings.append(
                f"{label}: adapter '{route.adapter_key}' is not configured, route will be skipped"
            )

    # One default route per interface; two on the same adapter would be
    # indistinguishable to the OS.
    counts = Counter(route.adapter_key for route in state.default_routes)
    for key, count in sorted(counts.items()):
        if count > 1:
            errors.append(f"adapter '{key}' has {count} default routes, at most one is allowed")

    by_name: dict[str, list[str]] = {}
    for key in sorted(counts):
        adapter = state.adapters.get(key)
        if adapter is not None and isinstance(adapter.display_name, str):
            by_name.setdefault(adapter.display_name.casefold(), []).append(key)
    for keys in by_name.values():
        if len(keys) > 1:
            name = state.adapters[keys[0]].display_name
            errors.append(
                f"adapters {', '.join(repr(k) for k in keys)} share display name "
                f"{name!r}, at most one default route per interface is allowed"
            )

    routed = set(counts)
    for key in state.adapters:
        if key not in routed:
            warnings.append(f"adapter '{key}' has no default route, only its metric is pinned")

    if errors:
        raise DesiredStateError(errors)

    for warning in warnings:
        logger.warning("%s", sanitize_for_log(warning))

    return warnings


# ----------------------------------------------------------------------
# Structural parsing
# ----------------------------------------------------------------------


def _parse_adapters(raw: Any, problems: list[str]) -> dict[str, Adapter]:
    if not isinstance(raw, dict):
        problems.append("'adapters' must be a mapping of key to {name, metric}")
        return {}

    adapters: dict[str, Adapter] = {}
    for key, entry in raw.items():
        if not isinstance(entry, dict):
            problems.append(f"adapter '{key}': must be a mapping with 'name' and 'metric'")
            continue
        missing = [field for field in ("name", "metric") if field not in entry]
        if missing:
            problems.append(f"adapter '{key}': missing {', '.join(missing)}")
            continue
        if not _strings_present(entry, ("name",), f"adapter '{key}'", problems):
            continue
        adapters[str(key)] = Adapter(
            key=str(key),
            display_name=entry["name"],
            interface_metric=entry["metric"],
        )
    return adapters


def _parse_static_routes(raw: Any, problems: list[str]) -> list[StaticRoute]:
    if not isinstance(raw, list):
        problems.append("'static_routes' must be a list")
        return []

    routes: list[StaticRoute] = []
    for position, entry in enumerate(raw, start=1):
        fields = ("destination", "mask", "gateway", "metric")
        if not isinstance(entry, dict):
            problems.append(f"static route #{position}: must be a mapping")
            continue
        missing = [field for field in fields if field not in entry]
        if missing:
            problems.append(f"static route #{position}: missing {', '.join(missing)}")
            continue
        if not _strings_present(
            entry, ("destination", "mask", "gateway"), f"static route #{position}", problems
        ):
            continue
        routes.append(
            StaticRoute(
                destination=entry["destination"],
                mask=entry["mask"],
                gateway=entry["gateway"],
                metric=entry["metric"],
            )
        )
    return routes


def _parse_default_routes(raw: Any, problems: list[str]) -> list[DefaultRoute]:
    if not isinstance(raw, list):
        problems.append("'default_routes' must be a list")
        return []

    routes: list[DefaultRoute] = []
    for position, entry in enumerate(raw, start=1):
        fields = ("adapter", "gateway", "metric")
        if not isinstance(entry, dict):
            problems.append(f"default route #{position}: must be a mapping")
            continue
        missing = [field for field in fields if field not in entry]
        if missing:
            problems.append(f"default route #{position}: missing {', '.join(missing)}")
            continue
        if entry["adapter"] is None:
            problems.append(f"default route #{position}: adapter must not be empty")
            continue
        if not _strings_present(entry, ("gateway",), f"default route #{position}", problems):
            continue
        routes.append(
            DefaultRoute(
                adapter_key=str(entry["adapter"]),
                gateway=entry["gateway"],
                metric=entry["metric"],
            )
        )
    return routes


def _strings_present(
    entry: dict[str, Any],
    fields: tuple[str, ...],
    label: str,
    problems: list[str],
) -> bool:
    """Check that text fields hold strings (YAML turns `~` into None)."""
    wrong = [field for field in fields if not isinstance(entry[field], str)]
    for field in wrong:
        problems.append(f"{label}: {field} must be a string, got {entry[field]!r}")
    return not wrong
