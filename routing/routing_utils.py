"""Routing utilities for deterministic route table ordering.

route print lists entries in kernel order, which changes between runs.
Read-back dumps are sorted so two runs with the same desired state print
the same table:

    1. Default routes first (0.0.0.0/0)
    2. Then by metric: numeric ascending, then "Default", then anything else
    3. Then by destination address
    4. Active entries before persistent entries
"""

import ipaddress

from models import RouteEntry


def get_metric_sort_key(metric: str) -> tuple[int, int]:
    """Get sort key for route metric values.

    Args:
        metric: Metric as printed (number string, "Default", or other)

    Returns:
        Tuple of (category, value) for sorting.
            category 0: Numeric metrics (sorted ascending by value)
            category 1: "Default" (persistent route without explicit metric)
            category 2: anything else

    Examples:
        >>> get_metric_sort_key("50")
        (0, 50)
        >>> get_metric_sort_key("Default")
        (1, 0)
    """
    if metric.isdigit():
        return (0, int(metric))
    if metric.lower() == "default":
        return (1, 0)
    return (2, 0)


def route_sort_key(entry: RouteEntry) -> tuple[int, tuple[int, int], int, int]:
    """Get sort key for a route table entry."""
    try:
        destination = int(ipaddress.IPv4Address(entry.destination))
    except ValueError:
        destination = 0
    return (
        0 if entry.is_default else 1,
        get_metric_sort_key(entry.metric),
        destination,
        1 if entry.persistent else 0,
    )


def sort_routes(entries: list[RouteEntry]) -> list[RouteEntry]:
    """Return entries in deterministic display order."""
    return sorted(entries, key=route_sort_key)
