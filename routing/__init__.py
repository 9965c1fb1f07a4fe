"""Routing backends for routepin.

Provides the RoutingSystem capability interface, the Windows backend,
command output parsers, and route ordering helpers.
"""

from .base import RoutingSystem
from .parsing import parse_interface_table, parse_route_print, route_command_failed
from .routing_utils import get_metric_sort_key, route_sort_key, sort_routes
from .windows import WindowsRoutingSystem, quote_powershell

__all__ = [
    # Interface
    "RoutingSystem",
    # Backends
    "WindowsRoutingSystem",
    "quote_powershell",
    # Parsers
    "parse_interface_table",
    "parse_route_print",
    "route_command_failed",
    # Ordering
    "get_metric_sort_key",
    "route_sort_key",
    "sort_routes",
]
