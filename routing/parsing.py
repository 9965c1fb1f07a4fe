"""Parsers for Windows networking command output.

All parsers are pure functions over captured text so they can be tested
without a Windows host.
"""

import re

from logging_config import get_logger
from models import CommandResult, RouteEntry
from utils import sanitize_for_log

logger = get_logger(__name__)

# "  12          25        1500  connected     Ethernet 2"
_INTERFACE_ROW = re.compile(
    r"^\s*(?P<idx>\d+)\s+(?P<metric>\d+)\s+(?P<mtu>\d+)\s+(?P<state>\S+)\s+(?P<name>.+?)\s*$"
)

_IPV4 = r"\d{1,3}(?:\.\d{1,3}){3}"

# Active Routes: destination, netmask, gateway ("On-link" allowed), interface, metric
_ACTIVE_ROW = re.compile(
    rf"^\s*(?P<dest>{_IPV4})\s+(?P<mask>{_IPV4})\s+(?P<gw>{_IPV4}|On-link)"
    rf"\s+(?P<iface>{_IPV4})\s+(?P<metric>\d+)\s*$"
)

# Persistent Routes: address, netmask, gateway, metric ("Default" allowed)
_PERSISTENT_ROW = re.compile(
    rf"^\s*(?P<dest>{_IPV4})\s+(?P<mask>{_IPV4})\s+(?P<gw>{_IPV4}|On-link)"
    rf"\s+(?P<metric>\d+|Default)\s*$"
)

# route.exe reports several errors on stdout with exit code 0
_ROUTE_ERROR = re.compile(
    r"\bfailed\b|\bbad (?:argument|gateway|destination|mask)\b|\binvalid\b|"
    r"\belement not found\b|\brequested operation requires elevation\b",
    re.IGNORECASE,
)


def parse_interface_table(output: str) -> dict[str, int]:
    """Parse `netsh interface ipv4 show interfaces`.

    Format:
        Idx     Met         MTU          State                Name
        ---  ----------  ----------  ------------  ---------------------------
          1          75  4294967295  connected     Loopback Pseudo-Interface 1
         12          25        1500  connected     Ethernet 2

    Disabled adapters have no IPv4 interface and do not appear at all.

    Args:
        output: Raw command output

    Returns:
        Dict mapping adapter display name to interface index.
    """
    result: dict[str, int] = {}

    for line in output.splitlines():
        match = _INTERFACE_ROW.match(line)
        if not match:
            continue
        result[match.group("name")] = int(match.group("idx"))

    return result


def parse_route_print(output: str) -> list[RouteEntry]:
    """Parse `route print -4`.

    Reads both the "Active Routes:" and "Persistent Routes:" sections.
    Interface list and header lines are ignored. A "None" persistent
    section yields no persistent entries.

    Section headers are matched in English. Output without either header
    (a localized Windows) is logged as a warning and yields no entries.

    Args:
        output: Raw command output

    Returns:
        Active entries first, then persistent entries, in printed order.
    """
    entries: list[RouteEntry] = []
    section = None
    headers_seen = False

    for line in output.splitlines():
        stripped = line.strip()

        if stripped.startswith("Active Routes:"):
            section = "active"
            headers_seen = True
            continue
        if stripped.startswith("Persistent Routes:"):
            section = "persistent"
            headers_seen = True
            continue
        if stripped.startswith("=") or not stripped:
            if stripped.startswith("="):
                section = None
            continue

        if section == "active":
            match = _ACTIVE_ROW.match(line)
            if match:
                entries.append(
                    RouteEntry(
                        destination=match.group("dest"),
                        mask=match.group("mask"),
                        gateway=match.group("gw"),
                        interface=match.group("iface"),
                        metric=match.group("metric"),
                        persistent=False,
                    )
                )
        elif section == "persistent":
            match = _PERSISTENT_ROW.match(line)
            if match:
                entries.append(
                    RouteEntry(
                        destination=match.group("dest"),
                        mask=match.group("mask"),
                        gateway=match.group("gw"),
                        interface="--",
                        metric=match.group("metric"),
                        persistent=True,
                    )
                )

    if output.strip() and not headers_seen:
        logger.warning(
            "route print output has no 'Active Routes:' or 'Persistent Routes:' "
            "section, route table could not be read"
        )

    logger.debug("Parsed %d route entries", len(entries))
    return entries


def route_command_failed(result: CommandResult) -> bool:
    """Check whether a route.exe invocation failed.

    route.exe exits 0 for some rejected adds ("The route addition failed:
    The object already exists."), so the output is inspected as well.

    Args:
        result: Outcome of the route.exe invocation

    Returns:
        True if the command failed, False otherwise.
    """
    if not result.ok:
        return True

    text = f"{result.stdout}\n{result.stderr}"
    if _ROUTE_ERROR.search(text):
        logger.debug(
            "route.exe exited 0 but reported an error: %s",
            sanitize_for_log(text.strip()),
        )
        return True

    return False
