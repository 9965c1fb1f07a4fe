"""Input validation utilities.

Validates addresses, masks, metrics and adapter names from the state file.
Adapter names end up as command arguments, so they are checked strictly.
"""

import ipaddress

import config


def validate_adapter_name(name: str) -> bool:
    """Validate adapter display name (security check).

    Windows adapter names may contain spaces, parentheses and hyphens
    ("Ethernet 2", "Wi-Fi", "vEthernet (WSL)").
    Rejected: quotes, control characters, empty names.
    Max length: 256

    Args:
        name: Adapter display name to validate

    Returns:
        True if valid, False otherwise.
    """
    if not name or not name.strip():
        return False

    if len(name) > 256:
        return False

    if any(c in name for c in "\"'`"):
        return False

    if not all(c.isprintable() for c in name):
        return False

    return True


def is_valid_ipv4(address: str | None) -> bool:
    """Validate IPv4 address.

    Args:
        address: IPv4 address string or None

    Returns:
        True if valid IPv4 address, False otherwise.
    """
    if not address:
        return False
    try:
        ipaddress.IPv4Address(address)
        return True
    except ValueError:
        return False


def is_valid_netmask(mask: str | None) -> bool:
    """Validate dotted-quad subnet mask (contiguous prefix only).

    Examples:
        255.255.255.0 -> True
        255.0.255.0   -> False (non-contiguous)

    Args:
        mask: Subnet mask string or None

    Returns:
        True if mask is a valid contiguous prefix mask, False otherwise.
    """
    if not is_valid_ipv4(mask):
        return False
    try:
        network = ipaddress.IPv4Network(f"0.0.0.0/{mask}")
    except ValueError:
        return False
    # ipaddress also accepts host masks ("0.0.0.255"); require a netmask
    return network.netmask == ipaddress.IPv4Address(mask)


def is_valid_network(destination: str | None, mask: str | None) -> bool:
    """Validate that destination/mask form a network (no host bits set).

    Args:
        destination: Network address
        mask: Subnet mask

    Returns:
        True if destination is the network address of destination/mask.
    """
    if not is_valid_ipv4(destination) or not is_valid_netmask(mask):
        return False
    try:
        ipaddress.IPv4Network(f"{destination}/{mask}", strict=True)
        return True
    except ValueError:
        return False


def is_valid_metric(metric: object) -> bool:
    """Validate route or interface metric.

    Booleans are rejected even though they are ints in Python.

    Args:
        metric: Value from the state file

    Returns:
        True if metric is an int within config.MIN_METRIC..config.MAX_METRIC.
    """
    if isinstance(metric, bool) or not isinstance(metric, int):
        return False
    return config.MIN_METRIC <= metric <= config.MAX_METRIC
