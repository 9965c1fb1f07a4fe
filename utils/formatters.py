"""Text formatting utilities for DISPLAY ONLY.

Raw data in models.py remains unchanged for data integrity.
"""

import ipaddress


def mask_to_prefix(mask: str) -> str:
    """Convert dotted-quad mask to prefix length for display.

    Examples:
        "255.255.255.0" -> "/24"
        "0.0.0.0"       -> "/0"
        "255.0.255.0"   -> "255.0.255.0" (not a prefix mask, shown unchanged)

    Args:
        mask: Subnet mask

    Returns:
        "/N" or the original mask if it is not a contiguous prefix mask.
    """
    try:
        network = ipaddress.IPv4Network(f"0.0.0.0/{mask}")
        if network.netmask != ipaddress.IPv4Address(mask):
            return mask
    except ValueError:
        return mask
    return f"/{network.prefixlen}"


def shorten_text(text: str, max_length: int) -> str:
    """Truncate text to fit column width.

    Tries to break at word boundary.
    Adds "..." if truncated.

    Args:
        text: Text to truncate
        max_length: Maximum length (including "..." if truncated)

    Returns:
        Truncated text with "..." if needed.
    """
    if len(text) <= max_length:
        return text

    truncated = text[: max_length - 3]

    # Try to break at word boundary
    last_space = truncated.rfind(" ")
    if last_space > max_length * 0.7:  # Good break point
        return truncated[:last_space] + "..."

    return truncated + "..."
