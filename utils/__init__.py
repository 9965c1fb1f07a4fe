"""Utilities package for routepin.

Provides system command execution, input validation, and text formatting.
"""

from .formatters import mask_to_prefix, shorten_text
from .system import command_exists, execute, run_command, sanitize_for_log
from .validators import (
    is_valid_ipv4,
    is_valid_metric,
    is_valid_netmask,
    is_valid_network,
    validate_adapter_name,
)

__all__ = [
    # System
    "execute",
    "run_command",
    "command_exists",
    "sanitize_for_log",
    # Validators
    "validate_adapter_name",
    "is_valid_ipv4",
    "is_valid_netmask",
    "is_valid_network",
    "is_valid_metric",
    # Formatters
    "mask_to_prefix",
    "shorten_text",
]
