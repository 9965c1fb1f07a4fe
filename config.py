"""Configuration constants for routepin.

All configurable values stored here for easy customization.
The desired routes themselves live in a YAML state file (see desired_state.py),
never in this module.
"""

from enum import IntEnum
from pathlib import Path

# Timeouts
# Bound for every single OS command (route.exe, netsh, PowerShell).
# PowerShell cold start alone can take several seconds on slow hosts.
TIMEOUT_SECONDS: int = 30

# Quiescence interval after an adapter disable/enable cycle.
# There is no portable "link is stable" signal, so this is a fixed pause.
SETTLE_SECONDS: int = 10

# Desired-state file used when --config is not given
DEFAULT_STATE_FILE: Path = Path("routes.yaml")

# Required System Commands
REQUIRED_COMMANDS: list[str] = [
    "route",
    "netsh",
    "powershell",
]

# Route and interface metrics accepted by the target OS
MIN_METRIC: int = 0
MAX_METRIC: int = 9999

# Destination and mask of every default route
DEFAULT_DESTINATION: str = "0.0.0.0"
DEFAULT_MASK: str = "0.0.0.0"

# Table Configuration
RESULT_COLUMNS: list[tuple[str, int]] = [
    ("KIND", 8),
    ("TARGET", 58),
    ("OUTCOME", 28),
    ("REASON", 50),
]

ROUTE_COLUMNS: list[tuple[str, int]] = [
    ("NETWORK", 18),
    ("GATEWAY", 15),
    ("INTERFACE", 15),
    ("METRIC", 8),
    ("PERSISTENT", 10),
]

COLUMN_SEPARATOR: str = "   "  # 3 spaces


class ExitCode(IntEnum):
    """Process exit codes for routepin."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    MISSING_DEPENDENCIES = 2
    INVALID_ARGUMENTS = 4
    INVALID_STATE = 5  # Desired-state file rejected before any change
    RESET_FAILED = 6  # Route table flush failed, nothing installed
    INCOMPLETE = 7  # Run finished but a route failed or was skipped


# Tool Metadata
VERSION: str = "1.0.0"
TOOL_NAME: str = "routepin"
