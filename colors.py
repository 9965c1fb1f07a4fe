"""ANSI color codes for terminal output.

Provides the palette and the colors assigned to reconciliation outcomes.
All colors optimized for dark terminal backgrounds.
"""

from enum import StrEnum

from enums import Outcome


class AllColors(StrEnum):
    """ANSI color palette for dark terminal backgrounds."""

    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_CYAN = "\033[96m"

    BOLD = "\033[1m"
    DIM = "\033[2m"

    RESET = "\033[0m"


# Active Colors (Used in Table Display)
# CUSTOMIZE HERE: Change these to any color from AllColors above
class Color(StrEnum):
    """Active colors used for table display."""

    GREEN = AllColors.BRIGHT_GREEN  # Applied
    CYAN = AllColors.BRIGHT_CYAN  # Planned (dry run)
    YELLOW = AllColors.BRIGHT_YELLOW  # Skipped
    RED = AllColors.BRIGHT_RED  # Failed
    RESET = AllColors.RESET  # Reset (don't change)


OUTCOME_COLORS: dict[Outcome, Color] = {
    Outcome.APPLIED: Color.GREEN,
    Outcome.PLANNED: Color.CYAN,
    Outcome.SKIPPED_UNRESOLVED_ADAPTER: Color.YELLOW,
    Outcome.SKIPPED_UNKNOWN_ADAPTER: Color.YELLOW,
    Outcome.SKIPPED_ADAPTER_NOT_FOUND: Color.YELLOW,
    Outcome.FAILED: Color.RED,
}
