"""System command execution utilities.

Provides safe command execution with timeout protection.
Never uses shell=True to prevent command injection.
"""

import re
import shutil
import subprocess
from typing import Any

import config
from models import CommandResult


def execute(cmd: list[str]) -> CommandResult:
    """Execute system command safely and keep its full outcome.

    Security:
        - NEVER shell=True
        - Timeout: config.TIMEOUT_SECONDS

    Args:
        cmd: Command as list (e.g., ["route", "print", "-4"])

    Returns:
        CommandResult. Commands that cannot be started or time out yield
        returncode -1 with the cause in stderr; nothing is raised.
    """
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=config.TIMEOUT_SECONDS,
            check=False,  # Caller decides what a non-zero exit means
            shell=False,  # CRITICAL: Never use shell=True
        )
    except subprocess.TimeoutExpired:
        return CommandResult.failure(
            cmd, f"timed out after {config.TIMEOUT_SECONDS}s"
        )
    except FileNotFoundError:
        return CommandResult.failure(cmd, f"command not found: {cmd[0]}")
    except (OSError, ValueError, RuntimeError) as e:
        return CommandResult.failure(cmd, str(e))

    return CommandResult(
        command=tuple(cmd),
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )


def run_command(cmd: list[str]) -> str | None:
    """Execute read-only system command.

    Args:
        cmd: Command as list (e.g., ["netsh", "interface", "ipv4", "show", "interfaces"])

    Returns:
        Command output (stripped) or None on error.
    """
    result = execute(cmd)
    if result.ok:
        return result.stdout.strip()
    return None


def command_exists(cmd: str) -> bool:
    """Check if command exists in PATH.

    Args:
        cmd: Command name (e.g., "route", "netsh")

    Returns:
        True if command is available, False otherwise.
    """
    return shutil.which(cmd) is not None


def sanitize_for_log(value: Any) -> str:
    """Sanitize values before logging to prevent log injection.

    Removes:
        - Newlines
        - ANSI escape codes
        - Control characters

    Max length: 200 characters

    Args:
        value: Value to sanitize (any type, will be converted to string)

    Returns:
        Sanitized string safe for logging.
    """
    text = str(value)

    text = text.replace("\n", " ").replace("\r", " ")

    text = re.sub(r"\x1b\[[0-9;]*m", "", text)

    text = "".join(c for c in text if c.isprintable() or c.isspace())

    if len(text) > 200:
        text = text[:197] + "..."

    return text
