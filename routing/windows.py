"""Windows routing backend (route.exe, netsh, PowerShell).

Command surface:
    Resolve:  netsh interface ipv4 show interfaces
    Flush:    route -f
    Add:      route -p add <dest> mask <mask> <gateway> metric <n> [if <idx>]
    Restart:  netsh interface set interface "<name>" admin=disabled|enabled
    Metric:   Set-NetIPInterface -AutomaticMetric Disabled -InterfaceMetric <n>
    Read:     route print -4

All commands run without a shell (see utils.system.execute).
"""

import config
from logging_config import get_logger
from models import CommandResult, RouteEntry
from routing.base import RoutingSystem
from routing.parsing import (
    parse_interface_table,
    parse_route_print,
    route_command_failed,
)
from utils import execute, run_command, sanitize_for_log

logger = get_logger(__name__)


def quote_powershell(value: str) -> str:
    """Quote a value as a PowerShell single-quoted string literal.

    Single quotes are the only character with meaning inside such a
    literal and are escaped by doubling.

    Args:
        value: Raw value (e.g., adapter display name)

    Returns:
        Quoted literal, e.g. 'Ethernet 2'.
    """
    return "'" + value.replace("'", "''") + "'"


class WindowsRoutingSystem(RoutingSystem):
    """RoutingSystem backed by route.exe, netsh and PowerShell.

    Args:
        dry_run: Log mutating commands instead of running them. Read-only
            queries (resolution, route table read-back) still execute.
    """

    def __init__(self, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    @property
    def required_commands(self) -> list[str]:
        return list(config.REQUIRED_COMMANDS)

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------

    def list_interfaces(self) -> dict[str, int]:
        """Return display name -> interface index for every IPv4 interface."""
        output = run_command(["netsh", "interface", "ipv4", "show", "interfaces"])
        if not output:
            logger.warning("Could not list IPv4 interfaces")
            return {}
        return parse_interface_table(output)

    def find_interface_index(self, display_name: str) -> int | None:
        # Windows adapter names are case-insensitive
        wanted = display_name.casefold()
        for name, index in self.list_interfaces().items():
            if name.casefold() == wanted:
                return index
        return None

    def list_routes(self) -> list[RouteEntry]:
        output = run_command(["route", "print", "-4"])
        if not output:
            logger.warning("Could not read route table")
            return []
        return parse_route_print(output)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def flush_routes(self) -> CommandResult:
        return self._route(["route", "-f"])

    def add_route(
        self,
        destination: str,
        mask: str,
        gateway: str,
        metric: int,
        interface_index: int | None = None,
    ) -> CommandResult:
        cmd = [
            "route", "-p", "add", destination,
            "mask", mask, gateway,
            "metric", str(metric),
        ]
        if interface_index is not None:
            cmd += ["if", str(interface_index)]
        return self._route(cmd)

    def restart_adapter(self, display_name: str) -> CommandResult:
        disable = self._run(
            ["netsh", "interface", "set", "interface", display_name, "admin=disabled"]
        )
        if not disable.ok:
            return disable

        enable = self._run(
            ["netsh", "interface", "set", "interface", display_name, "admin=enabled"]
        )
        if not enable.ok:
            logger.error(
                "Adapter '%s' was disabled but could not be re-enabled: %s",
                sanitize_for_log(display_name),
                sanitize_for_log(enable.reason),
            )
        return enable

    def set_interface_metric(self, display_name: str, metric: int) -> CommandResult:
        script = (
            f"Set-NetIPInterface -InterfaceAlias {quote_powershell(display_name)} "
            f"-AddressFamily IPv4 -AutomaticMetric Disabled "
            f"-InterfaceMetric {int(metric)} -ErrorAction Stop"
        )
        return self._run(
            ["powershell", "-NoProfile", "-NonInteractive", "-Command", script]
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _run(self, cmd: list[str]) -> CommandResult:
        """Run a mutating command, or only log it in dry-run mode."""
        if self.dry_run:
            logger.info("[dry-run] %s", sanitize_for_log(" ".join(cmd)))
            return CommandResult.success(cmd)

        logger.debug("Running: %s", sanitize_for_log(" ".join(cmd)))
        result = execute(cmd)
        if not result.ok:
            logger.debug(
                "Command failed (%d): %s",
                result.returncode,
                sanitize_for_log(result.reason),
            )
        return result

    def _route(self, cmd: list[str]) -> CommandResult:
        """Run route.exe, normalising "failed" output into a failed result."""
        result = self._run(cmd)
        if result.ok and route_command_failed(result):
            return CommandResult(
                command=result.command,
                returncode=1,
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return result
