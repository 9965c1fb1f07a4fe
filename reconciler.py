"""Reconciler for static and default routes.

Converges the OS route table and interface metrics to a DesiredState.

Process (each step fully committed before the next starts):
    1. Resolve adapter display names to interface indexes
    2. Flush the route table (fatal on failure)
    3. Settle: cycle every adapter link, wait
    4. Install static routes
    5. Install default routes, each bound to its adapter's interface index
    6. Settle again so the new routes register
    7. Pin interface metrics (after installs, which can re-enable automatic metric)
    8. Read the route table back

Interrupting the run between steps 2 and 5 leaves the host with no routes;
running reconcile again restores the full desired state.
"""

import time
from collections.abc import Callable, Iterable, Mapping

import config
from enums import Outcome, ResultKind, Stage
from logging_config import get_logger
from models import (
    Adapter,
    CommandResult,
    DefaultRoute,
    DesiredState,
    ReconciliationReport,
    ReconciliationResult,
    StaticRoute,
)
from routing import RoutingSystem, sort_routes
from utils import command_exists, sanitize_for_log

logger = get_logger(__name__)


def check_dependencies(system: RoutingSystem) -> bool:
    """Check all commands the backend shells out to exist.

    Args:
        system: Routing backend

    Returns:
        True if all dependencies present, False otherwise.

    Logs:
        ERROR for each missing command.
    """
    missing = [cmd for cmd in system.required_commands if not command_exists(cmd)]
    for cmd in missing:
        logger.error("Error: Missing required command: %s", cmd)
    return not missing


def resolve_adapters(
    adapters: Mapping[str, Adapter],
    system: RoutingSystem,
) -> dict[str, Adapter]:
    """Resolve every adapter's current interface index.

    Unresolved adapters keep interface_index=None; this is reported, not
    fatal. No retries: the result is a point-in-time snapshot.

    Args:
        adapters: Configured adapters by key
        system: Routing backend

    Returns:
        Updated copies of all adapters, by key.
    """
    logger.info("[%s] Resolving %d adapters...", Stage.RESOLVE.value, len(adapters))

    resolved: dict[str, Adapter] = {}
    for key, adapter in adapters.items():
        index = system.find_interface_index(adapter.display_name)
        resolved[key] = adapter.with_index(index)

        if index is None:
            logger.warning(
                "[%s] Adapter '%s' (%s) not found or disabled",
                Stage.RESOLVE.value,
                key,
                sanitize_for_log(adapter.display_name),
            )
        else:
            logger.info(
                "[%s] Adapter '%s' (%s) -> interface %d",
                Stage.RESOLVE.value,
                key,
                sanitize_for_log(adapter.display_name),
                index,
            )

    return resolved


def reset_route_table(system: RoutingSystem) -> CommandResult:
    """Flush every route, managed or not.

    Args:
        system: Routing backend

    Returns:
        CommandResult of the flush. A failure must abort the run.
    """
    logger.info("[%s] Clearing route table...", Stage.RESET.value)
    result = system.flush_routes()
    if result.ok:
        logger.info("[%s] Route table cleared", Stage.RESET.value)
    else:
        logger.error(
            "[%s] Route table flush failed: %s",
            Stage.RESET.value,
            sanitize_for_log(result.reason),
        )
    return result


def settle_adapters(
    adapters: Iterable[Adapter],
    system: RoutingSystem,
    settle_seconds: float = config.SETTLE_SECONDS,
) -> list[str]:
    """Cycle every adapter link, then wait a fixed quiescence interval.

    Best effort: a failed restart is logged and the other adapters are
    still restarted. The wait is a plain timed pause because there is no
    portable "link is stable" signal.

    Args:
        adapters: Adapters to restart (resolved or not, restart is by name)
        system: Routing backend
        settle_seconds: Pause after the restarts; <= 0 skips the pause, as
            does a dry-run backend

    Returns:
        Display names of adapters that failed to restart.
    """
    failures: list[str] = []

    for adapter in adapters:
        logger.info(
            "[%s] Restarting adapter '%s'...",
            Stage.SETTLE.value,
            sanitize_for_log(adapter.display_name),
        )
        result = system.restart_adapter(adapter.display_name)
        if not result.ok:
            failures.append(adapter.display_name)
            logger.warning(
                "[%s] Skipping restart of '%s': %s",
                Stage.SETTLE.value,
                sanitize_for_log(adapter.display_name),
                sanitize_for_log(result.reason),
            )

    if system.dry_run:
        logger.info("[%s] Dry run, not waiting for links to settle", Stage.SETTLE.value)
    elif settle_seconds > 0:
        logger.info("[%s] Waiting %ss for links to settle...", Stage.SETTLE.value, settle_seconds)
        time.sleep(settle_seconds)

    return failures


def install_static_routes(
    routes: Iterable[StaticRoute],
    system: RoutingSystem,
) -> list[ReconciliationResult]:
    """Install static routes in configuration order.

    Each route is independent: a rejected route is recorded as FAILED and
    the remaining routes are still attempted.

    Args:
        routes: Static routes, in configuration order
        system: Routing backend

    Returns:
        One result per route, same order.
    """
    results: list[ReconciliationResult] = []

    for route in routes:
        logger.info("[%s] Adding %s", Stage.INSTALL_STATIC.value, route.descriptor)
        outcome = system.add_route(
            route.destination,
            route.mask,
            route.gateway,
            route.metric,
        )
        results.append(_route_result(ResultKind.STATIC, route.descriptor, outcome, system))

    return results


def install_default_routes(
    routes: Iterable[DefaultRoute],
    resolved: Mapping[str, Adapter],
    system: RoutingSystem,
) -> list[ReconciliationResult]:
    """Install default routes, each bound to its adapter's interface index.

    Never installs an unbound default route: with several default routes
    the OS would pick the interface arbitrarily.
    A second route for an interface index that already carries one is
    recorded as FAILED, even when it came from another adapter key whose
    display name resolved to the same interface.

    Args:
        routes: Default routes, in configuration order
        resolved: Adapters after resolution, by key
        system: Routing backend

    Returns:
        One result per route, same order.
    """
    results: list[ReconciliationResult] = []
    bound: dict[int, str] = {}  # interface index -> adapter key

    for route in routes:
        adapter = resolved.get(route.adapter_key)

        if adapter is None:
            reason = f"adapter '{route.adapter_key}' is not configured"
            logger.warning(
                "[%s] Skipping %s - %s",
                Stage.INSTALL_DEFAULT.value,
                route.descriptor,
                sanitize_for_log(reason),
            )
            results.append(
                ReconciliationResult(
                    kind=ResultKind.DEFAULT,
                    descriptor=route.descriptor,
                    outcome=Outcome.SKIPPED_UNKNOWN_ADAPTER,
                    reason=reason,
                )
            )
            continue

        if adapter.interface_index is None:
            reason = f"adapter '{adapter.display_name}' has no interface index"
            logger.warning(
                "[%s] Skipping %s - %s",
                Stage.INSTALL_DEFAULT.value,
                route.descriptor,
                sanitize_for_log(reason),
            )
            results.append(
                ReconciliationResult(
                    kind=ResultKind.DEFAULT,
                    descriptor=route.descriptor,
                    outcome=Outcome.SKIPPED_UNRESOLVED_ADAPTER,
                    reason=reason,
                )
            )
            continue

        if adapter.interface_index in bound:
            reason = (
                f"interface {adapter.interface_index} already carries the default "
                f"route of adapter '{bound[adapter.interface_index]}'"
            )
            logger.error(
                "[%s] Refusing %s - %s",
                Stage.INSTALL_DEFAULT.value,
                route.descriptor,
                sanitize_for_log(reason),
            )
            results.append(
                ReconciliationResult(
                    kind=ResultKind.DEFAULT,
                    descriptor=route.descriptor,
                    outcome=Outcome.FAILED,
                    reason=reason,
                )
            )
            continue

        bound[adapter.interface_index] = route.adapter_key
        descriptor = f"{route.descriptor} if {adapter.interface_index}"
        logger.info("[%s] Adding %s", Stage.INSTALL_DEFAULT.value, descriptor)
        outcome = system.add_route(
            route.destination,
            route.mask,
            route.gateway,
            route.metric,
            interface_index=adapter.interface_index,
        )
        results.append(_route_result(ResultKind.DEFAULT, descriptor, outcome, system))

    return results


def enforce_interface_metrics(
    adapters: Iterable[Adapter],
    system: RoutingSystem,
    metric_for: Callable[[Adapter], int] | None = None,
) -> list[ReconciliationResult]:
    """Disable automatic metric and pin an explicit metric on every adapter.

    Must run after route installation. Works by display name, so adapters
    that did not resolve an interface index are still attempted; the
    adapter is looked up again because the settle step may have changed
    what the OS reports.

    Args:
        adapters: Configured adapters
        system: Routing backend
        metric_for: Metric per adapter (default: adapter.interface_metric)

    Returns:
        One result per adapter.
    """
    if metric_for is None:
        metric_for = _configured_metric

    results: list[ReconciliationResult] = []

    for adapter in adapters:
        metric = metric_for(adapter)
        descriptor = f"'{adapter.display_name}' interface metric {metric} ({adapter.key})"

        if system.find_interface_index(adapter.display_name) is None:
            reason = f"adapter '{adapter.display_name}' not found"
            logger.warning(
                "[%s] Skipping %s - %s",
                Stage.ENFORCE_METRICS.value,
                sanitize_for_log(descriptor),
                sanitize_for_log(reason),
            )
            results.append(
                ReconciliationResult(
                    kind=ResultKind.METRIC,
                    descriptor=descriptor,
                    outcome=Outcome.SKIPPED_ADAPTER_NOT_FOUND,
                    reason=reason,
                )
            )
            continue

        logger.info("[%s] Pinning %s", Stage.ENFORCE_METRICS.value, sanitize_for_log(descriptor))
        outcome = system.set_interface_metric(adapter.display_name, metric)
        results.append(_route_result(ResultKind.METRIC, descriptor, outcome, system))

    return results


def reconcile(
    state: DesiredState,
    system: RoutingSystem,
    settle_seconds: float = config.SETTLE_SECONDS,
    skip_settle: bool = False,
) -> ReconciliationReport:
    """Converge the OS routing state to the desired state.

    Stages return outcomes; this function decides fatal vs. continue.
    Only a failed flush is fatal. Everything else is recorded and the run
    carries on to apply as much of the desired state as possible.

    Args:
        state: Desired state (validated)
        system: Routing backend, exclusively owned for the run
        settle_seconds: Pause after each adapter restart round
        skip_settle: Do not restart adapters at all

    Returns:
        ReconciliationReport of the run.
    """
    report = ReconciliationReport()

    # Step 1: Resolve interface indexes
    report.adapters = resolve_adapters(state.adapters, system)

    # Step 2: Known-empty baseline
    report.reset = reset_route_table(system)
    if not report.reset.ok:
        report.fatal_error = f"route table flush failed: {report.reset.reason}"
        logger.error("Aborting: %s", sanitize_for_log(report.fatal_error))
        return report

    # Step 3: Clean link state
    if not skip_settle:
        report.settle_failures += settle_adapters(
            report.adapters.values(), system, settle_seconds
        )

    # Steps 4-5: Routes
    report.static_results = install_static_routes(state.static_routes, system)
    report.default_results = install_default_routes(
        state.default_routes, report.adapters, system
    )

    # Step 6: Force the new routes to register
    if not skip_settle:
        report.settle_failures += settle_adapters(
            report.adapters.values(), system, settle_seconds
        )

    # Step 7: Metrics last
    report.metric_results = enforce_interface_metrics(report.adapters.values(), system)

    # Step 8: Verification read-back
    logger.info("[%s] Reading route table...", Stage.VERIFY.value)
    report.final_routes = sort_routes(system.list_routes())

    applied = sum(1 for r in report.results if r.outcome in (Outcome.APPLIED, Outcome.PLANNED))
    logger.info(
        "Reconciliation finished: %d of %d operations applied",
        applied,
        len(report.results),
    )
    return report


def _configured_metric(adapter: Adapter) -> int:
    return adapter.interface_metric


def _route_result(
    kind: ResultKind,
    descriptor: str,
    outcome: CommandResult,
    system: RoutingSystem,
) -> ReconciliationResult:
    """Turn a command outcome into a reconciliation result, logging failures."""
    if not outcome.ok:
        logger.error("Failed: %s - %s", descriptor, sanitize_for_log(outcome.reason))
        return ReconciliationResult(
            kind=kind,
            descriptor=descriptor,
            outcome=Outcome.FAILED,
            reason=outcome.reason,
        )

    return ReconciliationResult(
        kind=kind,
        descriptor=descriptor,
        outcome=Outcome.PLANNED if system.dry_run else Outcome.APPLIED,
    )
