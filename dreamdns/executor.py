"""Apply a reconcile plan through the provider, one call at a time."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from rich.console import Console
from rich.markup import escape

from dreamdns.errors import ActionFailed, ProviderError
from dreamdns.models import ReconcileAction, ReconcilePlan
from dreamdns.providers.base import DNSProvider

logger = logging.getLogger(__name__)
console = Console()


@dataclass
class ExecutionReport:
    """What happened while applying a plan."""

    calls_made: int = 0
    failures: list[ActionFailed] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def execute_plan(
    plan: ReconcilePlan,
    provider: DNSProvider,
    delay: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> ExecutionReport:
    """Apply every action of the plan in order.

    Stale records of an action are removed before its replacement is created,
    since the provider refuses to add a record that already exists. ``delay``
    seconds are slept between consecutive provider calls to stay under the
    hourly rate limit. Every call is attempted even when an earlier one
    failed: all deletes of an action complete (or fail) before its create is
    attempted. Each failed call is recorded in the report.

    Args:
        plan: The plan produced by reconcile()
        provider: Provider to issue the calls against
        delay: Seconds to wait between provider calls
        sleep: Sleep function, replaceable in tests

    Returns:
        ExecutionReport with the number of calls issued and any failures
    """
    report = ExecutionReport()

    def call(action: ReconcileAction, fn: Callable[..., None], *args: str) -> bool:
        if report.calls_made and delay:
            sleep(delay)
        report.calls_made += 1
        try:
            fn(*args)
        except ProviderError as e:
            failure = ActionFailed(action, e)
            logger.debug("Action failed: %s", failure)
            console.print(
                f"[red]✗[/red] {escape(action.hostname)}: provider returned {escape(e.code)}"
            )
            report.failures.append(failure)
            return False
        return True

    for action in plan.actions:
        if not action.estimated_calls:
            continue

        record_type = action.type.value
        console.print(f"[bold]Processing {record_type} record for {action.hostname}...[/bold]")
        results = []
        for stale_ip in action.stale:
            console.print(f"  Deleting record: {record_type} {action.hostname} {stale_ip}")
            results.append(
                call(action, provider.remove_record, action.hostname, record_type, stale_ip)
            )

        if action.create_value is not None:
            console.print(
                f"  Creating record: {record_type} {action.hostname} {action.create_value}"
            )
            results.append(
                call(action, provider.add_record, action.hostname, record_type, action.create_value)
            )

        if all(results):
            console.print(f"[green]✓[/green] {record_type} {action.hostname} → {plan.ip}")

    return report
