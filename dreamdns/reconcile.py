"""Compute the edit script that brings the provider's records in line with the desired list."""

from collections.abc import Iterable, Sequence

from dreamdns.models import (
    CleanupAction,
    CreateAction,
    DesiredEntry,
    ProviderRecord,
    ReconcileAction,
    ReconcilePlan,
    SkipAction,
    UpdateAction,
)


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


def plan_entry(
    entry: DesiredEntry, records: Sequence[ProviderRecord], ip: str
) -> ReconcileAction:
    """Decide what to do for a single desired entry.

    The decision never deletes a record that already points at ``ip`` and
    never creates one when such a record exists, so the number of billed
    calls stays minimal.

    Args:
        entry: The desired (type, hostname) pair
        records: The provider snapshot, read once for the whole run
        ip: The resolved external IP

    Returns:
        One of CreateAction, UpdateAction, CleanupAction or SkipAction
    """
    matching = [record for record in records if record.matches(entry)]
    correct = [record for record in matching if record.value == ip]

    if not correct:
        if not matching:
            return CreateAction(type=entry.type, hostname=entry.hostname, ip=ip)
        return UpdateAction(
            type=entry.type,
            hostname=entry.hostname,
            new_ip=ip,
            stale_ips=_unique(record.value for record in matching),
        )

    if len(matching) > len(correct):
        return CleanupAction(
            type=entry.type,
            hostname=entry.hostname,
            stale_ips=_unique(record.value for record in matching if record.value != ip),
        )

    return SkipAction(type=entry.type, hostname=entry.hostname, ip=ip)


def reconcile(
    entries: Iterable[DesiredEntry], records: Sequence[ProviderRecord], ip: str
) -> ReconcilePlan:
    """Plan one action per desired entry, in entry order.

    Every entry is compared against the same snapshot. Repeated entries are
    planned independently; call dedupe_entries() first to avoid that.
    """
    snapshot = tuple(records)
    return ReconcilePlan(
        ip=ip,
        actions=tuple(plan_entry(entry, snapshot, ip) for entry in entries),
    )


def dedupe_entries(
    entries: Iterable[DesiredEntry],
) -> tuple[list[DesiredEntry], list[DesiredEntry]]:
    """Drop repeated (type, hostname) pairs, keeping the first occurrence.

    Returns:
        A (kept, dropped) pair of lists, both in original order
    """
    seen: set[tuple[str, str]] = set()
    kept: list[DesiredEntry] = []
    dropped: list[DesiredEntry] = []
    for entry in entries:
        if entry.key in seen:
            dropped.append(entry)
            continue
        seen.add(entry.key)
        kept.append(entry)
    return kept, dropped
