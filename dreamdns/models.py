"""Data models shared by the loader, reconciler and executor."""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class RecordType(str, Enum):
    """Record types that may appear in the desired-entry list."""

    A = "A"
    AAAA = "AAAA"
    CNAME = "CNAME"
    NS = "NS"
    NAPTR = "NAPTR"
    SRV = "SRV"
    TXT = "TXT"

    def __str__(self) -> str:
        return self.value


class DesiredEntry(BaseModel):
    """A (type, hostname) pair the operator wants pointed at the external IP."""

    model_config = ConfigDict(frozen=True)

    type: RecordType
    hostname: str

    @property
    def key(self) -> tuple[str, str]:
        return (self.type.value, self.hostname)


class ProviderRecord(BaseModel):
    """One row of the provider's record listing."""

    model_config = ConfigDict(frozen=True)

    account_id: str = ""
    zone: str = ""
    hostname: str
    type: str
    value: str
    comment: str = ""
    editable: bool = True

    def matches(self, entry: DesiredEntry) -> bool:
        """Return True if this record has the entry's hostname and type."""
        return self.hostname == entry.hostname and self.type == entry.type.value


class _Action(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: RecordType
    hostname: str

    @property
    def stale(self) -> tuple[str, ...]:
        """Values that have to be removed, in removal order."""
        return ()

    @property
    def create_value(self) -> str | None:
        """Value to create once the stale records are gone, if any."""
        return None

    @property
    def estimated_calls(self) -> int:
        """Number of mutating provider calls this action needs."""
        return len(self.stale) + (1 if self.create_value is not None else 0)


class CreateAction(_Action):
    """No record exists yet: add one."""

    kind: Literal["create"] = "create"
    ip: str

    @property
    def create_value(self) -> str:
        return self.ip

    def describe(self) -> str:
        return f"CREATE: {self.type} {self.hostname} → {self.ip} (new record)"


class UpdateAction(_Action):
    """Only stale records exist: remove them all, then add the new one."""

    kind: Literal["update"] = "update"
    new_ip: str
    stale_ips: tuple[str, ...]

    @property
    def stale(self) -> tuple[str, ...]:
        return self.stale_ips

    @property
    def create_value(self) -> str:
        return self.new_ip

    def describe(self) -> str:
        return (
            f"UPDATE: {self.type} {self.hostname} → {self.new_ip} "
            f"(replace {' '.join(self.stale_ips)})"
        )


class CleanupAction(_Action):
    """A correct record exists next to stale duplicates: remove the duplicates."""

    kind: Literal["cleanup"] = "cleanup"
    stale_ips: tuple[str, ...]

    @property
    def stale(self) -> tuple[str, ...]:
        return self.stale_ips

    def describe(self) -> str:
        return (
            f"CLEANUP: {self.type} {self.hostname} → remove duplicates with IPs: "
            f"{' '.join(self.stale_ips)}"
        )


class SkipAction(_Action):
    """Every matching record already has the right value."""

    kind: Literal["skip"] = "skip"
    ip: str

    def describe(self) -> str:
        return f"SKIP: {self.type} {self.hostname} → {self.ip} (already correct)"


ReconcileAction = Annotated[
    Union[CreateAction, UpdateAction, CleanupAction, SkipAction],
    Field(discriminator="kind"),
]


class ReconcilePlan(BaseModel):
    """Ordered actions for one run, one per desired entry."""

    model_config = ConfigDict(frozen=True)

    ip: str
    actions: tuple[ReconcileAction, ...] = ()

    @property
    def total_calls(self) -> int:
        return sum(action.estimated_calls for action in self.actions)

    @property
    def has_changes(self) -> bool:
        return self.total_calls > 0
