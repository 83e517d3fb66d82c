"""
Data model for capability inventories and install results.
"""
from dataclasses import dataclass, field
from enum import Enum


class CapabilityState(Enum):
    NOT_INSTALLED = "NotInstalled"
    INSTALLED = "Installed"
    INSTALL_PENDING = "InstallPending"
    FAILED = "Failed"


class InstallResult(Enum):
    SUCCEEDED = "Succeeded"
    FAILED_PRIMARY = "FailedPrimary"
    FAILED_FALLBACK = "FailedFallback"
    ALREADY_INSTALLED = "AlreadyInstalled"


class Mechanism(Enum):
    PRIMARY = "Primary"
    FALLBACK = "Fallback"
    NONE = "None"


@dataclass(frozen=True)
class CapabilityRecord:
    id: str
    display_name: str
    state: CapabilityState

    @property
    def installed(self):
        return self.state is CapabilityState.INSTALLED

    def to_dict(self):
        return {
            "id": self.id,
            "display_name": self.display_name,
            "state": self.state.value,
        }


class InventorySnapshot(tuple):
    """
    Point-in-time listing of capabilities, in the order the host returned them.

    Neither the records nor the filter pattern can be changed after the query
    that produced the snapshot. Refreshing state means fetching a new snapshot.
    """

    def __new__(cls, records=(), pattern=""):
        snapshot = super().__new__(cls, records)
        object.__setattr__(snapshot, "_pattern", pattern)
        return snapshot

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is read-only")

    @property
    def pattern(self):
        return self._pattern

    def pending(self):
        """Return the records that still need installing, in snapshot order."""
        return [record for record in self if not record.installed]

    def to_list(self):
        return [record.to_dict() for record in self]


@dataclass(frozen=True)
class InstallOutcome:
    capability_id: str
    result: InstallResult
    mechanism_used: Mechanism
    error_detail: str = None

    @property
    def ok(self):
        return self.result in (InstallResult.SUCCEEDED, InstallResult.ALREADY_INSTALLED)

    def to_dict(self):
        return {
            "capability_id": self.capability_id,
            "result": self.result.value,
            "mechanism_used": self.mechanism_used.value,
            "error_detail": self.error_detail,
        }


@dataclass
class BatchReport:
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    outcomes: list = field(default_factory=list)
    nothing_to_do: bool = False
    cancelled: bool = False

    def record(self, outcome):
        """Add one install outcome and update the counters."""
        self.outcomes.append(outcome)
        self.attempted += 1
        if outcome.ok:
            self.succeeded += 1
        else:
            self.failed += 1

    @property
    def all_succeeded(self):
        return self.failed == 0 and not self.cancelled

    def to_dict(self):
        return {
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "nothing_to_do": self.nothing_to_do,
            "cancelled": self.cancelled,
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
        }
