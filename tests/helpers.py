from rsatkit.models import CapabilityRecord, CapabilityState, InventorySnapshot


def record(capability_id, state=CapabilityState.NOT_INSTALLED, display_name=None):
    return CapabilityRecord(capability_id, display_name or capability_id, state)


def snapshot(*records, pattern="Rsat"):
    return InventorySnapshot(records, pattern=pattern)


class FakeRegistry:
    """In-memory stand-in for the PowerShell capability registry."""

    def __init__(self, entries=None, error=None):
        self.entries = list(entries or [])
        self.error = error
        self.queries = []

    def query_capabilities(self, pattern):
        self.queries.append(pattern)
        if self.error:
            raise self.error
        return list(self.entries)
