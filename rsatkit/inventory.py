"""
Capability inventory queries.
"""
import sys
from .errors import QueryError
from .host import parse_host_state
from .models import CapabilityRecord, InventorySnapshot


class CapabilityInventory:
    """Fetch point-in-time snapshots of the host's installable capabilities."""

    def __init__(self, registry):
        """
        Args:
            registry: Object with a query_capabilities(pattern) method returning
                (id, display_name, state) tuples, e.g. host.PowerShellRegistry
        """
        self.registry = registry

    def fetch(self, filter_pattern=""):
        """
        Return every capability whose id contains filter_pattern (case-insensitive).

        Raises:
            QueryError: if the host query fails. An empty snapshot means the
                query succeeded and nothing matched.
        """
        pattern = (filter_pattern or "").strip()
        print(f"Querying capabilities matching {pattern!r}", file=sys.stderr)
        try:
            entries = self.registry.query_capabilities(pattern)
        except QueryError:
            raise
        except Exception as e:
            print(f"Capability query failed: {str(e)}", file=sys.stderr)
            raise QueryError(f"Capability query failed: {str(e)}") from e

        needle = pattern.lower()
        records = []
        seen = set()
        for capability_id, display_name, raw_state in entries:
            if needle not in capability_id.lower():
                continue
            if capability_id in seen:
                print(f"Skipping duplicate capability entry: {capability_id}", file=sys.stderr)
                continue
            seen.add(capability_id)
            records.append(CapabilityRecord(
                id=capability_id,
                display_name=display_name or capability_id,
                state=parse_host_state(raw_state),
            ))

        print(f"Found {len(records)} capabilities", file=sys.stderr)
        return InventorySnapshot(records, pattern=pattern)
