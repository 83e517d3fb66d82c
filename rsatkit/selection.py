"""
Resolve user selection tokens against a displayed snapshot.
"""
import re
from .config import DEFAULT_CANCEL_TOKEN
from .errors import ResolutionError, ResolutionKind

NUMBER = re.compile(r"^[0-9]+$")


class SelectionResolver:
    """Map a 1-based index typed by the user to a CapabilityRecord."""

    def __init__(self, cancel_token=DEFAULT_CANCEL_TOKEN):
        self.cancel_token = cancel_token.strip().lower()

    def resolve(self, snapshot, token):
        value = (token or "").strip()

        if value.lower() == self.cancel_token:
            raise ResolutionError(ResolutionKind.CANCELLED, "Selection cancelled")

        count = len(snapshot)
        if count == 0:
            raise ResolutionError(ResolutionKind.INVALID_SELECTION, "There are no capabilities to select")

        valid_range = f"Enter a number between 1 and {count}, or '{self.cancel_token}' to cancel"
        if not NUMBER.match(value):
            raise ResolutionError(ResolutionKind.INVALID_SELECTION, f"Invalid selection {value!r}. {valid_range}")

        index = int(value)
        if not 1 <= index <= count:
            raise ResolutionError(ResolutionKind.INVALID_SELECTION, f"Selection {index} is out of range. {valid_range}")

        return snapshot[index - 1]
