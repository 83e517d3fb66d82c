"""
rsatkit - enumerate and install Windows RSAT capabilities.
"""
from .models import (
    CapabilityState,
    CapabilityRecord,
    InventorySnapshot,
    InstallResult,
    Mechanism,
    InstallOutcome,
    BatchReport,
)
from .errors import RsatError, QueryError, ResolutionError, ResolutionKind, ConfigError
from .inventory import CapabilityInventory
from .installer import CapabilityInstaller
from .batch import BatchInstallCoordinator
from .selection import SelectionResolver

__version__ = "0.1"
