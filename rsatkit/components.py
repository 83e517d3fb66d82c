"""
Wire the core components to the Windows host pathways.
"""
from dataclasses import dataclass
from .batch import BatchInstallCoordinator
from .host import DismInstaller, PowerShellRegistry
from .installer import CapabilityInstaller
from .inventory import CapabilityInventory
from .selection import SelectionResolver


@dataclass
class Components:
    inventory: CapabilityInventory
    installer: CapabilityInstaller
    coordinator: BatchInstallCoordinator
    resolver: SelectionResolver


def build_components(settings, registry=None, fallback=None):
    """Create the inventory, installer, coordinator and resolver for the given settings."""
    if registry is None:
        registry = PowerShellRegistry(
            query_timeout=settings.query_timeout,
            install_timeout=settings.install_timeout,
        )
    if fallback is None and settings.fallback_enabled:
        fallback = DismInstaller(timeout=settings.install_timeout).install_capability
    if not settings.fallback_enabled:
        fallback = None

    installer = CapabilityInstaller(registry.install_capability, fallback)
    return Components(
        inventory=CapabilityInventory(registry),
        installer=installer,
        coordinator=BatchInstallCoordinator(installer),
        resolver=SelectionResolver(settings.cancel_token),
    )
