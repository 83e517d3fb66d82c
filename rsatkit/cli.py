#!/usr/bin/env python3
"""
rsatkit - Remote Server Administration Tools installer
------------------------------------------------------
List and install the optional RSAT capabilities of this Windows machine.

Usage:
    rsatkit list [pattern]
    rsatkit install <number> [pattern]
    rsatkit install-all [pattern]
    rsatkit menu
    rsatkit check

<number> refers to the position shown by 'rsatkit list' for the same pattern.
Settings are read from RSAT_* environment variables or a .env file.
"""

import sys
from .components import build_components
from .config import load_settings
from .errors import RsatError
from .models import InstallResult
from .rsat_checker import check_connectivity, environment_status, is_admin, is_windows

STATE_MARKERS = {
    "Installed": "✅",
    "InstallPending": "⏳",
    "Failed": "⚠️",
    "NotInstalled": "❌",
}


def print_snapshot(snapshot):
    """Print a numbered listing of the snapshot."""
    if not snapshot:
        print(f"No capabilities match '{snapshot.pattern}'.")
        return
    print(f"\n=== Capabilities matching '{snapshot.pattern}' ===\n")
    width = len(str(len(snapshot)))
    for number, record in enumerate(snapshot, start=1):
        marker = STATE_MARKERS.get(record.state.value, "")
        print(f"{number:>{width}}. {marker} {record.display_name}")
        print(f"{'':>{width}}  {record.id} [{record.state.value}]")
    installed = sum(1 for record in snapshot if record.installed)
    print(f"\n{installed} of {len(snapshot)} installed.")


def print_outcome(outcome):
    if outcome.result is InstallResult.ALREADY_INSTALLED:
        print(f"✅ {outcome.capability_id} is already installed.")
    elif outcome.ok:
        print(f"✅ {outcome.capability_id} installed ({outcome.mechanism_used.value.lower()} installer).")
    else:
        print(f"❌ {outcome.capability_id} failed ({outcome.result.value}):")
        print(f"   {outcome.error_detail}")


def print_report(report):
    if report.nothing_to_do:
        print("All matching capabilities are already installed. Nothing to do.")
        return
    print("\n=== Installation Summary ===")
    print(f"Attempted: {report.attempted}")
    print(f"Succeeded: {report.succeeded}")
    print(f"Failed: {report.failed}")
    if report.cancelled:
        print("⚠️ Installation was interrupted, remaining capabilities were not attempted.")
    for outcome in report.outcomes:
        if not outcome.ok:
            print(f"  - {outcome.capability_id}: {outcome.error_detail}")


def ensure_ready(settings, install=False):
    """Check preconditions before querying or installing. Returns False when not met."""
    if not is_windows():
        print("RSAT capabilities can only be managed on Windows systems.")
        return False
    if install and not is_admin():
        print("❌ Installing capabilities requires an elevated (Run as administrator) prompt.")
        return False
    if not settings.skip_connectivity and not check_connectivity(settings.connectivity_host, settings.connectivity_port):
        print(f"❌ Cannot reach {settings.connectivity_host}. Capabilities are downloaded from Windows Update.")
        print("Set RSAT_SKIP_CONNECTIVITY=true to install from a local source.")
        return False
    return True


def list_command(settings, components, pattern):
    if not ensure_ready(settings):
        return 1
    snapshot = components.inventory.fetch(pattern)
    print_snapshot(snapshot)
    return 0


def install_command(settings, components, token, pattern):
    if not ensure_ready(settings, install=True):
        return 1
    snapshot = components.inventory.fetch(pattern)
    record = components.resolver.resolve(snapshot, token)
    if record.installed:
        print(f"✅ {record.id} is already installed.")
        return 0
    outcome = components.installer.install(record)
    print_outcome(outcome)
    return 0 if outcome.ok else 1


def install_all_command(settings, components, pattern):
    if not ensure_ready(settings, install=True):
        return 1
    snapshot = components.inventory.fetch(pattern)
    report = components.coordinator.run_all(snapshot, on_outcome=lambda record, outcome: print_outcome(outcome))
    print_report(report)
    return 0 if report.all_succeeded else 1


def check_command(settings):
    print("\n=== RSAT Environment Check ===\n")
    status = environment_status(settings)
    print("✅ Windows" if status["windows"] else "❌ Not running on Windows")
    print("✅ Running as administrator" if status["admin"] else "❌ Not running as administrator")
    print("✅ PowerShell found" if status["powershell"] else "❌ PowerShell not found")
    if status["connectivity"] is None:
        print("➖ Connectivity check skipped")
    elif status["connectivity"]:
        print(f"✅ {settings.connectivity_host} reachable")
    else:
        print(f"❌ {settings.connectivity_host} not reachable")
    return 0 if status["windows"] and status["powershell"] else 1


MENU = """
=== RSAT Capability Menu ===
1. List capabilities
2. Install a capability
3. Install all missing capabilities
4. Change filter (current: '{pattern}')
5. Check environment
q. Quit
"""


def menu_command(settings, components):
    """Interactive loop. The inventory is queried fresh for every action."""
    pattern = settings.filter_pattern
    while True:
        print(MENU.format(pattern=pattern))
        choice = input("Select an option: ").strip().lower()
        if choice in ("q", "quit", "exit"):
            return 0
        try:
            if choice == "1":
                list_command(settings, components, pattern)
            elif choice == "2":
                if not ensure_ready(settings, install=True):
                    continue
                snapshot = components.inventory.fetch(pattern)
                print_snapshot(snapshot)
                if not snapshot:
                    continue
                token = input(f"Capability number to install ('{settings.cancel_token}' to cancel): ")
                record = components.resolver.resolve(snapshot, token)
                if record.installed:
                    print(f"✅ {record.id} is already installed.")
                    continue
                print_outcome(components.installer.install(record))
            elif choice == "3":
                install_all_command(settings, components, pattern)
            elif choice == "4":
                pattern = input("New filter (empty for all capabilities): ").strip()
            elif choice == "5":
                check_command(settings)
            else:
                print(f"Unknown option: {choice}")
        except RsatError as e:
            if getattr(e, "cancelled", False):
                continue
            print(f"Error: {str(e)}")


def main(argv=None):
    """Main entry point for the CLI"""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print(__doc__)
        return 1

    command = args[0].lower()
    try:
        settings = load_settings()
        if command in ("check", "status"):
            return check_command(settings)

        components = build_components(settings)
        pattern = args[1] if len(args) > 1 else settings.filter_pattern

        if command in ("list", "ls", "show"):
            return list_command(settings, components, pattern)
        elif command in ("install", "add"):
            if len(args) < 2:
                print("Usage: rsatkit install <number> [pattern]")
                return 1
            pattern = args[2] if len(args) > 2 else settings.filter_pattern
            return install_command(settings, components, args[1], pattern)
        elif command in ("install-all", "all"):
            return install_all_command(settings, components, pattern)
        elif command in ("menu", "interactive"):
            return menu_command(settings, components)
        else:
            print(f"Unknown command: {command}")
            print(__doc__)
            return 1
    except RsatError as e:
        if getattr(e, "cancelled", False):
            return 1
        print(f"Error: {str(e)}")
        return 1
    except (KeyboardInterrupt, EOFError):
        print("\nAborted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
