"""
Environment checks for rsatkit
------------------------------
Platform, privilege and connectivity probes run before touching the
capability inventory.
"""

import os
import platform
import shutil
import socket
import sys


def is_windows():
    """Check if running on Windows platform."""
    return platform.system() == "Windows"


def is_admin():
    """Check if the process is running with administrative privileges."""
    try:
        if is_windows():
            import ctypes
            return ctypes.windll.shell32.IsUserAnAdmin() != 0
        return os.geteuid() == 0
    except (AttributeError, OSError) as e:
        print(f"Error checking admin status: {str(e)}", file=sys.stderr)
        return False


def check_powershell_available(executable="powershell"):
    """Check that PowerShell can be found on PATH."""
    found = shutil.which(executable) is not None
    print(f"PowerShell available: {found}", file=sys.stderr)
    return found


def check_connectivity(host, port=443, timeout=5):
    """Check that host:port accepts TCP connections. Capabilities are downloaded on demand."""
    print(f"Checking connectivity to {host}:{port}", file=sys.stderr)
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError as e:
        print(f"Connectivity check failed: {str(e)}", file=sys.stderr)
        return False


def environment_status(settings):
    """Collect all environment checks into a dictionary."""
    connectivity = None
    if not settings.skip_connectivity:
        connectivity = check_connectivity(settings.connectivity_host, settings.connectivity_port)
    return {
        "windows": is_windows(),
        "admin": is_admin(),
        "powershell": check_powershell_available(),
        "connectivity": connectivity,
    }


if __name__ == "__main__":
    print("Running rsat_checker directly", file=sys.stderr)
    print("✅ Windows" if is_windows() else "❌ Not running on Windows")
    print("✅ Elevated" if is_admin() else "❌ Not running as administrator")
    print("✅ PowerShell found" if check_powershell_available() else "❌ PowerShell not found")
