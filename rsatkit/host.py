"""
Host-side capability management for rsatkit.

This module talks to Windows through two pathways:
  - PowerShell's Get-WindowsCapability / Add-WindowsCapability cmdlets
    (the structured, primary pathway)
  - DISM.exe /Add-Capability (the command-line fallback pathway)

Capability identifiers never end up inside script text. PowerShell reads
the identifier from an environment variable and DISM receives it as a
single argument in an argument vector, so no shell parses it. On top of
that, identifiers are checked against SAFE_IDENTIFIER before any call.
"""

import json
import os
import re
import subprocess
import sys
import time
from dataclasses import dataclass
from .errors import QueryError
from .models import CapabilityState

SAFE_IDENTIFIER = re.compile(r"[A-Za-z0-9._~-]+")

# Windows capability states mapped onto the states rsatkit tracks
HOST_STATES = {
    "installed": CapabilityState.INSTALLED,
    "installpending": CapabilityState.INSTALL_PENDING,
    "notpresent": CapabilityState.NOT_INSTALLED,
    "staged": CapabilityState.NOT_INSTALLED,
    "removed": CapabilityState.NOT_INSTALLED,
    "superseded": CapabilityState.NOT_INSTALLED,
    "uninstallpending": CapabilityState.NOT_INSTALLED,
    "partiallyinstalled": CapabilityState.FAILED,
}

# PowerShell serializes enums as integers unless told otherwise
HOST_STATE_CODES = {
    0: "NotPresent",
    1: "UninstallPending",
    2: "Staged",
    3: "Removed",
    4: "Installed",
    5: "InstallPending",
    6: "Superseded",
    7: "PartiallyInstalled",
}

# The pattern is a literal substring, so wildcard characters in it are escaped
QUERY_SCRIPT = (
    "try { Get-WindowsCapability -Online -Name ('*' + [WildcardPattern]::Escape($env:RSAT_CAPABILITY_PATTERN) + '*') -ErrorAction Stop | "
    "Select-Object Name, DisplayName, @{Name='State';Expression={$_.State.ToString()}} | "
    "ConvertTo-Json -Depth 3 -Compress } "
    "catch { [Console]::Error.WriteLine($_.Exception.Message); exit 1 }"
)

INSTALL_SCRIPT = (
    "try { Add-WindowsCapability -Online -Name $env:RSAT_CAPABILITY_NAME -ErrorAction Stop | Out-Null } "
    "catch { [Console]::Error.WriteLine($_.Exception.Message); exit 1 }"
)


@dataclass(frozen=True)
class MechanismResult:
    """Exit signal and text produced by one install pathway."""
    ok: bool
    output: str = ""


def is_safe_identifier(capability_id):
    return bool(capability_id) and SAFE_IDENTIFIER.fullmatch(capability_id) is not None


def parse_host_state(raw_state):
    """Map a host state (name or numeric code) to a CapabilityState."""
    if isinstance(raw_state, int):
        raw_state = HOST_STATE_CODES.get(raw_state, "")
    state = HOST_STATES.get(str(raw_state or "").strip().lower())
    if state is None:
        print(f"Unknown capability state {raw_state!r}, treating as NotInstalled", file=sys.stderr)
        return CapabilityState.NOT_INSTALLED
    return state


def _combined_output(result):
    parts = [part.strip() for part in (result.stdout, result.stderr) if part and part.strip()]
    return "\n".join(parts)


class PowerShellRegistry:
    """Query and install capabilities through the PowerShell capability cmdlets."""

    def __init__(self, query_timeout=None, install_timeout=None, executable="powershell"):
        self.query_timeout = query_timeout
        self.install_timeout = install_timeout
        self.executable = executable

    def _run_powershell(self, script, env_vars, timeout):
        env = os.environ.copy()
        env.update(env_vars)
        print(f"Running PowerShell script: {script[:50]}...", file=sys.stderr)
        start_time = time.time()
        result = subprocess.run(
            [self.executable, "-NoProfile", "-ExecutionPolicy", "Bypass", "-Command", "-"],
            input=script,
            capture_output=True,
            text=True,
            env=env,
            timeout=timeout,
        )
        elapsed = time.time() - start_time
        if timeout and elapsed > timeout * 0.8:
            print(f"Warning: PowerShell command took {elapsed:.1f}s, nearing timeout ({timeout}s)", file=sys.stderr)
        return result

    def query_capabilities(self, pattern):
        """
        List capabilities whose name contains pattern.

        Returns:
            A list of (id, display_name, raw_state) tuples in host order

        Raises:
            QueryError: if PowerShell cannot be run or its output is unusable
        """
        try:
            result = self._run_powershell(
                QUERY_SCRIPT, {"RSAT_CAPABILITY_PATTERN": pattern or ""}, self.query_timeout
            )
        except subprocess.TimeoutExpired:
            print(f"Capability query timed out after {self.query_timeout} seconds", file=sys.stderr)
            raise QueryError(f"Capability query timed out after {self.query_timeout} seconds")
        except OSError as e:
            print(f"Could not start PowerShell: {str(e)}", file=sys.stderr)
            raise QueryError(f"Could not start PowerShell: {str(e)}")

        if result.returncode != 0:
            print(f"PowerShell error (code {result.returncode}): {result.stderr}", file=sys.stderr)
            detail = _combined_output(result) or f"exit code {result.returncode}"
            raise QueryError(f"Capability query failed: {detail}")

        output = result.stdout.strip()
        print(f"PowerShell stdout: {output[:100]}...", file=sys.stderr)
        if not output:
            # ConvertTo-Json prints nothing for an empty pipeline
            return []

        try:
            parsed = json.loads(output)
        except json.JSONDecodeError as e:
            print(f"JSON parse error: {str(e)}, raw output: {output[:200]}", file=sys.stderr)
            raise QueryError(f"Could not parse capability list: {str(e)}")

        # A single match is serialized as an object, not a list
        if isinstance(parsed, dict):
            parsed = [parsed]
        if not isinstance(parsed, list):
            raise QueryError(f"Unexpected capability list format: {type(parsed).__name__}")

        entries = []
        for item in parsed:
            if not isinstance(item, dict) or not item.get("Name"):
                print(f"Skipping invalid capability entry: {item}", file=sys.stderr)
                continue
            entries.append((item["Name"], item.get("DisplayName") or "", item.get("State")))
        return entries

    def install_capability(self, capability_id):
        """Install one capability with Add-WindowsCapability."""
        try:
            result = self._run_powershell(
                INSTALL_SCRIPT, {"RSAT_CAPABILITY_NAME": capability_id}, self.install_timeout
            )
        except subprocess.TimeoutExpired:
            print(f"Add-WindowsCapability timed out for {capability_id}", file=sys.stderr)
            return MechanismResult(False, f"Add-WindowsCapability timed out after {self.install_timeout} seconds")
        except OSError as e:
            return MechanismResult(False, f"Could not start PowerShell: {str(e)}")

        output = _combined_output(result)
        if result.returncode != 0:
            print(f"Add-WindowsCapability failed (code {result.returncode}): {output[:200]}", file=sys.stderr)
            return MechanismResult(False, output or f"Add-WindowsCapability exited with code {result.returncode}")
        return MechanismResult(True, output)


class DismInstaller:
    """Install capabilities by invoking DISM.exe directly."""

    # 3010 means success, restart required
    SUCCESS_CODES = (0, 3010)

    def __init__(self, timeout=None, executable="DISM.exe"):
        self.timeout = timeout
        self.executable = executable

    def build_command(self, capability_id):
        return [
            self.executable,
            "/Online",
            "/Add-Capability",
            f"/CapabilityName:{capability_id}",
            "/NoRestart",
        ]

    def install_capability(self, capability_id):
        command = self.build_command(capability_id)
        print(f"Running fallback installer: {' '.join(command)}", file=sys.stderr)
        try:
            result = subprocess.run(command, capture_output=True, text=True, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            print(f"DISM timed out for {capability_id}", file=sys.stderr)
            return MechanismResult(False, f"DISM timed out after {self.timeout} seconds")
        except OSError as e:
            return MechanismResult(False, f"Could not start DISM: {str(e)}")

        output = _combined_output(result)
        if result.returncode not in self.SUCCESS_CODES:
            print(f"DISM failed (code {result.returncode}): {output[:200]}", file=sys.stderr)
            return MechanismResult(False, output or f"DISM exited with code {result.returncode}")
        return MechanismResult(True, output)
