"""
Single-capability installation with a primary and a fallback pathway.
"""
import sys
from .host import MechanismResult, is_safe_identifier
from .models import InstallOutcome, InstallResult, Mechanism


def _run_mechanism(mechanism, capability_id, label):
    """Call an install pathway, turning any exception into a failed MechanismResult."""
    try:
        result = mechanism(capability_id)
    except Exception as e:
        print(f"{label} install raised for {capability_id}: {str(e)}", file=sys.stderr)
        return MechanismResult(False, f"{type(e).__name__}: {str(e)}")
    if not isinstance(result, MechanismResult):
        # Plain callables may just return True/False
        result = MechanismResult(bool(result), "")
    return result


def _failure_text(result, label):
    return result.output.strip() or f"{label} install failed without output"


class CapabilityInstaller:
    """
    Install one capability at a time.

    The primary pathway is tried first. If it fails, the fallback pathway is
    tried exactly once. Failures are returned as InstallOutcome values and
    never raised.
    """

    def __init__(self, primary, fallback=None):
        """
        Args:
            primary: Callable taking a capability id and returning a MechanismResult
            fallback: Optional callable with the same signature, used when primary fails
        """
        self.primary = primary
        self.fallback = fallback

    def install(self, record):
        if record.installed:
            print(f"{record.id} is already installed, skipping", file=sys.stderr)
            return InstallOutcome(record.id, InstallResult.ALREADY_INSTALLED, Mechanism.NONE)

        if not is_safe_identifier(record.id):
            print(f"Refusing to install unsafe capability identifier: {record.id!r}", file=sys.stderr)
            return InstallOutcome(
                record.id, InstallResult.FAILED_PRIMARY, Mechanism.NONE,
                f"Capability identifier {record.id!r} contains characters outside [A-Za-z0-9._~-]",
            )

        print(f"Installing {record.id}", file=sys.stderr)
        primary_result = _run_mechanism(self.primary, record.id, "Primary")
        if primary_result.ok:
            return InstallOutcome(record.id, InstallResult.SUCCEEDED, Mechanism.PRIMARY)

        primary_error = _failure_text(primary_result, "Primary")
        if self.fallback is None:
            return InstallOutcome(record.id, InstallResult.FAILED_PRIMARY, Mechanism.PRIMARY, primary_error)

        print(f"Primary install failed for {record.id}, trying fallback", file=sys.stderr)
        fallback_result = _run_mechanism(self.fallback, record.id, "Fallback")
        if fallback_result.ok:
            return InstallOutcome(record.id, InstallResult.SUCCEEDED, Mechanism.FALLBACK)

        fallback_error = _failure_text(fallback_result, "Fallback")
        return InstallOutcome(
            record.id,
            InstallResult.FAILED_FALLBACK,
            Mechanism.FALLBACK,
            f"{fallback_error}\n(primary: {primary_error})",
        )
