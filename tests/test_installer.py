import unittest
from unittest import mock
from rsatkit.host import MechanismResult
from rsatkit.installer import CapabilityInstaller
from rsatkit.models import CapabilityState, InstallResult, Mechanism
from tests.helpers import record


class TestCapabilityInstaller(unittest.TestCase):
    def setUp(self):
        self.primary = mock.Mock(return_value=MechanismResult(True, "done"))
        self.fallback = mock.Mock(return_value=MechanismResult(True, "done"))
        self.installer = CapabilityInstaller(self.primary, self.fallback)

    def test_installed_record_has_no_side_effect(self):
        outcome = self.installer.install(record("Rsat.B", CapabilityState.INSTALLED))
        self.assertIs(outcome.result, InstallResult.ALREADY_INSTALLED)
        self.assertIs(outcome.mechanism_used, Mechanism.NONE)
        self.assertEqual(self.primary.call_count, 0)
        self.assertEqual(self.fallback.call_count, 0)

    def test_primary_success(self):
        outcome = self.installer.install(record("Rsat.A"))
        self.assertIs(outcome.result, InstallResult.SUCCEEDED)
        self.assertIs(outcome.mechanism_used, Mechanism.PRIMARY)
        self.primary.assert_called_once_with("Rsat.A")
        self.fallback.assert_not_called()

    def test_fallback_after_primary_failure(self):
        self.primary.return_value = MechanismResult(False, "0x800f0954")
        outcome = self.installer.install(record("Rsat.C"))
        self.assertIs(outcome.result, InstallResult.SUCCEEDED)
        self.assertIs(outcome.mechanism_used, Mechanism.FALLBACK)
        self.fallback.assert_called_once_with("Rsat.C")

    def test_both_fail_reports_fallback_error(self):
        self.primary.return_value = MechanismResult(False, "primary broke")
        self.fallback.return_value = MechanismResult(False, "Error: 87 The parameter is incorrect.")
        outcome = self.installer.install(record("Rsat.D"))
        self.assertIs(outcome.result, InstallResult.FAILED_FALLBACK)
        self.assertIs(outcome.mechanism_used, Mechanism.FALLBACK)
        self.assertIn("Error: 87", outcome.error_detail)
        self.assertIn("primary broke", outcome.error_detail)
        self.assertEqual(self.fallback.call_count, 1)
        self.assertFalse(outcome.ok)

    def test_exceptions_are_captured_as_text(self):
        self.primary.side_effect = RuntimeError("cmdlet not found")
        self.fallback.side_effect = OSError("DISM missing")
        outcome = self.installer.install(record("Rsat.E"))
        self.assertIs(outcome.result, InstallResult.FAILED_FALLBACK)
        self.assertIn("DISM missing", outcome.error_detail)
        self.assertIn("cmdlet not found", outcome.error_detail)

    def test_failure_without_output_still_has_detail(self):
        self.primary.return_value = MechanismResult(False, "")
        self.fallback.return_value = MechanismResult(False, "  ")
        outcome = self.installer.install(record("Rsat.F"))
        self.assertTrue(outcome.error_detail)

    def test_no_fallback_configured(self):
        self.primary.return_value = MechanismResult(False, "no source")
        installer = CapabilityInstaller(self.primary)
        outcome = installer.install(record("Rsat.G"))
        self.assertIs(outcome.result, InstallResult.FAILED_PRIMARY)
        self.assertIs(outcome.mechanism_used, Mechanism.PRIMARY)
        self.assertEqual(outcome.error_detail, "no source")

    def test_boolean_mechanisms_are_accepted(self):
        installer = CapabilityInstaller(lambda capability_id: False, lambda capability_id: True)
        outcome = installer.install(record("Rsat.H"))
        self.assertIs(outcome.mechanism_used, Mechanism.FALLBACK)

    def test_unsafe_identifier_is_rejected_before_any_call(self):
        outcome = self.installer.install(record("Rsat.A & del C:\\"))
        self.assertIs(outcome.result, InstallResult.FAILED_PRIMARY)
        self.assertIs(outcome.mechanism_used, Mechanism.NONE)
        self.assertIn("Rsat.A & del", outcome.error_detail)
        self.primary.assert_not_called()
        self.fallback.assert_not_called()

    def test_identifier_with_tildes_is_installed(self):
        outcome = self.installer.install(record("Rsat.Dns.Tools~~~~0.0.1.0"))
        self.assertTrue(outcome.ok)
        self.primary.assert_called_once_with("Rsat.Dns.Tools~~~~0.0.1.0")


if __name__ == "__main__":
    unittest.main()
