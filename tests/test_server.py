import unittest
from unittest import mock
from rsatkit import server
from rsatkit.components import build_components
from rsatkit.config import Settings
from rsatkit.host import MechanismResult
from tests.helpers import FakeRegistry


class Registry(FakeRegistry):
    def install_capability(self, capability_id):
        return MechanismResult(capability_id != "Rsat.Broken", "0x800f0954")


class TestServer(unittest.TestCase):
    def setUp(self):
        settings = Settings(fallback_enabled=False)
        self.registry = Registry([
            ("Rsat.Dns.Tools~~~~0.0.1.0", "RSAT: DNS Server Tools", "NotPresent"),
            ("Rsat.Broken", "Broken", "NotPresent"),
            ("Rsat.DHCP.Tools~~~~0.0.1.0", "RSAT: DHCP Server Tools", "Installed"),
        ])
        patches = [
            mock.patch.object(server, "settings", settings),
            mock.patch.object(server, "components", build_components(settings, registry=self.registry)),
            mock.patch("rsatkit.server.is_windows", return_value=True),
            mock.patch("rsatkit.server.is_admin", return_value=True),
        ]
        for patcher in patches:
            patcher.start()
            self.addCleanup(patcher.stop)

    def test_list_capabilities(self):
        result = server.list_capabilities("dns")
        self.assertEqual(result["status"], "success")
        self.assertEqual(result["count"], 1)
        self.assertEqual(result["data"][0]["state"], "NotInstalled")

    def test_install_by_id(self):
        result = server.install_capability("rsat.dns.tools~~~~0.0.1.0")
        self.assertEqual(result["status"], "success")
        self.assertEqual(result["data"]["result"], "Succeeded")

    def test_install_by_number_with_invalid_selection(self):
        result = server.install_capability("9")
        self.assertEqual(result["status"], "error")
        self.assertEqual(result["kind"], "InvalidSelection")

    def test_install_all(self):
        result = server.install_all_capabilities()
        self.assertEqual(result["status"], "error")
        self.assertEqual(result["data"]["attempted"], 2)
        self.assertEqual(result["data"]["outcomes"][1]["result"], "FailedPrimary")
        self.assertEqual(result["data"]["outcomes"][1]["error_detail"], "0x800f0954")

    def test_not_windows(self):
        with mock.patch("rsatkit.server.is_windows", return_value=False):
            self.assertEqual(server.list_capabilities()["status"], "error")


if __name__ == "__main__":
    unittest.main()
