import unittest
from rsatkit.errors import ResolutionError, ResolutionKind
from rsatkit.selection import SelectionResolver
from tests.helpers import record, snapshot


class TestSelectionResolver(unittest.TestCase):
    def setUp(self):
        self.resolver = SelectionResolver()
        self.snapshot = snapshot(record("Rsat.A"), record("Rsat.B"), record("Rsat.C"))

    def assertKind(self, token, kind, snap=None):
        with self.assertRaises(ResolutionError) as ctx:
            self.resolver.resolve(self.snapshot if snap is None else snap, token)
        self.assertIs(ctx.exception.kind, kind)
        return ctx.exception

    def test_valid_indexes_map_to_entries(self):
        for i in range(1, len(self.snapshot) + 1):
            self.assertIs(self.resolver.resolve(self.snapshot, str(i)), self.snapshot[i - 1])

    def test_surrounding_whitespace_is_ignored(self):
        self.assertIs(self.resolver.resolve(self.snapshot, " 2\n"), self.snapshot[1])

    def test_invalid_tokens(self):
        for token in ("0", "-1", str(len(self.snapshot) + 1), "abc", "", "1.5", "+1"):
            self.assertKind(token, ResolutionKind.INVALID_SELECTION)

    def test_error_message_carries_valid_range(self):
        error = self.assertKind("9", ResolutionKind.INVALID_SELECTION)
        self.assertIn("between 1 and 3", str(error))

    def test_cancel_token_is_case_insensitive(self):
        for token in ("c", "C", " c "):
            error = self.assertKind(token, ResolutionKind.CANCELLED)
            self.assertTrue(error.cancelled)

    def test_cancel_wins_on_empty_snapshot(self):
        self.assertKind("c", ResolutionKind.CANCELLED, snap=snapshot())

    def test_empty_snapshot_has_no_valid_selection(self):
        self.assertKind("1", ResolutionKind.INVALID_SELECTION, snap=snapshot())

    def test_custom_cancel_token(self):
        resolver = SelectionResolver(cancel_token="Quit")
        with self.assertRaises(ResolutionError) as ctx:
            resolver.resolve(self.snapshot, "quit")
        self.assertIs(ctx.exception.kind, ResolutionKind.CANCELLED)
        with self.assertRaises(ResolutionError) as ctx:
            resolver.resolve(self.snapshot, "c")
        self.assertIs(ctx.exception.kind, ResolutionKind.INVALID_SELECTION)


if __name__ == "__main__":
    unittest.main()
