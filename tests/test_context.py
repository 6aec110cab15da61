import unittest

from dashboard.context import DashboardContext
from dashboard.snapshot import SnapshotShapeError


ROWS = [
    {"State": "Assigned", "Severity": "P0", "Assigned To": "Ann", "Bug Found Date": "2024-03-05"},
    {"State": "In Progress", "Severity": "P1", "Assigned To": "Bo", "Bug Found Date": "2024-03-06"},
    {"State": "Reopen", "Severity": "Blocker", "Assigned To": "Ann", "Bug Found Date": "2024-03-06"},
    {"State": "Fixed", "Severity": "P2", "Assigned To": "Cy", "Bug Found Date": "2024-03-06"},
]


class TestDashboardContext(unittest.TestCase):
    def test_starts_empty(self):
        ctx = DashboardContext()
        self.assertIsNone(ctx.snapshot)
        self.assertEqual(ctx.refresh_count, 0)

    def test_refresh_replaces_snapshot(self):
        ctx = DashboardContext()
        first = ctx.refresh(lambda: ROWS[:1])
        self.assertIs(ctx.snapshot, first)
        second = ctx.refresh(lambda: ROWS)
        self.assertIs(ctx.snapshot, second)
        self.assertEqual(second.total_issues, 4)
        self.assertEqual(ctx.refresh_count, 2)

    def test_failed_refresh_keeps_previous_snapshot(self):
        ctx = DashboardContext()
        good = ctx.refresh(lambda: ROWS)
        with self.assertRaises(SnapshotShapeError):
            ctx.refresh(lambda: {"not": "a list"})
        self.assertIs(ctx.snapshot, good)

        def broken():
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            ctx.refresh(broken)
        self.assertIs(ctx.snapshot, good)
        self.assertEqual(ctx.refresh_count, 1)

    def test_shape_failure_on_first_load_leaves_no_snapshot(self):
        ctx = DashboardContext()
        with self.assertRaises(SnapshotShapeError):
            ctx.load("[]")
        self.assertIsNone(ctx.snapshot)

    def test_overlapping_refresh_is_skipped(self):
        ctx = DashboardContext()
        inner = []

        def loader():
            # a second refresh requested while this one is running
            inner.append(ctx.refresh(lambda: ROWS[:1]))
            return ROWS

        snap = ctx.refresh(loader)
        self.assertEqual(inner, [None])
        self.assertEqual(snap.total_issues, 4)
        self.assertEqual(ctx.refresh_count, 1)

    def test_lock_released_after_failure(self):
        ctx = DashboardContext()
        with self.assertRaises(SnapshotShapeError):
            ctx.refresh(lambda: None)
        self.assertIsNotNone(ctx.refresh(lambda: ROWS))

    def test_developer_matrix_for_day(self):
        ctx = DashboardContext()
        ctx.load(ROWS)
        all_days = ctx.developer_matrix_for_day('all')
        self.assertEqual(all_days.row_totals, {'Ann': 2, 'Bo': 1})
        day = ctx.developer_matrix_for_day('2024-03-06')
        self.assertEqual(day.row_totals, {'Ann': 1, 'Bo': 1})
        self.assertEqual(ctx.developer_matrix_for_day('2020-01-01').grand_total, 0)
        self.assertEqual(ctx.developer_matrix_for_day(None), ctx.snapshot.developer_matrix)

    def test_developer_matrix_requires_snapshot(self):
        with self.assertRaises(RuntimeError):
            DashboardContext().developer_matrix_for_day('all')

    def test_aliases_are_applied(self):
        aliases = {
            'type': ['Kind'], 'severity': ['Sev'], 'state': ['Stage'], 'assignee': ['Owner'],
            'module': ['Area'], 'found_date': ['Opened'], 'fixed_date': ['Closed'],
        }
        ctx = DashboardContext(aliases=aliases)
        snap = ctx.load([{"Stage": "Assigned", "Sev": "P0", "Owner": "Dee", "Kind": "UI"}])
        self.assertEqual(snap.issues[0].assignee, 'Dee')
        self.assertEqual(snap.developer_matrix.rows, ['Dee'])


if __name__ == '__main__':
    unittest.main()
