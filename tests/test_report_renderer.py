import json
import unittest

from dashboard.snapshot import build_snapshot
from report.renderer import render, render_csv, render_html, render_markdown, render_text


ROWS = [
    {"Bug Type": "UI", "Severity": "P0", "State": "Assigned", "Assigned To": "Ann", "Bug Found Date": "2024-03-05"},
    {"Bug Type": "API", "Severity": "Blocker", "State": "Reopen", "Assigned To": "Bo", "Bug Found Date": "06-03-2024"},
    {"Bug Type": "UI", "Severity": "P2", "State": "Fixed", "Assigned To": "Ann", "Bug Found Date": "2024-03-01"},
]


class TestRenderer(unittest.TestCase):
    def setUp(self):
        self.snap = build_snapshot(ROWS)

    def test_text(self):
        text = render_text(self.snap)
        self.assertIn('Total issues: 3', text)
        self.assertIn('Critical: 1', text)
        self.assertIn('Resolved: 1', text)

    def test_markdown_and_csv(self):
        md = render_markdown(self.snap)
        self.assertIn('# Issue Dashboard', md)
        self.assertIn('| State | Blocker | Critical | Major | Normal | Minor | Total |', md)
        self.assertIn('| Assigned | 0 | 1 | 0 | 0 | 0 | 1 |', md)
        self.assertIn('- 05-Mar: 1', md)
        csv = render_csv(self.snap)
        lines = csv.splitlines()
        self.assertEqual(lines[0], 'matrix,row,severity,count')
        self.assertIn('state,Reopen,Blocker,1', lines)
        self.assertIn('assignee,Ann,Critical,1', lines)

    def test_render_html(self):
        html = render_html(self.snap, generated_at='now')
        self.assertIsInstance(html, str)
        self.assertIn('Issue Dashboard', html)
        self.assertIn('Developer Workload', html)

    def test_render_json(self):
        data = json.loads(render(self.snap, fmt='json'))
        self.assertEqual(data['total_issues'], 3)
        self.assertEqual(data['state_matrix']['grand_total'], 2)

    def test_render_helper(self):
        for fmt in ('text', 'md', 'csv', 'html', 'json'):
            self.assertIsInstance(render(self.snap, fmt=fmt), str)

    def test_render_without_snapshot(self):
        self.assertIn('No data available.', render(None, fmt='html'))
        self.assertEqual(render(None, fmt='md'), '')
        self.assertEqual(render(None, fmt='text'), '')

    def test_developer_matrix_override(self):
        from aggregate.pivot import build_developer_matrix
        only_bo = build_developer_matrix([i for i in self.snap.dev_workload_issues if i.assignee == 'Bo'])
        csv = render_csv(self.snap, developer_matrix=only_bo)
        self.assertNotIn('assignee,Ann', csv)
        self.assertIn('assignee,Bo,Blocker,1', csv)


if __name__ == '__main__':
    unittest.main()
