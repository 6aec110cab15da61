"""
Report renderer: turn a DashboardSnapshot into HTML/Markdown/CSV/JSON/text.
Uses the Jinja2 templates in report/templates when Jinja2 is available and falls back to plain HTML otherwise.
"""

from typing import Optional, List
from html import escape
from dashboard.snapshot import DashboardSnapshot, snapshot_to_dict
from aggregate.models import PivotMatrix
from normalize.dates import format_day_label
from normalize.severity import SEVERITY_ORDER
import os
import importlib.util
import json
import io
import csv

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), 'templates')

MATRIX_TITLES = (
    ('state_matrix', 'State', 'Active Issues by State'),
    ('bug_type_matrix', 'Bug Type', 'Active Issues by Bug Type'),
    ('developer_matrix', 'Developer', 'Developer Workload'),
)


def _matrices(snapshot: DashboardSnapshot, developer_matrix: Optional[PivotMatrix] = None) -> List[dict]:
    """Return (title, header, matrix) entries in display order; developer_matrix overrides the snapshot's."""
    out = []
    for attr, header, title in MATRIX_TITLES:
        matrix = getattr(snapshot, attr)
        if attr == 'developer_matrix' and developer_matrix is not None:
            matrix = developer_matrix
        out.append({'title': title, 'header': header, 'matrix': matrix})
    return out


def render_text(snapshot: DashboardSnapshot) -> str:
    """Plain-text tiles and resolution summary."""
    lines = [f"Total issues: {snapshot.total_issues}"]
    lines.extend(f"{s.value}: {snapshot.tiles[s]}" for s in SEVERITY_ORDER)
    lines.append(f"Resolved: {snapshot.resolution.fixed_count}")
    return "\n".join(lines)


def _markdown_matrix(header: str, matrix: PivotMatrix) -> List[str]:
    cols = [s.value for s in SEVERITY_ORDER]
    md = [f"| {header} | " + " | ".join(cols) + " | Total |", "|" + "---|" * (len(cols) + 2)]
    for r in matrix.rows:
        counts = " | ".join(str(matrix.cells[r][s]) for s in SEVERITY_ORDER)
        md.append(f"| {r} | {counts} | {matrix.row_totals[r]} |")
    totals = " | ".join(str(matrix.col_totals[s]) for s in SEVERITY_ORDER)
    md.append(f"| **Total** | {totals} | **{matrix.grand_total}** |")
    return md


def render_markdown(snapshot: DashboardSnapshot, developer_matrix: Optional[PivotMatrix] = None) -> str:
    """Render the dashboard as Markdown without templates."""
    md = ["# Issue Dashboard\n"]
    md.extend(f"- {s.value}: **{snapshot.tiles[s]}**" for s in SEVERITY_ORDER)
    for entry in _matrices(snapshot, developer_matrix):
        md.append(f"\n## {entry['title']}\n")
        md.extend(_markdown_matrix(entry['header'], entry['matrix']))
    md.append("\n## Active Issues Trend (Found)\n")
    if snapshot.trend:
        md.extend(f"- {format_day_label(p.day, with_year=False)}: {p.count}" for p in snapshot.trend)
    else:
        md.append("_No Data_")
    md.append("\n## Resolution\n")
    md.append(f"- Resolved: **{snapshot.resolution.fixed_count}**")
    md.extend(f"- {s.value}: {snapshot.resolution.by_severity[s]}" for s in SEVERITY_ORDER)
    return "\n".join(md)


def render_csv(snapshot: DashboardSnapshot, developer_matrix: Optional[PivotMatrix] = None) -> str:
    """Long-form CSV of every matrix cell: matrix,row,severity,count."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(['matrix', 'row', 'severity', 'count'])
    for entry in _matrices(snapshot, developer_matrix):
        matrix = entry['matrix']
        for r in matrix.rows:
            for s in SEVERITY_ORDER:
                writer.writerow([matrix.dimension, r, s.value, matrix.cells[r][s]])
    return output.getvalue()


def render_json(snapshot: DashboardSnapshot, developer_matrix: Optional[PivotMatrix] = None) -> str:
    data = snapshot_to_dict(snapshot)
    if developer_matrix is not None:
        data['developer_matrix'] = developer_matrix.to_dict()
    return json.dumps(data, indent=2, default=str)


def _append_matrix_html(html_list: List[str], header: str, matrix: PivotMatrix):
    """Module-level helper to append one matrix as an HTML table."""
    html_list.append("<table>")
    html_list.append("<tr><th>" + escape(header) + "</th>" + "".join(f"<th>{s.value}</th>" for s in SEVERITY_ORDER) + "<th>Total</th></tr>")
    for r in matrix.rows:
        cells = "".join(f"<td>{matrix.cells[r][s]}</td>" for s in SEVERITY_ORDER)
        html_list.append(f"<tr><td>{escape(str(r))}</td>{cells}<td>{matrix.row_totals[r]}</td></tr>")
    totals = "".join(f"<td>{matrix.col_totals[s]}</td>" for s in SEVERITY_ORDER)
    html_list.append(f"<tr><td>Total</td>{totals}<td>{matrix.grand_total}</td></tr>")
    html_list.append("</table>")


def render_html_fallback(snapshot: Optional[DashboardSnapshot], developer_matrix: Optional[PivotMatrix] = None, generated_at: Optional[str] = None) -> str:
    """Simple HTML renderer used when Jinja2 is unavailable."""
    html = ["<html><body>", "<h1>Issue Dashboard</h1>"]
    if snapshot is None:
        html.append("<p>No data available.</p>")
        html.append("</body></html>")
        return "\n".join(html)

    if generated_at:
        html.append(f"<p>Generated at {generated_at}</p>")
    html.append("<ul>")
    html.extend(f"<li>{s.value}: {snapshot.tiles[s]}</li>" for s in SEVERITY_ORDER)
    html.append("</ul>")
    for entry in _matrices(snapshot, developer_matrix):
        html.append(f"<h2>{entry['title']}</h2>")
        _append_matrix_html(html, entry['header'], entry['matrix'])
    html.append("<h2>Active Issues Trend (Found)</h2>")
    html.append("<ul>")
    html.extend(f"<li>{format_day_label(p.day, with_year=False)}: {p.count}</li>" for p in snapshot.trend)
    html.append("</ul>")
    html.append(f"<h2>Resolution</h2><p>Resolved: {snapshot.resolution.fixed_count}</p>")
    html.append("</body></html>")
    return "\n".join(html)


def _jinja_env():
    from jinja2 import Environment, FileSystemLoader, select_autoescape

    env = Environment(loader=FileSystemLoader(TEMPLATES_DIR), autoescape=select_autoescape(['html', 'xml', 'html.j2']))
    env.filters['day_label'] = format_day_label
    return env


def _template_context(snapshot: DashboardSnapshot, developer_matrix: Optional[PivotMatrix], generated_at: Optional[str], selected_day: Optional[str]) -> dict:
    return {
        'snapshot': snapshot,
        'severities': SEVERITY_ORDER,
        'matrices': _matrices(snapshot, developer_matrix),
        'generated_at': generated_at,
        'selected_day': selected_day,
    }


def _render_markdown_choice(snapshot: DashboardSnapshot, developer_matrix: Optional[PivotMatrix], generated_at: Optional[str], selected_day: Optional[str]) -> str:
    """Use the dashboard.md.j2 template when Jinja2 is available, otherwise plain Markdown."""
    if importlib.util.find_spec('jinja2') is not None:
        tmpl = _jinja_env().get_template('dashboard.md.j2')
        return tmpl.render(**_template_context(snapshot, developer_matrix, generated_at, selected_day))
    return render_markdown(snapshot, developer_matrix)


def _render_html_choice(snapshot: Optional[DashboardSnapshot], developer_matrix: Optional[PivotMatrix], generated_at: Optional[str], selected_day: Optional[str]) -> str:
    """Attempt Jinja2 rendering when available, otherwise fall back to the simple HTML renderer."""
    if snapshot is not None and importlib.util.find_spec('jinja2') is not None:
        tmpl = _jinja_env().get_template('dashboard.html.j2')
        return tmpl.render(**_template_context(snapshot, developer_matrix, generated_at, selected_day))
    return render_html_fallback(snapshot, developer_matrix, generated_at)


def render(
    snapshot: Optional[DashboardSnapshot],
    fmt: str = 'text',
    developer_matrix: Optional[PivotMatrix] = None,
    generated_at: Optional[str] = None,
    selected_day: Optional[str] = None,
) -> str:
    """Main render function.

    developer_matrix replaces the snapshot's developer matrix, e.g. after a
    date filter; selected_day is shown next to it.
    """
    fmt_l = (fmt or 'text').lower()
    if fmt_l in ('html', 'htm'):
        return _render_html_choice(snapshot, developer_matrix, generated_at, selected_day)
    if snapshot is None:
        return ''
    if fmt_l in ('md', 'markdown'):
        return _render_markdown_choice(snapshot, developer_matrix, generated_at, selected_day)
    if fmt_l == 'csv':
        return render_csv(snapshot, developer_matrix)
    if fmt_l in ('json', 'js'):
        return render_json(snapshot, developer_matrix)
    return render_text(snapshot)


def render_html(snapshot: Optional[DashboardSnapshot], developer_matrix: Optional[PivotMatrix] = None, generated_at: Optional[str] = None) -> str:
    """Convenience wrapper around render(fmt='html')."""
    return render(snapshot, fmt='html', developer_matrix=developer_matrix, generated_at=generated_at)
