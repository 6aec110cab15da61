"""
CLI entry point for the issue dashboard. Wires the pipeline: ingest -> normalize -> aggregate -> report
"""

import argparse
import logging
import os
import sys
import time
import webbrowser
from datetime import datetime, timezone

from aggregate.trend import ALL_DATES
from dashboard import DashboardContext, SnapshotShapeError
from dashboard.settings import load_settings
from ingest.github import GitHubIssueClient
from ingest.payload import IngestError, load_records_file
from report.renderer import render

EXPORT_FORMATS = ('html', 'md', 'csv', 'json')
EXT_MAP = {'html': 'html', 'htm': 'html', 'md': 'md', 'markdown': 'md', 'csv': 'csv', 'json': 'json', 'js': 'json'}


def _configure_logging(verbose: bool):
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _open_file_in_browser(path: str):
    """Open a file URL in the system default web browser."""
    webbrowser.open("file://" + os.path.abspath(path))


def _build_loader(args):
    """Return a zero-argument callable producing decoded rows from the configured source."""
    if args.input:
        return lambda: load_records_file(args.input)
    token = args.github_token or os.getenv('GITHUB_TOKEN')
    client = GitHubIssueClient(args.owner, args.repo, args.issue, token=token)
    return client.fetch_records


def _default_out_base() -> str:
    return f"issue_dashboard_{datetime.now(timezone.utc).strftime('%Y%m%dT%H%M%SZ')}"


def _default_out_path(ext: str) -> str:
    return f"{_default_out_base()}.{ext}"


def _write_report_file(path_base: str, ext: str, content: str, open_html: bool = False) -> str:
    """Write rendered content to path_base (adding .ext when missing) and optionally open HTML in the browser."""
    out_path = path_base if path_base.lower().endswith(f".{ext}") else f"{path_base}.{ext}"
    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    # newline='' keeps csv line endings intact on Windows
    with open(out_path, 'w', encoding='utf-8', newline='') as fh:
        fh.write(content)
    print(f"Wrote report to {out_path}")
    if open_html:
        try:
            _open_file_in_browser(out_path)
        except webbrowser.Error:
            print('Failed to open browser automatically; file saved at', out_path)
    return out_path


def write_output(fmt: str, rendered: str, args):
    """Write output to file or stdout and optionally open HTML in browser."""
    ext = EXT_MAP.get(fmt)
    if ext is None or (not args.out_file and fmt in ('json', 'js')):
        print(rendered)
        return
    out_path = args.out_file.strip() or _default_out_path(ext)
    _write_report_file(out_path, ext, rendered, open_html=(args.open and ext == 'html'))


def _selected_day(args):
    """The --date value as a day key, or None when no filter applies."""
    day = (args.date or '').strip()
    return None if not day or day == ALL_DATES else day


def render_outputs(context: DashboardContext, args):
    """Render the current snapshot in the requested format(s)."""
    snapshot = context.snapshot
    day = _selected_day(args)
    developer_matrix = context.developer_matrix_for_day(day) if day else None
    generated_at = datetime.now(timezone.utc).isoformat()

    if args.export_all:
        base = args.out_file.strip() or _default_out_base()
        for ffmt in EXPORT_FORMATS:
            content = render(snapshot, fmt=ffmt, developer_matrix=developer_matrix, generated_at=generated_at, selected_day=day)
            _write_report_file(base, ffmt, content, open_html=(ffmt == 'html' and args.open))
        return

    fmt = (args.output or 'html').lower()
    rendered = render(snapshot, fmt=fmt, developer_matrix=developer_matrix, generated_at=generated_at, selected_day=day)
    write_output(fmt, rendered, args)


def run_once(context: DashboardContext, loader, args) -> bool:
    """Refresh the snapshot and render it. Returns False when the refresh failed."""
    try:
        snapshot = context.refresh(loader)
    except (IngestError, SnapshotShapeError) as ex:
        print(f"Error loading data: {ex}", file=sys.stderr)
        return False
    if snapshot is None:
        return True
    day = _selected_day(args)
    if day and day not in snapshot.date_options:
        print(f"Warning: no active issues found on {day}", file=sys.stderr)
    render_outputs(context, args)
    return True


def watch(context: DashboardContext, loader, args, interval: float):
    """Refresh on a fixed interval until interrupted or max_refreshes is reached."""
    done = 0
    try:
        while True:
            ok = run_once(context, loader, args)
            stamp = datetime.now().strftime('%H:%M:%S')
            print(f"{'Refreshed' if ok else 'Refresh failed'}: {stamp}")
            done += 1
            if args.max_refreshes and done >= args.max_refreshes:
                return
            time.sleep(interval)
    except KeyboardInterrupt:
        print("Stopped.")


def _validate_source(args, parser):
    if args.input:
        return
    missing = [flag for flag, val in (('--owner', args.owner), ('--repo', args.repo), ('--issue', args.issue)) if not val]
    if missing:
        parser.error('Provide --input FILE or all of: ' + ', '.join(missing))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Issue Dashboard CLI")
    parser.add_argument("--input", type=str, default="", help="Path to a JSON export of issue rows")
    parser.add_argument("--owner", type=str, default="", help="GitHub repository owner holding the issue export")
    parser.add_argument("--repo", type=str, default="", help="GitHub repository name")
    parser.add_argument("--issue", type=int, default=None, help="GitHub issue number whose body holds the JSON rows")
    parser.add_argument("--github_token", type=str, help="GitHub token (or set GITHUB_TOKEN env var)")
    parser.add_argument("--output", type=str, help="Output format (html, md, csv, json, text)", default="html")
    parser.add_argument("--out-file", type=str, default="", help="Output file path. If omitted a default name will be used")
    parser.add_argument("--open", action="store_true", help="Open the generated HTML report in the default browser")
    parser.add_argument("--export-all", action="store_true", help="Export HTML, MD, CSV and JSON copies")
    parser.add_argument("--date", type=str, default="", help="Restrict the developer matrix to issues found on this day (YYYY-MM-DD)")
    parser.add_argument("--watch", action="store_true", help="Keep refreshing on the configured interval")
    parser.add_argument("--interval", type=float, default=None, help="Refresh interval in seconds (overrides config and DASHBOARD_REFRESH_INTERVAL)")
    parser.add_argument("--max-refreshes", type=int, default=0, help="Stop watching after this many refreshes (0 = unbounded)")
    parser.add_argument("--config", type=str, default="", help="Path to dashboard.yaml")
    parser.add_argument("--verbose", action="store_true", help="Log refresh activity")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    _validate_source(args, parser)

    settings = load_settings(args.config or None)
    context = DashboardContext(aliases=settings.field_aliases)
    loader = _build_loader(args)

    if args.watch:
        interval = args.interval if args.interval and args.interval > 0 else settings.refresh_interval
        watch(context, loader, args, interval)
        return 0
    return 0 if run_once(context, loader, args) else 1


if __name__ == "__main__":
    sys.exit(main())
