"""
Owned holder for the current dashboard snapshot.

A refresh recomputes everything from a fresh batch of raw rows and swaps the
snapshot in one assignment. Refreshes are single-flight: a refresh requested
while another is running is skipped rather than queued.
"""
import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from aggregate.models import PivotMatrix
from aggregate.pivot import build_developer_matrix
from aggregate.trend import filter_by_found_day
from .snapshot import DashboardSnapshot, build_snapshot

logger = logging.getLogger(__name__)


class DashboardContext:
    def __init__(self, aliases: Optional[Dict[str, List[str]]] = None):
        self.aliases = aliases
        self._snapshot: Optional[DashboardSnapshot] = None
        self._refresh_lock = threading.Lock()
        self.refresh_count = 0

    @property
    def snapshot(self) -> Optional[DashboardSnapshot]:
        return self._snapshot

    def load(self, raw: Any) -> DashboardSnapshot:
        """Build a snapshot from already-decoded rows and make it current.

        On SnapshotShapeError the previous snapshot stays in place.
        """
        snapshot = build_snapshot(raw, self.aliases)
        self._snapshot = snapshot
        self.refresh_count += 1
        logger.info("Snapshot refreshed: %d issues", snapshot.total_issues)
        return snapshot

    def refresh(self, loader: Callable[[], Any]) -> Optional[DashboardSnapshot]:
        """Fetch rows with loader() and rebuild the snapshot.

        Returns None without calling loader when another refresh is in flight.
        Errors from loader or the shape check propagate; the current snapshot
        is left untouched in that case.
        """
        if not self._refresh_lock.acquire(blocking=False):
            logger.warning("Refresh already in progress; skipping overlapping request")
            return None
        try:
            return self.load(loader())
        finally:
            self._refresh_lock.release()

    def developer_matrix_for_day(self, key: Optional[str] = None) -> PivotMatrix:
        """Developer workload matrix restricted to issues found on key ('all'/None for no filter).

        Reuses the normalized issues of the current snapshot; raises
        RuntimeError when nothing has been loaded yet.
        """
        if self._snapshot is None:
            raise RuntimeError("No snapshot loaded")
        issues = filter_by_found_day(self._snapshot.dev_workload_issues, key)
        return build_developer_matrix(issues)
