"""
Dashboard package: build snapshots of normalized issues and hold the current one.
"""

from .snapshot import DashboardSnapshot, SnapshotShapeError, build_snapshot, snapshot_to_dict
from .context import DashboardContext

__all__ = ["DashboardSnapshot", "SnapshotShapeError", "build_snapshot", "snapshot_to_dict", "DashboardContext"]
