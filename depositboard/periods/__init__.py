"""Mini README: Accounting period package.

Exposes the snapshot manager used to close a month, reset the live ledger
and bring earlier months back for review.
"""

from .snapshots import Snapshot, SnapshotManager, period_id_for

__all__ = ["Snapshot", "SnapshotManager", "period_id_for"]
