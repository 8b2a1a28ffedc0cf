"""Mini README: Monthly close and restore of the deposit ledger.

Structure:
    * Snapshot - frozen copy of the ledger and roster for one period.
    * SnapshotManager - keeps the history and the current period pointer.

Closing a period stores a structural copy of the live ledger and roster and
then empties the ledger; the roster carries over into the new period.
Restoring copies a stored snapshot back, leaving the history untouched so
the same period can be restored again later.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from ..errors import NotFoundError
from ..ledger import ContributorSeries, DepositSeries, LedgerStore
from ..logging_utils import get_logger
from ..roster import Roster, RosterMember

LOGGER = get_logger(__name__)

PERIOD_FORMAT = "%Y-%m"


def period_id_for(moment: datetime) -> str:
    """Period identifier (``YYYY-MM``) containing ``moment``."""

    return moment.strftime(PERIOD_FORMAT)


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Ledger and roster state captured when a period was closed."""

    period_id: str
    aggregate: DepositSeries
    contributors: Dict[str, ContributorSeries]
    roster: Tuple[RosterMember, ...]
    closed_at: str

    def clone(self) -> "Snapshot":
        """Deep copy, so callers can never reach the stored history."""

        return Snapshot(
            period_id=self.period_id,
            aggregate=self.aggregate.clone(),
            contributors={name: series.clone() for name, series in self.contributors.items()},
            roster=tuple(member.clone() for member in self.roster),
            closed_at=self.closed_at,
        )


class SnapshotManager:
    """Close, restore and list accounting periods."""

    def __init__(
        self,
        ledger: LedgerStore,
        roster: Roster,
        *,
        clock: Callable[[], datetime] = datetime.now,
        current_period: Optional[str] = None,
    ) -> None:
        self._ledger = ledger
        self._roster = roster
        self._clock = clock
        self._history: List[Snapshot] = []
        self.current_period = current_period or period_id_for(clock())

    def close_period(self) -> str:
        """Snapshot the live state under the current period, reset, and return the new period id."""

        aggregate, contributors = self._ledger.export_state()
        now = self._clock()
        snapshot = Snapshot(
            period_id=self.current_period,
            aggregate=aggregate,
            contributors=contributors,
            roster=tuple(self._roster.clone_members()),
            closed_at=now.isoformat(),
        )
        self._history.append(snapshot)
        self._ledger.clear()
        previous = self.current_period
        self.current_period = period_id_for(now)
        LOGGER.info(
            "Period %s closed with %s deposits; current period is now %s",
            previous,
            len(aggregate.values),
            self.current_period,
        )
        return self.current_period

    def _find(self, period_id: str) -> Snapshot:
        for snapshot in self._history:
            if snapshot.period_id == period_id:
                return snapshot
        raise NotFoundError(f"Period {period_id} not found")

    def get_snapshot(self, period_id: str) -> Snapshot:
        """Copy of the first snapshot stored under ``period_id``."""

        return self._find(period_id).clone()

    def restore_period(self, period_id: str) -> Snapshot:
        """Load a stored snapshot back into the live ledger and roster."""

        snapshot = self._find(period_id)
        self._ledger.load_state(snapshot.aggregate, snapshot.contributors)
        self._roster.replace_members(snapshot.roster)
        self.current_period = snapshot.period_id
        LOGGER.info("Period %s restored", period_id)
        return snapshot.clone()

    def list_periods(self) -> List[str]:
        """Period ids in the order they were closed."""

        return [snapshot.period_id for snapshot in self._history]
