"""Mini README: Single owning object for all board state.

Structure:
    * DepositReceipt - result of recording a deposit.
    * DashboardContext - holds the ledger, roster, periods, audit log,
      broadcast channel and credentials, and runs every admin operation.

The context is built once at start-up (``from_settings`` loads the stored
credentials) and handed to the web factory. Each mutation runs to completion
under one re-entrant lock: component call, audit entry, then a broadcast of
the new state to every connected dashboard.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from .accounts import Credential, CredentialStore
from .audit import AuditEntry, AuditLog
from .broadcast import BroadcastChannel, Sink
from .configuration import DepositBoardSettings
from .ledger import ContributorSummary, LedgerStore, coerce_amount
from .logging_utils import get_logger
from .periods import SnapshotManager
from .roster import Roster, RosterMember

LOGGER = get_logger(__name__)

LABEL_FORMAT = "%d/%m/%Y %H:%M:%S"


@dataclass(slots=True)
class DepositReceipt:
    aggregate_index: int
    label: str
    amount: float
    contributor: Optional[str]


class DashboardContext:
    """Coordinate the board components behind one mutation lock."""

    def __init__(
        self,
        credentials: CredentialStore,
        *,
        roster: Optional[Roster] = None,
        clock: Callable[[], datetime] = datetime.now,
        max_pending: int = 64,
    ) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self.credentials = credentials
        self.ledger = LedgerStore()
        self.roster = roster if roster is not None else Roster()
        self.periods = SnapshotManager(self.ledger, self.roster, clock=clock)
        self.audit = AuditLog(credentials.master_account)
        self.broadcast = BroadcastChannel(self.state_payload, max_pending=max_pending)

    @classmethod
    def from_settings(cls, settings: DepositBoardSettings) -> "DashboardContext":
        """Build the context and load the persisted credentials."""

        store = CredentialStore(
            settings.credentials_file,
            master_account=settings.master_account,
            master_password=settings.master_password,
        )
        store.load()
        LOGGER.info("Dashboard context ready (environment=%s)", settings.environment)
        return cls(store, max_pending=settings.sink_queue_size)

    def state_payload(self) -> Dict[str, Any]:
        """Full board state as sent to dashboards."""

        payload = self.ledger.as_payload()
        payload["roster"] = self.roster.as_payload()
        return payload

    def _now_label(self) -> str:
        return self._clock().strftime(LABEL_FORMAT)

    # Live updates -------------------------------------------------------

    def subscribe(self, sink: Optional[Sink] = None) -> Sink:
        with self._lock:
            return self.broadcast.subscribe(sink)

    def unsubscribe(self, sink: Sink) -> None:
        with self._lock:
            self.broadcast.unsubscribe(sink)

    # Ledger -------------------------------------------------------------

    def record_deposit(
        self,
        amount: object,
        *,
        contributor: Optional[str] = None,
        actor: Optional[str] = None,
    ) -> DepositReceipt:
        with self._lock:
            value = coerce_amount(amount)
            label = self._now_label()
            index = self.ledger.append_deposit(value, label, contributor)
            self.audit.record(
                actor, "deposit", {"user": contributor or "total", "value": value, "time": label}
            )
            self.broadcast.publish()
            return DepositReceipt(index, label, value, contributor or None)

    def edit_entry_time(
        self, contributor: str, index: int, new_time: str, *, actor: Optional[str] = None
    ) -> str:
        with self._lock:
            previous = self.ledger.edit_entry_time(contributor, index, new_time)
            self.audit.record(
                actor,
                "editEntryTime",
                {"user": contributor, "index": index, "oldTime": previous, "newTime": new_time},
            )
            self.broadcast.publish()
            return previous

    def rename_contributor(
        self, contributor_id: str, new_name: str, *, actor: Optional[str] = None
    ) -> str:
        """Rename the contributor behind a route id; returns the old name."""

        with self._lock:
            old_name = self.ledger.find_contributor(contributor_id)
            self.ledger.rename_contributor(old_name, new_name)
            self.audit.record(actor, "userRename", {"oldName": old_name, "newName": new_name})
            self.broadcast.publish()
            return old_name

    def delete_contributor(self, contributor_id: str, *, actor: Optional[str] = None) -> str:
        with self._lock:
            name = self.ledger.find_contributor(contributor_id)
            self.ledger.delete_contributor(name)
            self.audit.record(actor, "userDelete", {"id": contributor_id, "name": name})
            self.broadcast.publish()
            return name

    def list_contributors(self) -> List[ContributorSummary]:
        with self._lock:
            return self.ledger.list_contributors()

    def list_entries(self, contributor: str) -> List[Dict[str, object]]:
        with self._lock:
            return self.ledger.list_entries(contributor)

    # Periods ------------------------------------------------------------

    def close_period(self, *, actor: Optional[str] = None) -> Tuple[str, str]:
        """Close the running period; returns ``(previous, new)`` period ids."""

        with self._lock:
            previous = self.periods.current_period
            new_period = self.periods.close_period()
            self.audit.record(
                actor, "resetMonth", {"previousMonth": previous, "newMonth": new_period}
            )
            self.broadcast.publish()
            return previous, new_period

    def restore_period(self, period_id: str, *, actor: Optional[str] = None) -> None:
        with self._lock:
            self.periods.restore_period(period_id)
            self.audit.record(actor, "restoreMonth", {"month": period_id})
            self.broadcast.publish()

    def list_periods(self) -> List[str]:
        with self._lock:
            return self.periods.list_periods()

    # Roster -------------------------------------------------------------

    def list_members(self) -> List[RosterMember]:
        with self._lock:
            return self.roster.list_members()

    def create_member(
        self, name: str, description: str = "", *, actor: Optional[str] = None
    ) -> RosterMember:
        with self._lock:
            member = self.roster.create_member(name, description)
            self.audit.record(actor, "teamCreate", {"member": member.as_dict()})
            self.broadcast.publish()
            return member

    def update_member(
        self,
        member_id: str,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        actor: Optional[str] = None,
    ) -> RosterMember:
        with self._lock:
            member = self.roster.update_member(member_id, name=name, description=description)
            self.audit.record(
                actor, "teamUpdate", {"id": member_id, "name": name, "description": description}
            )
            self.broadcast.publish()
            return member

    def delete_member(self, member_id: str, *, actor: Optional[str] = None) -> RosterMember:
        with self._lock:
            removed = self.roster.delete_member(member_id)
            self.audit.record(actor, "teamDelete", {"id": removed.id, "name": removed.name})
            self.broadcast.publish()
            return removed

    # Accounts and audit -------------------------------------------------

    def register(self, name: Optional[str], password: Optional[str]) -> Credential:
        with self._lock:
            credential = self.credentials.register(name, password)
            self.audit.record(credential.name, "register")
            return credential

    def login(self, name: Optional[str], password: Optional[str]) -> Credential:
        with self._lock:
            credential = self.credentials.authenticate(name, password)
            self.audit.record(name, "login")
            return credential

    def change_master_password(self, actor: Optional[str], new_password: Optional[str]) -> None:
        with self._lock:
            self.credentials.change_master_password(actor, new_password)
            self.audit.record(actor, "changePassword", {"admin": actor})

    def audit_entries(self) -> List[AuditEntry]:
        with self._lock:
            return self.audit.list()

    def clear_audit(self, actor: Optional[str]) -> None:
        with self._lock:
            self.audit.clear(actor)
