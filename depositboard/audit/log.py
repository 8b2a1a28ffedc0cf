"""Mini README: Append-only log of administrative actions.

Structure:
    * AuditEntry - one recorded action.
    * AuditLog - in-memory log that only the master account may clear.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from ..errors import PermissionDeniedError
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class AuditEntry:
    """One administrative action, timestamped in UTC."""

    timestamp: str
    actor: str
    action: str
    details: Dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        """Export the entry for the logs endpoint."""

        return {
            "timestamp": self.timestamp,
            "actor": self.actor,
            "action": self.action,
            "details": copy.deepcopy(self.details),
        }


class AuditLog:
    """Record who did what; entries are kept oldest first."""

    def __init__(
        self, master_account: str, *, clock: Callable[[], datetime] = _utc_now
    ) -> None:
        self._master_account = master_account
        self._clock = clock
        self._entries: List[AuditEntry] = []

    def record(
        self, actor: Optional[str], action: str, details: Optional[Dict[str, Any]] = None
    ) -> AuditEntry:
        """Append an entry; a missing actor is stored as ``unknown``."""

        entry = AuditEntry(
            timestamp=self._clock().isoformat(),
            actor=actor or "unknown",
            action=action,
            details=copy.deepcopy(details) if details else {},
        )
        self._entries.append(entry)
        LOGGER.debug("Audit %s by %s: %s", action, entry.actor, entry.details)
        return entry

    def list(self) -> List[AuditEntry]:
        """Entries oldest first."""

        return list(self._entries)

    def clear(self, actor: Optional[str]) -> None:
        """Empty the log; only the master account may do this."""

        if not actor or actor.lower() != self._master_account.lower():
            raise PermissionDeniedError(f"{actor or 'unknown'} may not clear the audit log")
        dropped = len(self._entries)
        self._entries = []
        self.record(actor, "clearLogs")
        LOGGER.info("Audit log cleared by %s (%s entries dropped)", actor, dropped)

    def __len__(self) -> int:
        return len(self._entries)
