"""Mini README: In-memory deposit ledger backing the live dashboard.

Structure:
    * DepositEntry - single contributor deposit with a back-reference into
      the aggregate timeline.
    * DepositSeries - index-aligned labels/values pair used by the charts.
    * ContributorSeries - a DepositSeries that also tracks its entries.
    * ContributorSummary - row returned by the participants listing.
    * LedgerStore - owns the aggregate series and every contributor series.

The store never hands out its lists for mutation: all changes go through the
methods below so that label/value alignment and the entry cross-references
stay consistent. Cloning is explicit and structural, which is what the
period snapshots rely on.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from ..errors import DuplicateKeyError, InvalidAmountError, NotFoundError
from ..logging_utils import get_logger
from .naming import contributor_id

LOGGER = get_logger(__name__)


def coerce_amount(value: object) -> float:
    """Convert a deposit value to a finite float or raise ``InvalidAmountError``."""

    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid deposit amount: {value!r}")
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as error:
        raise InvalidAmountError(f"Invalid deposit amount: {value!r}") from error
    if not math.isfinite(amount):
        raise InvalidAmountError(f"Deposit amount must be finite, got {value!r}")
    return amount


@dataclass(slots=True)
class DepositEntry:
    """A contributor deposit and its position in the aggregate series."""

    time: str
    value: float
    aggregate_index: int


@dataclass(slots=True)
class DepositSeries:
    """Chronological timestamp labels with their deposit values."""

    labels: List[str] = field(default_factory=list)
    values: List[float] = field(default_factory=list)

    def append(self, label: str, value: float) -> int:
        """Add one deposit and return its index."""

        self.labels.append(label)
        self.values.append(value)
        return len(self.values) - 1

    def total(self) -> float:
        """Sum of every deposit value in the series."""

        return sum(self.values)

    def clone(self) -> "DepositSeries":
        """Return an independent copy of the labels and values."""

        return DepositSeries(labels=list(self.labels), values=list(self.values))

    def as_dict(self) -> Dict[str, object]:
        """Export the chart arrays with serialisable values."""

        return {"labels": list(self.labels), "values": list(self.values)}


@dataclass(slots=True)
class ContributorSeries(DepositSeries):
    """Deposit series for one contributor, keeping per-entry metadata."""

    entries: List[DepositEntry] = field(default_factory=list)

    def clone(self) -> "ContributorSeries":
        """Copy the series together with fresh entry records."""

        return ContributorSeries(
            labels=list(self.labels),
            values=list(self.values),
            entries=[
                DepositEntry(entry.time, entry.value, entry.aggregate_index)
                for entry in self.entries
            ],
        )


@dataclass(slots=True)
class ContributorSummary:
    """Listing row for a contributor, totals computed at call time."""

    id: str
    name: str
    deposit_count: int
    total: float

    def as_dict(self) -> Dict[str, object]:
        """Export the row for JSON responses."""

        return {
            "id": self.id,
            "name": self.name,
            "deposit_count": self.deposit_count,
            "total": self.total,
        }


class LedgerStore:
    """Aggregate deposit timeline plus one timeline per contributor."""

    def __init__(self) -> None:
        self._aggregate = DepositSeries()
        self._contributors: Dict[str, ContributorSeries] = {}

    @property
    def aggregate(self) -> DepositSeries:
        """Read-only view (a clone) of the aggregate series."""

        return self._aggregate.clone()

    def contributor(self, name: str) -> ContributorSeries:
        """Return a clone of a contributor series, raising when unknown."""

        return self._get(name).clone()

    def contributor_names(self) -> List[str]:
        """Contributor names in insertion order."""

        return list(self._contributors)

    def _get(self, name: str) -> ContributorSeries:
        if name not in self._contributors:
            raise NotFoundError(f"Contributor {name} not found")
        return self._contributors[name]

    def find_contributor(self, identifier: str) -> str:
        """Resolve a route identifier back to the contributor name."""

        for name in self._contributors:
            if contributor_id(name) == identifier:
                return name
        raise NotFoundError(f"Contributor {identifier} not found")

    def append_deposit(
        self, amount: object, timestamp: str, contributor: Optional[str] = None
    ) -> int:
        """Record a deposit and return its index in the aggregate series."""

        value = coerce_amount(amount)
        aggregate_index = self._aggregate.append(timestamp, value)
        if contributor:
            series = self._contributors.setdefault(contributor, ContributorSeries())
            series.append(timestamp, value)
            series.entries.append(DepositEntry(timestamp, value, aggregate_index))
        LOGGER.info(
            "Deposit %.2f recorded at %s for %s (aggregate index %s)",
            value,
            timestamp,
            contributor or "total",
            aggregate_index,
        )
        return aggregate_index

    def edit_entry_time(self, contributor: str, index: int, new_timestamp: str) -> str:
        """Relabel one deposit in both timelines and return the old label."""

        series = self._get(contributor)
        if index < 0 or index >= len(series.entries):
            raise NotFoundError(f"Entry {index} not found for contributor {contributor}")
        entry = series.entries[index]
        previous = entry.time
        entry.time = new_timestamp
        series.labels[index] = new_timestamp
        if 0 <= entry.aggregate_index < len(self._aggregate.labels):
            self._aggregate.labels[entry.aggregate_index] = new_timestamp
        LOGGER.info(
            "Entry %s of %s moved from %s to %s", index, contributor, previous, new_timestamp
        )
        return previous

    def rename_contributor(self, old_name: str, new_name: str) -> None:
        """Move a contributor series under a new name, entries included."""

        series = self._get(old_name)
        if new_name == old_name:
            return
        new_id = contributor_id(new_name)
        for name in self._contributors:
            if name != old_name and contributor_id(name) == new_id:
                raise DuplicateKeyError(
                    f"Contributor {new_name} collides with {name} (id {new_id})"
                )
        del self._contributors[old_name]
        self._contributors[new_name] = series
        LOGGER.info("Contributor %s renamed to %s", old_name, new_name)

    def delete_contributor(self, name: str) -> ContributorSeries:
        """Drop a contributor series; the aggregate keeps its deposits."""

        series = self._get(name)
        del self._contributors[name]
        LOGGER.info("Contributor %s removed with %s deposits", name, len(series.values))
        return series

    def list_contributors(self) -> List[ContributorSummary]:
        """Summarise each contributor with a freshly computed total."""

        return [
            ContributorSummary(
                id=contributor_id(name),
                name=name,
                deposit_count=len(series.values),
                total=series.total(),
            )
            for name, series in self._contributors.items()
        ]

    def list_entries(self, contributor: str) -> List[Dict[str, object]]:
        """Return a contributor's deposits with the index used for edits."""

        series = self._get(contributor)
        return [
            {"index": index, "time": entry.time, "value": entry.value}
            for index, entry in enumerate(series.entries)
        ]

    def export_state(self) -> Tuple[DepositSeries, Dict[str, ContributorSeries]]:
        """Return deep copies of the aggregate and contributor series."""

        return (
            self._aggregate.clone(),
            {name: series.clone() for name, series in self._contributors.items()},
        )

    def load_state(
        self, aggregate: DepositSeries, contributors: Mapping[str, ContributorSeries]
    ) -> None:
        """Replace the live state with copies of the given series."""

        self._aggregate = aggregate.clone()
        self._contributors = {name: series.clone() for name, series in contributors.items()}
        LOGGER.debug(
            "Ledger loaded with %s deposits across %s contributors",
            len(self._aggregate.values),
            len(self._contributors),
        )

    def clear(self) -> None:
        """Drop every deposit, aggregate and contributors alike."""

        self._aggregate = DepositSeries()
        self._contributors = {}

    def as_payload(self) -> Dict[str, object]:
        """Chart-ready view of the ledger used by live updates."""

        return {
            "aggregateLabels": list(self._aggregate.labels),
            "aggregateValues": list(self._aggregate.values),
            "contributors": {
                name: series.as_dict() for name, series in self._contributors.items()
            },
        }
