"""Mini README: Deposit ledger package.

Holds the aggregate deposit timeline and the per-contributor timelines that
feed the dashboard charts, together with the naming helpers that turn
contributor names into route identifiers.
"""

from .naming import contributor_id, login_alias, normalise_login, roster_id
from .store import (
    ContributorSeries,
    ContributorSummary,
    DepositEntry,
    DepositSeries,
    LedgerStore,
    coerce_amount,
)

__all__ = [
    "ContributorSeries",
    "ContributorSummary",
    "DepositEntry",
    "DepositSeries",
    "LedgerStore",
    "coerce_amount",
    "contributor_id",
    "login_alias",
    "normalise_login",
    "roster_id",
]
