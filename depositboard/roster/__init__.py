"""Mini README: Team roster package.

Exposes the ``Roster`` manager and the ``RosterMember`` record rendered as
team cards on the dashboard and included in every live update.
"""

from .manager import Roster, RosterMember

__all__ = ["Roster", "RosterMember"]
