"""Mini README: Team roster shown beside the deposit charts.

Structure:
    * RosterMember - id, display name and description of a team member.
    * Roster - ordered member list with create/update/delete helpers.

Identifiers are derived from the name on creation and stay fixed afterwards,
so renaming a member keeps existing links valid. When no members are given
the roster starts with the three default team members.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ..errors import DuplicateKeyError, NotFoundError
from ..ledger.naming import roster_id
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class RosterMember:
    """A team member card."""

    id: str
    name: str
    description: str = ""

    def clone(self) -> "RosterMember":
        return RosterMember(id=self.id, name=self.name, description=self.description)

    def as_dict(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name, "description": self.description}


class Roster:
    """Manage the ordered list of team members."""

    def __init__(self, members: Optional[Iterable[RosterMember]] = None) -> None:
        if members is None:
            members = self._build_default_members()
        self._members: List[RosterMember] = []
        for member in members:
            self._register(member.clone())
        LOGGER.debug("Roster initialised with %s members", len(self._members))

    @staticmethod
    def _build_default_members() -> List[RosterMember]:
        """Members shown before any roster edits are made."""

        return [
            RosterMember(
                id="esther",
                name="Esther",
                description="Líder principal responsável pelas decisões estratégicas e comunicação oficial.",
            ),
            RosterMember(
                id="evelyn",
                name="Evelyn",
                description="Gestora financeira, cuida da organização e do controle de valores.",
            ),
            RosterMember(
                id="lia",
                name="Lia",
                description="Assistente analítica responsável por análises, gráficos e resumos.",
            ),
        ]

    def _register(self, member: RosterMember) -> None:
        if any(existing.id == member.id for existing in self._members):
            raise DuplicateKeyError(f"Member {member.id} already exists")
        self._members.append(member)

    def _index_of(self, member_id: str) -> int:
        for index, member in enumerate(self._members):
            if member.id == member_id:
                return index
        raise NotFoundError(f"Member {member_id} not found")

    def list_members(self) -> List[RosterMember]:
        """Copies of the members in roster order."""

        return [member.clone() for member in self._members]

    def get_member(self, member_id: str) -> RosterMember:
        """Retrieve a member, raising ``NotFoundError`` when unknown."""

        return self._members[self._index_of(member_id)].clone()

    def create_member(self, name: str, description: str = "") -> RosterMember:
        """Add a member whose id is derived from ``name``."""

        if not name or not name.strip():
            raise ValueError("Member name is required")
        member = RosterMember(id=roster_id(name), name=name, description=description or "")
        self._register(member)
        LOGGER.info("Roster member %s created", member.id)
        return member.clone()

    def update_member(
        self,
        member_id: str,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> RosterMember:
        """Change the name and/or description; the id is left untouched."""

        member = self._members[self._index_of(member_id)]
        if name:
            member.name = name
        if description is not None:
            member.description = description
        LOGGER.info("Roster member %s updated", member_id)
        return member.clone()

    def delete_member(self, member_id: str) -> RosterMember:
        """Remove a member and return it."""

        removed = self._members.pop(self._index_of(member_id))
        LOGGER.info("Roster member %s removed", member_id)
        return removed

    def clone_members(self) -> List[RosterMember]:
        return self.list_members()

    def replace_members(self, members: Iterable[RosterMember]) -> None:
        """Swap the whole roster, used when a past period is restored."""

        self._members = []
        for member in members:
            self._register(member.clone())

    def as_payload(self) -> List[Dict[str, str]]:
        """Roster section of the live-update message."""

        return [member.as_dict() for member in self._members]
