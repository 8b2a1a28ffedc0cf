"""Mini README: Account credentials persisted as a JSON file.

Structure:
    * Credential - stored account name, password and master flag.
    * CredentialStore - load/save, registration, login and the master
      password change.

The file holds a plain JSON list so it can be edited by hand. A missing or
unreadable file falls back to a single master account taken from the
settings. Write failures are logged and the in-memory accounts keep working.

Name matching ignores whitespace and case. Login also accepts the names with
every ``h`` removed, which is how ``Ester`` resolves to ``Esther``; no other
fuzzy matching is attempted.
"""

from __future__ import annotations

import hmac
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import (
    AuthenticationError,
    DuplicateKeyError,
    NotFoundError,
    PermissionDeniedError,
)
from ..ledger.naming import login_alias, normalise_login
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class Credential:
    """A registered account."""

    name: str
    password: str
    is_master: bool = False

    @classmethod
    def from_dict(cls, payload: Dict[str, object]) -> "Credential":
        name = payload.get("name")
        password = payload.get("password")
        if not isinstance(name, str) or not isinstance(password, str):
            raise ValueError("Credential entries need string name and password fields")
        return cls(name=name, password=password, is_master=bool(payload.get("isMaster", False)))

    def as_dict(self) -> Dict[str, object]:
        return {"name": self.name, "password": self.password, "isMaster": self.is_master}

    def public_view(self) -> Dict[str, object]:
        return {"name": self.name, "isMaster": self.is_master}


class CredentialStore:
    """Manage accounts backed by a JSON file."""

    def __init__(self, path: Path, *, master_account: str, master_password: str) -> None:
        self._path = Path(path)
        self._master_account = master_account
        self._master_password = master_password
        self._credentials: List[Credential] = []

    @property
    def path(self) -> Path:
        return self._path

    @property
    def master_account(self) -> str:
        return self._master_account

    def list_credentials(self) -> List[Credential]:
        return list(self._credentials)

    def load(self) -> None:
        """Read credentials from disk, seeding the master account when needed."""

        try:
            if self._path.exists():
                parsed = json.loads(self._path.read_text(encoding="utf-8"))
                if isinstance(parsed, list):
                    self._credentials = [Credential.from_dict(item) for item in parsed]
                    LOGGER.info(
                        "Loaded %s credentials from %s", len(self._credentials), self._path
                    )
                    return
                LOGGER.warning("Credentials file %s is not a list; resetting", self._path)
        except (OSError, ValueError, AttributeError) as exc:
            LOGGER.exception("Failed to load credentials from %s: %s", self._path, exc)
        self._credentials = [
            Credential(name=self._master_account, password=self._master_password, is_master=True)
        ]
        self.save()

    def save(self) -> None:
        """Write credentials to disk; failures are logged, not raised."""

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps([credential.as_dict() for credential in self._credentials], indent=2),
                encoding="utf-8",
            )
        except OSError as exc:
            LOGGER.exception("Failed to save credentials to %s: %s", self._path, exc)

    def _find_exact(self, name: str) -> Optional[Credential]:
        key = normalise_login(name)
        for credential in self._credentials:
            if normalise_login(credential.name) == key:
                return credential
        return None

    def register(self, name: Optional[str], password: Optional[str]) -> Credential:
        """Create a regular account; names are unique ignoring case and spaces."""

        if not name or not password:
            raise ValueError("Name and password are required")
        if self._find_exact(name) is not None:
            raise DuplicateKeyError(f"Account {name} already exists")
        credential = Credential(name=name, password=password, is_master=False)
        self._credentials.append(credential)
        self.save()
        LOGGER.info("Registered account %s", name)
        return credential

    def authenticate(self, name: Optional[str], password: Optional[str]) -> Credential:
        """Return the matching credential or raise ``AuthenticationError``."""

        if not name or not password:
            raise ValueError("Name and password are required")
        key = normalise_login(name)
        alias = login_alias(name)
        match: Optional[Credential] = None
        for credential in self._credentials:
            if normalise_login(credential.name) == key or login_alias(credential.name) == alias:
                match = credential
                break
        if match is None or not hmac.compare_digest(
            match.password.encode("utf-8"), password.encode("utf-8")
        ):
            LOGGER.info("Rejected login for %s", name)
            raise AuthenticationError("Invalid name or password")
        return match

    def is_master(self, actor: Optional[str]) -> bool:
        return bool(actor) and normalise_login(actor) == normalise_login(self._master_account)

    def change_master_password(self, actor: Optional[str], new_password: Optional[str]) -> None:
        """Let the master account set a new password for itself."""

        if not actor or not new_password:
            raise ValueError("Actor and new password are required")
        if not self.is_master(actor):
            raise PermissionDeniedError("Only the master account may change its password")
        master = self._find_exact(self._master_account)
        if master is None:
            raise NotFoundError("Master account not found")
        master.password = new_password
        self.save()
        LOGGER.info("Master password changed by %s", actor)
