"""Mini README: Identifier and name normalisation helpers.

Structure:
    * contributor_id - URL-safe identifier for a contributor name.
    * roster_id - compact identifier for a team member name.
    * normalise_login - comparison key for account names.
    * login_alias - the same key with every ``h`` removed.

Names arrive in Portuguese with accents and spaces, so every helper starts
from the NFD decomposition. Only the identifier helpers strip the combining
marks; login keys keep them, which matches how accounts were stored.
"""

from __future__ import annotations

import re
import unicodedata

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")
_WHITESPACE = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^\w]")


def _strip_marks(name: str) -> str:
    return _COMBINING_MARKS.sub("", unicodedata.normalize("NFD", name))


def contributor_id(name: str) -> str:
    """Return the identifier used in ``/users/{id}`` routes, e.g. ``"João Paulo"`` -> ``"joao_paulo"``."""

    collapsed = _WHITESPACE.sub("_", _strip_marks(name))
    return _NON_WORD.sub("", collapsed).lower()


def roster_id(name: str) -> str:
    """Return the roster identifier, e.g. ``"Ana Lúcia"`` -> ``"analucia"``."""

    return _WHITESPACE.sub("", _strip_marks(name)).lower()


def normalise_login(name: str) -> str:
    """Key used to compare account names: NFD, no whitespace, lower case."""

    return _WHITESPACE.sub("", unicodedata.normalize("NFD", name)).lower()


def login_alias(name: str) -> str:
    """Login key with ``h`` dropped so ``Ester`` still finds ``Esther``."""

    return normalise_login(name).replace("h", "")
