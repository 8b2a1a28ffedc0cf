"""Mini README: Error hierarchy shared by the deposit board components.

Each error also derives from the closest built-in exception so callers that
only know about ``KeyError`` or ``ValueError`` keep working. The web layer
maps them onto HTTP status codes.
"""

from __future__ import annotations


class DepositBoardError(Exception):
    """Base class for domain errors raised by the board components."""

    def __str__(self) -> str:
        # KeyError would otherwise render the message with quotes.
        return str(self.args[0]) if self.args else ""


class InvalidAmountError(DepositBoardError, ValueError):
    """A deposit value is not a finite number."""


class NotFoundError(DepositBoardError, KeyError):
    """A contributor, entry, period, member or credential is absent."""


class PermissionDeniedError(DepositBoardError, PermissionError):
    """A non-master actor attempted a master-only action."""


class DuplicateKeyError(DepositBoardError, ValueError):
    """An identifier collides with an existing contributor, member or account."""


class AuthenticationError(DepositBoardError):
    """Login name or password did not match a stored credential."""
