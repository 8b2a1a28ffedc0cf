"""Mini README: Account handling for the admin surface.

Re-exports the JSON-backed credential store used for registration, login
and the master password change.
"""

from .credentials import Credential, CredentialStore

__all__ = ["Credential", "CredentialStore"]
