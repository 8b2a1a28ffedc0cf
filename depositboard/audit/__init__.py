"""Mini README: Audit trail package for admin actions."""

from .log import AuditEntry, AuditLog

__all__ = ["AuditEntry", "AuditLog"]
