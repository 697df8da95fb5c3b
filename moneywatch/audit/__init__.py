"""Audit logging package."""

from moneywatch.audit.logger import AuditLogger

__all__ = ["AuditLogger"]
