"""Audit trail adapters implementing AuditProtocol."""

from src.infrastructure.audit.database_audit_adapter import DatabaseAuditAdapter
from src.infrastructure.audit.logger_audit_adapter import LoggerAuditAdapter

__all__ = [
    "DatabaseAuditAdapter",
    "LoggerAuditAdapter",
]
