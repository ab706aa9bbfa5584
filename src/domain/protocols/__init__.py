"""Domain protocols (ports).

Infrastructure adapters implement these with structural typing; nothing
inherits from them.
"""

from src.domain.protocols.audit_protocol import AuditProtocol
from src.domain.protocols.cache_keys_protocol import CacheKeysProtocol
from src.domain.protocols.cache_store_protocol import CacheStoreProtocol
from src.domain.protocols.form_hierarchy_source import FormHierarchySource
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.session_store_protocol import SessionStoreProtocol

__all__ = [
    "AuditProtocol",
    "CacheKeysProtocol",
    "CacheStoreProtocol",
    "FormHierarchySource",
    "LoggerProtocol",
    "SessionStoreProtocol",
]
