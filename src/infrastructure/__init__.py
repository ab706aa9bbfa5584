"""Infrastructure layer - adapters implementing domain protocols.

Structure:
- cache/: Redis cache store, key registry, domain read-through cache
- persistence/: SQLAlchemy engine, models and session stores
- audit/: audit trail adapters (logger, database)
- logging/: structlog console adapter
- jobs/: background session cleanup
"""
