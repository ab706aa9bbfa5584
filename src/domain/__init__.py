"""Domain layer - pure business logic.

No framework or infrastructure dependencies.

Structure:
- entities/: UserSession
- value_objects/: RequestContext, cache statistics and health
- enums/: session, audit and cache enumerations
- errors/: SessionError, AuditError
- protocols/: ports implemented by infrastructure (session store, cache
  store, audit, logger, form hierarchy source)
"""
