"""Application layer - use cases and orchestration.

- services/session_manager.py: session lifecycle (create, validate, renew,
  invalidate, cleanup, list)
- services/session_config.py: validated session configuration

Orchestrates domain entities through domain protocols; contains no framework
or infrastructure code.
"""
