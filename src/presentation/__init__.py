"""Presentation layer - HTTP concerns.

The presentation layer is thin: middleware authenticates requests against
the session manager and routers translate results to HTTP responses.

Structure:
- api/middleware/: trace and session middleware
- api/dependencies.py: FastAPI dependencies for lifespan-owned components
- routers/: health, cache statistics and session endpoints

Contains NO business logic.
"""
