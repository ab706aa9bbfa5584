"""Runtime environments.

Settings use the environment to pick the log renderer and the
secure-transport default for sessions.
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
