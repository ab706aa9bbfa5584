"""SameSite attribute values for the session cookie."""

from enum import Enum


class SameSiteMode(str, Enum):
    """Cookie SameSite mode (lowercase, as Starlette expects it)."""

    STRICT = "strict"
    LAX = "lax"
    NONE = "none"
