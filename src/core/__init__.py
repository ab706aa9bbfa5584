"""Core shared kernel.

Result types, base errors, enums, settings and the dependency container.
Only the container (the composition root) imports the other layers; the
rest of the core depends on nothing outside it.
"""

from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success

__all__ = [
    "DomainError",
    "ErrorCode",
    "Failure",
    "Result",
    "Success",
]
