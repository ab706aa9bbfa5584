"""Result types for railway-oriented error handling.

Session and cache operations report expected failures (unknown session,
store outage, cache write failure) as data instead of raising. Callers
branch with ``match``:

    result = await manager.validate_session(session_id, context)
    match result:
        case Success(value=session):
            ...
        case Failure(error=err):
            logger.warning("Session rejected", code=err.code.value)
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful outcome.

    Attributes:
        value: Value produced by the operation.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed outcome.

    Attributes:
        error: Error describing why the operation failed.
    """

    error: E


type Result[T, E] = Success[T] | Failure[E]
