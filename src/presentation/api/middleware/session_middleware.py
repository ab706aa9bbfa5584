"""Session middleware for FastAPI.

Authenticates every non-public request against the session manager and
attaches the caller to ``request.state``. This is a framework adapter:
everything session-related is decided by SessionManager.

Token lookup order:
    1. ``Authorization: Bearer <session id>``
    2. the session cookie (``sessionId`` by default)

Rejections are JSON:

    {"success": false, "error": {"code": "INVALID_SESSION", "message": "..."}}

Usage:
    app.state.session_manager = manager
    app.add_middleware(
        SessionMiddleware,
        public_paths=["/health", "/api/auth/login"],
        cookie_name="sessionId",
    )

    @router.get("/me")
    async def me(request: Request):
        user: AuthenticatedUser = request.state.user
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Awaitable, Callable
from uuid import UUID

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from src.core.result import Failure, Result, Success
from src.domain.entities.user_session import UserSession
from src.domain.enums import SessionErrorCode
from src.domain.value_objects.request_context import RequestContext
from src.presentation.api.middleware.trace_middleware import get_trace_id

if TYPE_CHECKING:
    from src.application.services.session_config import SessionConfig
    from src.application.services.session_manager import SessionManager

logger = logging.getLogger(__name__)

DEFAULT_COOKIE_NAME = "sessionId"


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthenticatedUser:
    """Caller identity attached to ``request.state.user``.

    Roles and permissions are filled by the authorization layer; session
    authentication leaves them empty.
    """

    user_id: UUID
    tenant_id: UUID
    session_id: str
    roles: list[str] = field(default_factory=list)
    permissions: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionAuthError:
    """HTTP-facing session rejection.

    Attributes:
        code: NO_SESSION, INVALID_SESSION or SESSION_ERROR.
        http_status: 401 for client problems, 500 for server problems.
        message: Safe, client-facing message.
    """

    code: SessionErrorCode
    http_status: int
    message: str

    def to_response(self) -> JSONResponse:
        """Render as the standard JSON error envelope."""
        return JSONResponse(
            status_code=self.http_status,
            content={
                "success": False,
                "error": {"code": self.code.value, "message": self.message},
            },
        )


_NO_SESSION = SessionAuthError(
    code=SessionErrorCode.NO_SESSION,
    http_status=401,
    message="No session provided",
)
_INVALID_SESSION = SessionAuthError(
    code=SessionErrorCode.INVALID_SESSION,
    http_status=401,
    message="Invalid or expired session",
)
_INSECURE_TRANSPORT = SessionAuthError(
    code=SessionErrorCode.INVALID_SESSION,
    http_status=401,
    message="Sessions require a secure connection",
)
_SESSION_ERROR = SessionAuthError(
    code=SessionErrorCode.SESSION_ERROR,
    http_status=500,
    message="Session validation failed",
)


# =============================================================================
# Request helpers
# =============================================================================


def extract_session_token(
    request: Request, cookie_name: str = DEFAULT_COOKIE_NAME
) -> str | None:
    """Return the session id from the bearer header, else from the cookie."""
    authorization = request.headers.get("Authorization")
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return request.cookies.get(cookie_name) or None


def get_client_ip(request: Request, trust_forwarded: bool = False) -> str | None:
    """Client IP address.

    ``X-Forwarded-For`` (first hop) is only honored when the app runs behind
    a trusted proxy; otherwise any client could claim any address.
    """
    if trust_forwarded:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
    if request.client:
        return request.client.host
    return None


def is_secure_request(request: Request, trust_forwarded: bool = False) -> bool:
    """True when the request arrived over HTTPS."""
    if request.url.scheme == "https":
        return True
    if trust_forwarded:
        proto = request.headers.get("X-Forwarded-Proto", "")
        return proto.split(",")[0].strip().lower() == "https"
    return False


def request_context_from_request(
    request: Request, trust_forwarded: bool = False
) -> RequestContext:
    """Snapshot the request attributes session operations need."""
    return RequestContext(
        ip_address=get_client_ip(request, trust_forwarded),
        user_agent=request.headers.get("User-Agent"),
        path=request.url.path,
        method=request.method,
        trace_id=get_trace_id(),
    )


# =============================================================================
# Cookie helpers
# =============================================================================


def set_session_cookie(
    response: Response,
    session: UserSession,
    config: "SessionConfig",
    cookie_name: str = DEFAULT_COOKIE_NAME,
    now: datetime | None = None,
) -> None:
    """Write the session cookie (HttpOnly, Secure per config, SameSite).

    Max-Age is the session's remaining lifetime.
    """
    remaining = session.time_to_expiry(now or datetime.now(UTC))
    response.set_cookie(
        key=cookie_name,
        value=session.id,
        max_age=max(0, int(remaining.total_seconds())),
        path="/",
        httponly=True,
        secure=config.require_secure,
        samesite=config.same_site.value,
    )


def clear_session_cookie(
    response: Response,
    config: "SessionConfig",
    cookie_name: str = DEFAULT_COOKIE_NAME,
) -> None:
    """Remove the session cookie from the client."""
    response.delete_cookie(
        key=cookie_name,
        path="/",
        httponly=True,
        secure=config.require_secure,
        samesite=config.same_site.value,
    )


def _sets_cookie(response: Response, cookie_name: str) -> bool:
    prefix = f"{cookie_name}="
    return any(
        value.startswith(prefix) for value in response.headers.getlist("set-cookie")
    )


# =============================================================================
# Middleware
# =============================================================================


class SessionMiddleware(BaseHTTPMiddleware):
    """Starlette middleware enforcing session authentication.

    The session manager is resolved per request from
    ``request.app.state.session_manager`` so the application lifespan owns
    its construction.

    Attributes:
        public_paths: Path prefixes that skip authentication.
        cookie_name: Session cookie name.
        trust_forwarded_ip: Honor X-Forwarded-For / X-Forwarded-Proto.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        public_paths: list[str] | None = None,
        cookie_name: str = DEFAULT_COOKIE_NAME,
        trust_forwarded_ip: bool = False,
    ) -> None:
        super().__init__(app)
        self.public_paths = [p.rstrip("/") or "/" for p in (public_paths or [])]
        self.cookie_name = cookie_name
        self.trust_forwarded_ip = trust_forwarded_ip

    def is_public(self, path: str) -> bool:
        """True if ``path`` equals or lies under a public prefix."""
        for prefix in self.public_paths:
            if prefix == "/":
                if path == "/":
                    return True
            elif path == prefix or path.startswith(prefix + "/"):
                return True
        return False

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if self.is_public(request.url.path):
            return await call_next(request)

        match await self.authenticate(request):
            case Failure(error=auth_error):
                return auth_error.to_response()
            case Success(value=user):
                request.state.user = user

        response = await call_next(request)

        # Cookie clients need Max-Age to follow a renewed expiry.
        session: UserSession | None = getattr(request.state, "session", None)
        manager = self._manager(request)
        if (
            session is not None
            and manager is not None
            and request.cookies.get(self.cookie_name) == session.id
            and not _sets_cookie(response, self.cookie_name)
        ):
            set_session_cookie(response, session, manager.config, self.cookie_name)
        return response

    async def authenticate(
        self, request: Request
    ) -> Result[AuthenticatedUser, SessionAuthError]:
        """Validate the request's session.

        On success ``request.state.session`` holds the refreshed session.
        """
        token = extract_session_token(request, self.cookie_name)
        if token is None:
            return Failure(error=_NO_SESSION)

        manager = self._manager(request)
        if manager is None:
            logger.error("Session manager is not configured on app.state")
            return Failure(error=_SESSION_ERROR)

        if manager.config.require_secure and not is_secure_request(
            request, self.trust_forwarded_ip
        ):
            return Failure(error=_INSECURE_TRANSPORT)

        context = request_context_from_request(request, self.trust_forwarded_ip)
        try:
            result = await manager.validate_session(token, context)
        except Exception:
            logger.exception("Unexpected error validating session")
            return Failure(error=_SESSION_ERROR)

        match result:
            case Success(value=session):
                request.state.session = session
                return Success(
                    value=AuthenticatedUser(
                        user_id=session.user_id,
                        tenant_id=session.tenant_id,
                        session_id=session.id,
                    )
                )
            case Failure(error=err) if err.is_unavailable:
                return Failure(error=_SESSION_ERROR)
            case Failure(error=err):
                logger.info(
                    "Session rejected",
                    extra={"reason": err.code.value, "path": request.url.path},
                )
                return Failure(error=_INVALID_SESSION)
        return Failure(error=_SESSION_ERROR)

    @staticmethod
    def _manager(request: Request) -> "SessionManager | None":
        return getattr(request.app.state, "session_manager", None)


def get_authenticated_user(request: Request) -> AuthenticatedUser:
    """FastAPI dependency returning the caller set by SessionMiddleware."""
    user: Any = getattr(request.state, "user", None)
    if not isinstance(user, AuthenticatedUser):
        raise RuntimeError("SessionMiddleware did not authenticate this request")
    return user
