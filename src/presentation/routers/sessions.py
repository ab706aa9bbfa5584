"""Sessions router.

Endpoints:
    GET    /api/sessions          - List the caller's live sessions
    DELETE /api/sessions/current  - Log out (invalidate current session)

Both routes sit behind SessionMiddleware, so ``request.state.user`` is the
authenticated caller.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response

from src.application.services.session_manager import (
    REASON_MANUAL_LOGOUT,
    SessionManager,
)
from src.core.result import Failure, Success
from src.presentation.api.dependencies import get_session_manager
from src.presentation.api.middleware.session_middleware import (
    AuthenticatedUser,
    clear_session_cookie,
    get_authenticated_user,
    request_context_from_request,
)
from src.schemas.session_schemas import SessionListResponse, SessionResponse

router = APIRouter(prefix="/api/sessions", tags=["Sessions"])


def _unavailable_response() -> JSONResponse:
    # Same status and code SessionMiddleware uses for store failures.
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": {
                "code": "SESSION_ERROR",
                "message": "Session store is unavailable",
            },
        },
    )


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=SessionListResponse,
    summary="List sessions",
)
async def list_sessions(
    user: AuthenticatedUser = Depends(get_authenticated_user),
    manager: SessionManager = Depends(get_session_manager),
) -> SessionListResponse | JSONResponse:
    """List the caller's live sessions, most recently used first."""
    match await manager.get_user_sessions(user.user_id):
        case Failure():
            return _unavailable_response()
        case Success(value=sessions):
            return SessionListResponse(
                user_id=user.user_id,
                sessions=[
                    SessionResponse.from_entity(s, user.session_id) for s in sessions
                ],
                total_count=len(sessions),
            )
    return _unavailable_response()


@router.delete(
    "/current",
    status_code=status.HTTP_204_NO_CONTENT,
    response_model=None,
    summary="Delete current session",
)
async def delete_current_session(
    request: Request,
    user: AuthenticatedUser = Depends(get_authenticated_user),
    manager: SessionManager = Depends(get_session_manager),
) -> Response:
    """Log out: invalidate the current session and clear the cookie.

    DELETE /api/sessions/current → 204 No Content
    """
    context = request_context_from_request(
        request, request.app.state.settings.trust_forwarded_ip
    )
    result = await manager.invalidate_session(
        user.session_id, REASON_MANUAL_LOGOUT, context
    )
    if isinstance(result, Failure):
        return _unavailable_response()

    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_session_cookie(
        response, manager.config, request.app.state.settings.session_cookie_name
    )
    return response
