"""
/api/v1/auth endpoints for the placeholder session.

``login`` raises ``AuthenticationError`` on bad credentials; the app-level
handler turns that into a 401 JSON body.
"""

from fastapi import APIRouter, Depends

from api.deps import get_session, require_user
from api.models import ErrorResponse, LoginRequest, SessionOut
from housing.session import SessionContext, User

router = APIRouter(prefix="/auth", tags=["auth"])


def _session_out(user: User, session: SessionContext) -> SessionOut:
    return SessionOut(
        username=user.username,
        role=user.role,
        token=user.token,
        can_manage=session.can_manage,
    )


@router.post("/login", response_model=SessionOut, responses={401: {"model": ErrorResponse}})
def login(body: LoginRequest, session: SessionContext = Depends(get_session)) -> SessionOut:
    user = session.login(body.username, body.password)
    return _session_out(user, session)


@router.post("/logout", status_code=204)
def logout(session: SessionContext = Depends(get_session)) -> None:
    session.logout()


@router.get("/me", response_model=SessionOut, responses={401: {"model": ErrorResponse}})
def me(
    user: User = Depends(require_user),
    session: SessionContext = Depends(get_session),
) -> SessionOut:
    return _session_out(user, session)
