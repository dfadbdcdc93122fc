"""
Request dependencies for the API.

The stores and the session are built once per ``create_app()`` and kept on
``app.state``; routes reach them through these ``Depends()`` providers so
tests can hand the factory their own instances.

Write routes add ``Depends(require_manager)``, which checks the
``Authorization: Bearer <token>`` header against the current session:

    401  no token, or a token that is not the current session's
    403  logged in, but the role may not modify houses
"""

from datetime import date

from fastapi import Depends, HTTPException, Request

from housing.session import SessionContext, User
from housing.store import HouseStore, OfficerStore


def get_house_store(request: Request) -> HouseStore:
    return request.app.state.house_store


def get_officer_store(request: Request) -> OfficerStore:
    return request.app.state.officer_store


def get_session(request: Request) -> SessionContext:
    return request.app.state.session


def get_today(request: Request) -> date:
    """Report reference date; ``app.state.today`` is a zero-arg callable."""
    return request.app.state.today()


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def require_user(
    request: Request,
    session: SessionContext = Depends(get_session),
) -> User:
    """Return the logged-in user if the request carries their token."""
    token = _bearer_token(request)
    if not session.check_token(token):
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session.user


def require_manager(
    user: User = Depends(require_user),
    session: SessionContext = Depends(get_session),
) -> User:
    """Like ``require_user``, but only for roles allowed to modify houses."""
    if not session.can_manage:
        raise HTTPException(
            status_code=403,
            detail=f"Role '{user.role}' may not modify beneficiary records",
        )
    return user
