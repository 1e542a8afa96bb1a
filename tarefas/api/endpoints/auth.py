"""
Authentication endpoints for the Tarefas system.

Implements the GitHub OAuth login flow, logout, and the current-user
endpoint. These, together with the authorization gate, are the only
code paths that touch authentication state.
"""

import logging
from datetime import timedelta
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from tarefas.api.deps import (
    RequestContext,
    authorize,
    get_oauth_client,
    get_sessions,
    get_settings,
)
from tarefas.config import Settings
from tarefas.core.oauth import GitHubOAuthClient, OAuthError
from tarefas.core.security import generate_token, read_signed_value, sign_value
from tarefas.core.sessions import SessionManager
from tarefas.schemas.auth import Principal


logger = logging.getLogger(__name__)

router = APIRouter()

STATE_COOKIE = "oauth_state"
STATE_MAX_AGE = timedelta(minutes=10)


def _redirect(location: str) -> RedirectResponse:
    return RedirectResponse(location, status_code=status.HTTP_302_FOUND)


def _failure(reason: str) -> RedirectResponse:
    logger.warning("GitHub login failed: %s", reason)
    response = _redirect("/")
    response.delete_cookie(STATE_COOKIE)
    return response


@router.get(
    "/auth/github",
    summary="Start GitHub Login",
    status_code=status.HTTP_302_FOUND,
    responses={302: {"description": "Redirect to the GitHub consent screen"}},
)
def login(
    settings: Settings = Depends(get_settings),
    oauth: GitHubOAuthClient = Depends(get_oauth_client),
) -> RedirectResponse:
    """
    Redirect the browser to GitHub's consent screen.

    A random state value is kept in a short-lived signed cookie and
    checked again on the callback.
    """
    if not settings.oauth_configured:
        logger.warning("GitHub login requested but OAuth is not configured")
        return _redirect("/")

    state = generate_token()
    response = _redirect(oauth.authorization_url(state))
    response.set_cookie(
        STATE_COOKIE,
        sign_value({"state": state}, settings.session_secret, STATE_MAX_AGE),
        max_age=int(STATE_MAX_AGE.total_seconds()),
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return response


@router.get(
    "/auth/github/callback",
    summary="GitHub Login Callback",
    status_code=status.HTTP_302_FOUND,
    responses={302: {"description": "Redirect to the post-login page, or / on failure"}},
)
async def callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    settings: Settings = Depends(get_settings),
    oauth: GitHubOAuthClient = Depends(get_oauth_client),
    sessions: SessionManager = Depends(get_sessions),
) -> RedirectResponse:
    """
    Finish the GitHub login.

    On success the session stores only the user's display name and the
    browser is sent to ``settings.auth_redirect``. Any failure sends it
    back to the root page.
    """
    if error:
        return _failure(f"provider returned {error}")
    if not code:
        return _failure("missing authorization code")

    cookie = request.cookies.get(STATE_COOKIE)
    payload = read_signed_value(cookie, settings.session_secret) if cookie else None
    if payload is None or not state or payload.get("state") != state:
        return _failure("state mismatch")

    try:
        profile = await oauth.authenticate(code)
    except OAuthError as e:
        return _failure(str(e))

    response = _redirect(settings.auth_redirect or "/usuario")
    response.delete_cookie(STATE_COOKIE)
    principal = Principal(usuario=profile.display_name)
    await sessions.login(request, response, principal.model_dump())
    logger.info("Session started for %s", principal.usuario)
    return response


@router.get(
    "/logout",
    summary="Logout",
    status_code=status.HTTP_302_FOUND,
    responses={302: {"description": "Session destroyed, redirect to /"}},
)
async def logout(
    request: Request,
    sessions: SessionManager = Depends(get_sessions),
) -> RedirectResponse:
    """Destroy the session and go back to the root page."""
    response = _redirect("/")
    await sessions.logout(request, response)
    return response


@router.get(
    "/usuario",
    summary="Current User",
    responses={
        200: {"model": Principal},
        401: {"description": "Not authenticated"},
    },
)
async def current_user(ctx: RequestContext = Depends(authorize)) -> Any:
    """Return the session principal as stored (null when OAuth is off)."""
    return ctx.principal
