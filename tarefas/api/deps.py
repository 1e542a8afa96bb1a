"""
FastAPI dependency injection functions.

Provides common dependencies for API endpoints:
- Application collaborators (settings, task store, sessions, OAuth client)
- The authorization gate guarding every protected route
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import Depends, Request

from tarefas.config import Settings
from tarefas.core.errors import NotAuthenticatedError
from tarefas.core.oauth import GitHubOAuthClient
from tarefas.core.sessions import SessionManager
from tarefas.db.task_store import TaskStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """
    Request-scoped result of the authorization gate.

    Attributes:
        principal: Session principal, or None when OAuth is not configured
        authenticated: Whether a logged-in session was found
    """
    principal: Optional[Dict[str, Any]] = None
    authenticated: bool = False


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_task_store(request: Request) -> TaskStore:
    return request.app.state.task_store


def get_sessions(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_oauth_client(request: Request) -> GitHubOAuthClient:
    return request.app.state.oauth_client


async def authorize(
    request: Request,
    settings: Settings = Depends(get_settings),
    sessions: SessionManager = Depends(get_sessions),
) -> RequestContext:
    """
    Authorization gate.

    Decides, before any handler logic runs, whether the request may
    proceed:

    1. OAuth not configured: let it through and log a warning
    2. Session carries a principal: let it through with that principal
    3. Otherwise: reject with 401

    Raises:
        NotAuthenticatedError: If OAuth is configured and no session exists
    """
    if not settings.oauth_configured:
        logger.warning("GitHub authentication is not configured; allowing %s %s",
                       request.method, request.url.path)
        return RequestContext()

    principal = await sessions.load(request)
    if principal:
        return RequestContext(principal=principal, authenticated=True)

    raise NotAuthenticatedError()
