"""
Pytest configuration and shared fixtures for Tarefas tests.
"""

import asyncio
from typing import Any, Dict
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tarefas.config import Settings
from tarefas.core.oauth import GitHubOAuthClient
from tarefas.core.security import generate_token, sign_value
from tarefas.db.task_store import SqlTaskStore
from tarefas.main import create_app
from tarefas.schemas.auth import GitHubProfile


TEST_SECRET = "test-session-secret"


def make_settings(**overrides: Any) -> Settings:
    """Settings isolated from the environment's .env file."""
    values: Dict[str, Any] = {
        "db_url": "sqlite://",
        "session_secret": TEST_SECRET,
        "session_backend": "memory",
        "github_client_id": "client-id",
        "github_client_secret": "client-secret",
        "github_callback_url": "http://testserver/auth/github/callback",
        "cors_origin": "http://localhost:3000",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def store() -> AsyncMock:
    """Task store double; every method is an AsyncMock."""
    return AsyncMock(spec=SqlTaskStore)


@pytest.fixture
def oauth_client() -> Mock:
    client = Mock(spec=GitHubOAuthClient)
    client.authorization_url.side_effect = (
        lambda state: f"https://github.com/login/oauth/authorize?state={state}"
    )
    client.authenticate = AsyncMock(
        return_value=GitHubProfile(id=7, login="mariasilva", name="Maria Silva")
    )
    return client


@pytest.fixture
def app(settings: Settings, store: AsyncMock, oauth_client: Mock) -> FastAPI:
    app = create_app(settings)
    app.state.task_store = store
    app.state.oauth_client = oauth_client
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


def start_session(app: FastAPI, client: TestClient, usuario: str = "Maria Silva") -> str:
    """Store a principal and hand the signed session cookie to ``client``."""
    sessions = app.state.sessions
    sid = generate_token()
    asyncio.run(sessions.store.set(sid, {"usuario": usuario}, sessions.max_age))
    client.cookies.set(sessions.cookie_name, sign_value({"sid": sid}, sessions.secret))
    return sid


@pytest.fixture
def auth_client(app: FastAPI, client: TestClient) -> TestClient:
    """Client carrying a logged-in session."""
    start_session(app, client)
    return client
