"""
GitHub OAuth client.

Implements the two server-side halves of the authorization-code flow:
building the consent-screen URL, and exchanging the callback code for
an access token and the user's profile. Uses httpx for HTTP.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from tarefas.config import Settings
from tarefas.schemas.auth import GitHubProfile


logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
ACCESS_TOKEN_URL = "https://github.com/login/oauth/access_token"
USER_URL = "https://api.github.com/user"
DEFAULT_SCOPE = "user:email"


class OAuthError(Exception):
    """Raised when GitHub rejects or fails an OAuth exchange."""


class GitHubOAuthClient:
    """
    Client for the GitHub OAuth endpoints.

    Attributes:
        client_id: OAuth app client ID
        client_secret: OAuth app client secret
        callback_url: Redirect URI registered with GitHub
        timeout: Seconds allowed per HTTP call
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        callback_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.callback_url = callback_url
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "GitHubOAuthClient":
        return cls(
            client_id=settings.github_client_id,
            client_secret=settings.github_client_secret,
            callback_url=settings.github_callback_url,
            timeout=settings.github_timeout,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    def authorization_url(self, state: str, scope: str = DEFAULT_SCOPE) -> str:
        """URL of the GitHub consent screen for this app."""
        params = {
            "client_id": self.client_id,
            "scope": scope,
            "state": state,
        }
        if self.callback_url:
            params["redirect_uri"] = self.callback_url
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> str:
        """
        Exchange an authorization code for an access token.

        Args:
            code: The ``code`` query parameter GitHub sent to the callback

        Returns:
            The access token

        Raises:
            OAuthError: If the request fails or GitHub returns an error
        """
        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
        }
        if self.callback_url:
            data["redirect_uri"] = self.callback_url

        try:
            async with self._client() as client:
                response = await client.post(
                    ACCESS_TOKEN_URL, data=data, headers={"Accept": "application/json"}
                )
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise OAuthError(f"token exchange failed: {e}") from e

        if not isinstance(payload, dict):
            raise OAuthError("token exchange returned an unexpected body")
        if payload.get("error"):
            raise OAuthError(
                f"token exchange rejected: {payload.get('error_description') or payload['error']}"
            )
        token = payload.get("access_token")
        if not token:
            raise OAuthError("token exchange returned no access token")
        return token

    async def fetch_profile(self, access_token: str) -> GitHubProfile:
        """
        Fetch the authenticated user's profile.

        Raises:
            OAuthError: If the request fails or the body is not a profile
        """
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/vnd.github+json",
        }
        try:
            async with self._client() as client:
                response = await client.get(USER_URL, headers=headers)
                response.raise_for_status()
                return GitHubProfile.model_validate(response.json())
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            raise OAuthError(f"profile request failed: {e}") from e

    async def authenticate(self, code: str) -> GitHubProfile:
        """Run the full callback exchange: code -> token -> profile."""
        token = await self.exchange_code(code)
        profile = await self.fetch_profile(token)
        logger.info("GitHub login succeeded for %s", profile.login)
        return profile
