"""
Server-side sessions keyed by a signed cookie.

The browser only holds a signed session ID; the session data itself
lives in a ``SessionStore``. Two stores are provided:

- MemorySessionStore: process-local dict, for development and tests
- RedisSessionStore: shared store for multi-process deployments
"""

import json
import logging
import time
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

import redis.asyncio as aioredis
from fastapi import Request, Response

from tarefas.config import Settings
from tarefas.core.security import generate_token, read_signed_value, sign_value


logger = logging.getLogger(__name__)

SessionData = Dict[str, Any]


class SessionStore(Protocol):
    async def get(self, sid: str) -> Optional[SessionData]: ...

    async def set(self, sid: str, data: SessionData, ttl: int) -> None: ...

    async def delete(self, sid: str) -> None: ...

    async def close(self) -> None: ...


class MemorySessionStore:
    """In-process session store with per-entry expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: Dict[str, Tuple[float, SessionData]] = {}

    async def get(self, sid: str) -> Optional[SessionData]:
        entry = self._entries.get(sid)
        if entry is None:
            return None
        expires_at, data = entry
        if self._clock() >= expires_at:
            del self._entries[sid]
            return None
        return dict(data)

    async def set(self, sid: str, data: SessionData, ttl: int) -> None:
        self._entries[sid] = (self._clock() + ttl, dict(data))

    async def delete(self, sid: str) -> None:
        self._entries.pop(sid, None)

    async def close(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class RedisSessionStore:
    """
    Redis-backed session store.

    Values are JSON documents stored with a TTL, so Redis handles expiry.
    """

    KEY_PREFIX = "tarefas:sessao:"

    def __init__(self, client: aioredis.Redis):
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisSessionStore":
        return cls(aioredis.from_url(url, decode_responses=True))

    def _key(self, sid: str) -> str:
        return f"{self.KEY_PREFIX}{sid}"

    async def get(self, sid: str) -> Optional[SessionData]:
        raw = await self._client.get(self._key(sid))
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable session %s", sid[:8])
            return None

    async def set(self, sid: str, data: SessionData, ttl: int) -> None:
        await self._client.set(self._key(sid), json.dumps(data), ex=ttl)

    async def delete(self, sid: str) -> None:
        await self._client.delete(self._key(sid))

    async def close(self) -> None:
        await self._client.aclose()


def build_session_store(settings: Settings) -> SessionStore:
    """Pick the session backend named by ``settings.session_backend``."""
    if settings.session_backend == "redis":
        logger.info("Using Redis session store")
        return RedisSessionStore.from_url(settings.redis_url)
    return MemorySessionStore()


class SessionManager:
    """
    Reads and writes sessions for a request/response pair.

    Attributes:
        store: Backend holding session data
        secret: Key used to sign the session cookie
        cookie_name: Name of the session cookie
        max_age: Session lifetime in seconds (cookie and store TTL)
        secure: Whether the cookie carries the Secure flag
    """

    def __init__(
        self,
        store: SessionStore,
        secret: str,
        cookie_name: str = "tarefas_session",
        max_age: int = 86400,
        secure: bool = False,
    ):
        self.store = store
        self.secret = secret
        self.cookie_name = cookie_name
        self.max_age = max_age
        self.secure = secure

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionManager":
        return cls(
            store=build_session_store(settings),
            secret=settings.session_secret,
            cookie_name=settings.session_cookie_name,
            max_age=settings.session_max_age,
            secure=settings.session_cookie_secure,
        )

    def _session_id(self, request: Request) -> Optional[str]:
        cookie = request.cookies.get(self.cookie_name)
        if not cookie:
            return None
        payload = read_signed_value(cookie, self.secret)
        if payload is None:
            return None
        sid = payload.get("sid")
        return sid if isinstance(sid, str) else None

    async def load(self, request: Request) -> Optional[SessionData]:
        """Return the session data for this request, or None."""
        sid = self._session_id(request)
        if sid is None:
            return None
        return await self.store.get(sid)

    async def login(self, request: Request, response: Response, data: SessionData) -> str:
        """
        Start a fresh session holding ``data``.

        Any session the request already carried is discarded first, so
        the ID a client held before login is never reused.

        Returns:
            The new session ID
        """
        previous = self._session_id(request)
        if previous is not None:
            await self.store.delete(previous)

        sid = generate_token()
        await self.store.set(sid, data, self.max_age)
        response.set_cookie(
            self.cookie_name,
            sign_value({"sid": sid}, self.secret),
            max_age=self.max_age,
            httponly=True,
            samesite="lax",
            secure=self.secure,
        )
        return sid

    async def logout(self, request: Request, response: Response) -> None:
        """Destroy the request's session; store failures propagate."""
        sid = self._session_id(request)
        if sid is not None:
            await self.store.delete(sid)
        response.delete_cookie(self.cookie_name, httponly=True, samesite="lax", secure=self.secure)

    async def close(self) -> None:
        await self.store.close()
