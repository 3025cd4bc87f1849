"""
Mood Journal Client — HTTP Client Wrapper
===========================================

What:  JSON-over-HTTP calls against the configured backend.
How:   An httpx.AsyncClient underneath. Every call:
         1. fails fast with ConfigurationError when no base URL is set
         2. sends `Content-Type: application/json` (caller headers win)
         3. raises ApiError(status, body text) for any non-2xx response
         4. returns the parsed JSON body
       The authenticated variants first ask the session source for a
       session; without one they raise AuthenticationError and never touch
       the network. Otherwise `Authorization: Bearer <token>` is added.

DELETE always carries a JSON body (`{}` by default): some servers reject
an empty body when the content type says JSON.

No retries, caching or de-duplication happen here; callers decide what to
do with failures.
"""

import inspect
import json
import logging
from typing import Any, Dict, Optional, Protocol

import httpx

from moodjournal.client.config import ClientSettings
from moodjournal.client.credentials import ClientSession, CredentialResolver, TokenStorage
from moodjournal.exceptions import ApiError, AuthenticationError, ConfigurationError

logger = logging.getLogger(__name__)

_UNSET = object()


class SessionSource(Protocol):
    def get_session(self) -> Optional[ClientSession]:
        ...


class ApiClient:
    """
    Thin async JSON client.

    Usage:
        async with ApiClient("https://journal.example.com", resolver) as api:
            entries = await api.authenticated_get("/api/journal/entries")
    """

    def __init__(
        self,
        base_url: str,
        session_source: Optional[SessionSource] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.session_source = session_source
        options: Dict[str, Any] = {"transport": transport}
        if timeout is not None:
            options["timeout"] = timeout
        self._http = httpx.AsyncClient(**options)

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        storage: TokenStorage,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ApiClient":
        resolver = CredentialResolver(
            storage,
            token_key=settings.token_key,
            session_key=settings.session_key,
            token_field=settings.session_token_field,
        )
        return cls(settings.backend_url, resolver, transport=transport, timeout=settings.timeout)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ── Base call ─────────────────────────────────────────────────────────

    async def call(
        self,
        path: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        body: Any = _UNSET,
    ) -> Any:
        """
        Issue one request and return the decoded JSON response.

        Raises:
            ConfigurationError: base URL is empty
            ApiError: the server answered with a non-2xx status, or a 2xx
                whose body is not JSON
        """
        if not self.base_url:
            raise ConfigurationError()

        url = f"{self.base_url}{path}"
        merged = httpx.Headers({"Content-Type": "application/json"})
        merged.update(headers or {})
        content = None if body is _UNSET else json.dumps(body)

        logger.debug("API call: %s %s", method, url)
        response = await self._http.request(method, url, headers=merged, content=content)
        logger.debug("Response status: %d", response.status_code)

        if not response.is_success:
            logger.warning("API error: %s %s -> %d", method, url, response.status_code)
            raise ApiError(response.status_code, response.text)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            logger.warning("API error: %s %s -> %d with a non-JSON body", method, url, response.status_code)
            raise ApiError(response.status_code, response.text)

    async def authenticated_call(
        self,
        path: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        body: Any = _UNSET,
    ) -> Any:
        """
        Like `call`, with the bearer token attached.

        Raises:
            AuthenticationError: no session could be resolved (no request sent)
        """
        session = None
        if self.session_source is not None:
            session = self.session_source.get_session()
            if inspect.isawaitable(session):
                session = await session
        if session is None or not session.token:
            raise AuthenticationError("Not signed in")

        merged = dict(headers or {})
        merged["Authorization"] = f"Bearer {session.token}"
        return await self.call(path, method=method, headers=merged, body=body)

    # ── Verb helpers ──────────────────────────────────────────────────────

    async def get(self, path: str, headers: Optional[Dict[str, str]] = None) -> Any:
        return await self.call(path, "GET", headers)

    async def post(self, path: str, body: Any = None, headers: Optional[Dict[str, str]] = None) -> Any:
        return await self.call(path, "POST", headers, _UNSET if body is None else body)

    async def put(self, path: str, body: Any = None, headers: Optional[Dict[str, str]] = None) -> Any:
        return await self.call(path, "PUT", headers, _UNSET if body is None else body)

    async def patch(self, path: str, body: Any = None, headers: Optional[Dict[str, str]] = None) -> Any:
        return await self.call(path, "PATCH", headers, _UNSET if body is None else body)

    async def delete(self, path: str, body: Any = None, headers: Optional[Dict[str, str]] = None) -> Any:
        return await self.call(path, "DELETE", headers, {} if body is None else body)

    async def authenticated_get(self, path: str, headers: Optional[Dict[str, str]] = None) -> Any:
        return await self.authenticated_call(path, "GET", headers)

    async def authenticated_post(self, path: str, body: Any = None, headers: Optional[Dict[str, str]] = None) -> Any:
        return await self.authenticated_call(path, "POST", headers, _UNSET if body is None else body)

    async def authenticated_put(self, path: str, body: Any = None, headers: Optional[Dict[str, str]] = None) -> Any:
        return await self.authenticated_call(path, "PUT", headers, _UNSET if body is None else body)

    async def authenticated_patch(self, path: str, body: Any = None, headers: Optional[Dict[str, str]] = None) -> Any:
        return await self.authenticated_call(path, "PATCH", headers, _UNSET if body is None else body)

    async def authenticated_delete(self, path: str, body: Any = None, headers: Optional[Dict[str, str]] = None) -> Any:
        return await self.authenticated_call(path, "DELETE", headers, {} if body is None else body)
