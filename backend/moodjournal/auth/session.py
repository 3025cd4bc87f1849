"""
Mood Journal Backend — Session Authentication
===============================================

What:  Resolves the caller's session from the request's bearer token.
How:   A `SessionProvider` turns a token into a `Session` (or None). The
       provider is passed to `create_app()` and stored on `app.state`;
       the `require_session` dependency reads it from there for every
       entry request.
Who:   Entry routes depend on `require_session`; tests inject their own
       provider or mint tokens with `JWTSessionProvider.issue_token`.

Token verification:
    The external auth service signs session tokens with a secret shared
    with this backend. `JWTSessionProvider` verifies the signature and
    expiry with python-jose and reads the user id from the `sub` claim.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Request
from jose import JWTError, jwt

from moodjournal.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    user_id: str
    token: str


class SessionProvider(ABC):
    """Interface for anything that can validate a bearer token."""

    @property
    def ready(self) -> bool:
        """False when the provider is known to reject every token."""
        return True

    @abstractmethod
    async def get_session(self, token: str) -> Optional[Session]:
        """Return the session for `token`, or None when it is not valid."""


class JWTSessionProvider(SessionProvider):
    """
    Verifies signed session tokens.

    Rejected (returns None):
        - bad signature or malformed token
        - expired `exp`
        - `iss` mismatch when an issuer is configured
        - missing or empty `sub`
    """

    def __init__(self, secret: str, algorithm: str = "HS256", issuer: Optional[str] = None):
        if not secret:
            logger.warning("JWTSessionProvider created without a secret; all tokens will be rejected")
        self.secret = secret
        self.algorithm = algorithm
        self.issuer = issuer

    @property
    def ready(self) -> bool:
        return bool(self.secret)

    async def get_session(self, token: str) -> Optional[Session]:
        if not self.secret or not token:
            return None
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"verify_aud": False},
            )
        except JWTError as e:
            logger.info("Rejected session token: %s", str(e))
            return None

        user_id = claims.get("sub")
        if not isinstance(user_id, str) or not user_id:
            logger.info("Rejected session token: missing subject")
            return None
        return Session(user_id=user_id, token=token)

    def issue_token(self, user_id: str, expires_in: timedelta = timedelta(days=7)) -> str:
        """Mint a token the way the auth service does. Used by tests and local tooling."""
        now = datetime.now(timezone.utc)
        claims = {"sub": user_id, "iat": now, "exp": now + expires_in}
        if self.issuer:
            claims["iss"] = self.issuer
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Pull the token out of an `Authorization: Bearer <token>` header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


async def require_session(request: Request) -> Session:
    """
    FastAPI dependency — authenticates the request or raises 401.

    Raises:
        AuthenticationError: no bearer token, or the provider rejected it
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise AuthenticationError("Missing or invalid Authorization header")

    provider: SessionProvider = request.app.state.session_provider
    session = await provider.get_session(token)
    if session is None:
        raise AuthenticationError("Invalid or expired session")
    return session
