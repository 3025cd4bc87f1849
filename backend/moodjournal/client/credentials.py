"""
Mood Journal Client — Credential Resolver
===========================================

What:  Finds the bearer token to send with authenticated requests.
How:   Looks in the primary token slot first. When that is empty, falls
       back to the session blob the auth library stores (JSON) and reads
       the token field from it, either at the top level or nested under
       "session".
When:  Before every authenticated call. Nothing is cached: the storage is
       the source of truth, so sign-out takes effect immediately.

Resolution never raises. A storage failure or an undecodable blob counts
as "no token"; callers turn that into an AuthenticationError.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Storage
# ══════════════════════════════════════════════════════════════════════════


class TokenStorage(ABC):
    """Key/value storage for credentials (secure storage on a device)."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: Optional[str]) -> None:
        """Store `value`; None removes the key."""


class MemoryTokenStorage(TokenStorage):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: Optional[str]) -> None:
        if value is None:
            self._values.pop(key, None)
        else:
            self._values[key] = value


class FileTokenStorage(TokenStorage):
    """
    JSON file holding one string per key.

    The file is written with mode 0600. A missing file reads as empty.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: Optional[str]) -> None:
        data = self._load()
        if value is None:
            data.pop(key, None)
        else:
            data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")
        self.path.chmod(0o600)


# ══════════════════════════════════════════════════════════════════════════
# Resolver
# ══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ClientSession:
    token: str
    user_id: Optional[str] = None


class CredentialResolver:
    """Best-effort token lookup over a TokenStorage."""

    def __init__(
        self,
        storage: TokenStorage,
        token_key: str = "bearer_token",
        session_key: str = "auth_session",
        token_field: str = "token",
    ):
        self.storage = storage
        self.token_key = token_key
        self.session_key = session_key
        self.token_field = token_field

    def _read(self, key: str) -> Optional[str]:
        try:
            return self.storage.get(key)
        except Exception as e:
            logger.warning("Could not read %r from token storage: %s", key, type(e).__name__)
            return None

    def _session_blob(self) -> Optional[Dict[str, Any]]:
        raw = self._read(self.session_key)
        if not raw:
            return None
        try:
            blob = json.loads(raw)
        except ValueError:
            logger.warning("Stored session under %r is not valid JSON", self.session_key)
            return None
        return blob if isinstance(blob, dict) else None

    def _token_from_blob(self, blob: Dict[str, Any]) -> Optional[str]:
        token = blob.get(self.token_field)
        if not token and isinstance(blob.get("session"), dict):
            token = blob["session"].get(self.token_field)
        return token if isinstance(token, str) and token else None

    def resolve_token(self) -> Optional[str]:
        token = self._read(self.token_key)
        if token:
            return token
        blob = self._session_blob()
        if blob is None:
            return None
        return self._token_from_blob(blob)

    def get_session(self) -> Optional[ClientSession]:
        """Token plus the user id when the session blob carries one."""
        token = self.resolve_token()
        if token is None:
            return None
        user_id = None
        blob = self._session_blob()
        if blob is not None and isinstance(blob.get("user"), dict):
            raw_id = blob["user"].get("id")
            user_id = str(raw_id) if raw_id is not None else None
        return ClientSession(token=token, user_id=user_id)
