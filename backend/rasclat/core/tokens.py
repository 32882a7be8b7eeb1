"""Refresh-token store used by the authentication routes.

The store maps an opaque refresh token to the username it was issued for.
``InMemoryRefreshTokenStore`` is process local and lost on restart; another
backing only needs to implement the same three calls.
"""
import secrets
from typing import Optional, Protocol


class RefreshTokenStore(Protocol):
    def issue(self, username: str) -> str: ...

    def lookup(self, token: str) -> Optional[str]: ...

    def revoke(self, token: str) -> None: ...


class InMemoryRefreshTokenStore:
    def __init__(self, nbytes: int = 64):
        self._nbytes = nbytes
        self._tokens: dict[str, str] = {}

    def issue(self, username: str) -> str:
        token = secrets.token_urlsafe(self._nbytes)
        self._tokens[token] = username
        return token

    def lookup(self, token: str) -> Optional[str]:
        if not token:
            return None
        return self._tokens.get(token)

    def revoke(self, token: str) -> None:
        self._tokens.pop(token, None)

    def clear(self) -> None:
        self._tokens.clear()

    def __len__(self) -> int:
        return len(self._tokens)


_store: Optional[InMemoryRefreshTokenStore] = None


def init_token_store() -> InMemoryRefreshTokenStore:
    global _store
    _store = InMemoryRefreshTokenStore()
    return _store


def get_token_store() -> InMemoryRefreshTokenStore:
    if _store is None:
        return init_token_store()
    return _store
