"""Credential Store - bearer credential plus a time-boxed in-memory response cache.

Invariants:
    - Holds zero or one bearer credential; mutated only through set_credential()
    - Cache entries are (value, absolute expiry); an entry is expired when now >= expires_at
    - Eviction is lazy: get() evicts on read, sweep_expired() on demand; no background timer
    - Nothing is persisted

Design Decisions:
    - Time comes from an injected Clock, so expiry is deterministic in tests
    - Reads of the credential are safe to share; cache writes are not synchronized
"""

from dataclasses import dataclass
from typing import Any

from fne.core.clock import Clock, SystemClock
from fne.core.constants import DEFAULT_CACHE_TTL_SECONDS, MIN_API_KEY_LENGTH
from fne.core.errors import AuthFailure


@dataclass(frozen=True)
class _CacheEntry:
    value: Any
    expires_at: float


class CredentialStore:
    """Owns the API key and the TTL cache for one client."""

    def __init__(
        self,
        api_key: str | None = None,
        min_length: int = MIN_API_KEY_LENGTH,
        clock: Clock | None = None,
    ):
        self._api_key = api_key
        self.min_length = min_length
        self._clock = clock or SystemClock()
        self._cache: dict[str, _CacheEntry] = {}

    # ─── Credential ──────────────────────────────────────────────

    def set_credential(self, api_key: str | None) -> None:
        self._api_key = api_key

    def has_credential(self) -> bool:
        return bool(self._api_key)

    def get_credential(self) -> str:
        if not self._api_key:
            raise AuthFailure.missing_credential()
        return self._api_key

    def bearer_token(self) -> str:
        return f"Bearer {self.get_credential()}"

    def validate(self) -> None:
        """Raise AuthFailure if the credential is unset or shorter than min_length."""
        if not self.has_credential():
            raise AuthFailure.missing_credential()
        if len(self._api_key) < self.min_length:
            raise AuthFailure.credential_too_short(self.min_length)

    # ─── Cache ───────────────────────────────────────────────────

    def put(self, key: str, value: Any, ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS) -> None:
        self._cache[key] = _CacheEntry(value, self._clock.now() + ttl_seconds)

    def get(self, key: str) -> Any | None:
        entry = self._cache.get(key)
        if entry is None:
            return None
        if self._clock.now() >= entry.expires_at:
            del self._cache[key]
            return None
        return entry.value

    def clear(self, key: str | None = None) -> None:
        """Remove one entry, or every entry when key is None."""
        if key is None:
            self._cache.clear()
        else:
            self._cache.pop(key, None)

    def sweep_expired(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        now = self._clock.now()
        expired = [k for k, e in self._cache.items() if now >= e.expires_at]
        for key in expired:
            del self._cache[key]
        return len(expired)

    def size(self) -> int:
        return len(self._cache)
