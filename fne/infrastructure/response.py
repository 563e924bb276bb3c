"""Response Envelope - immutable view over one HTTP response.

Invariants:
    - status_code, headers and body never change after construction
    - Header names are stored lower-cased; lookups are case-insensitive
    - as_json() parses at most once; the result (or None on parse failure) is memoized
"""

import json
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

import httpx

_UNPARSED = object()


class ResponseEnvelope:
    """Status, headers and raw body of a transport response."""

    __slots__ = ("_status_code", "_headers", "_body", "_json")

    def __init__(self, status_code: int, headers: Mapping[str, str], body: str):
        self._status_code = status_code
        self._headers = MappingProxyType({k.lower(): v for k, v in headers.items()})
        self._body = body
        self._json: Any = _UNPARSED

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "ResponseEnvelope":
        return cls(response.status_code, dict(response.headers), response.text)

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def headers(self) -> Mapping[str, str]:
        return self._headers

    @property
    def body(self) -> str:
        return self._body

    def header(self, name: str) -> str | None:
        return self._headers.get(name.lower())

    def as_json(self) -> Any | None:
        if self._json is _UNPARSED:
            try:
                self._json = json.loads(self._body)
            except ValueError:
                self._json = None
        return self._json

    # ─── Classification ──────────────────────────────────────────

    def is_success(self) -> bool:
        return 200 <= self._status_code < 300

    def is_redirect(self) -> bool:
        return 300 <= self._status_code < 400

    def is_client_error(self) -> bool:
        return 400 <= self._status_code < 500

    def is_server_error(self) -> bool:
        return self._status_code >= 500

    @property
    def content_type(self) -> str | None:
        return self.header("content-type")

    def is_json(self) -> bool:
        return "application/json" in (self.content_type or "")

    def __repr__(self) -> str:
        return f"ResponseEnvelope(status_code={self._status_code})"
