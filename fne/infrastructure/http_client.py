"""Resilient HTTP Client - wraps httpx.AsyncClient with timeout, retry, backoff and error mapping.

Invariants:
    - Headers rebuilt on every attempt: JSON content type, SDK user agent, Bearer token when set
    - Each attempt runs under a timeout of timeout_ms; expiry -> TransportFailure(timeout)
    - 2xx returns the ResponseEnvelope immediately
    - 401 -> AuthFailure, other 4xx -> RemoteFailure: raised on first occurrence, never retried
    - Transport failures and 5xx: retried up to retry_attempts with 1s, 2s, 4s... waits (no jitter)
    - Exhausted retries raise the last classified failure
    - Every raised FneError carries method, endpoint and attempt in its context

Design Decisions:
    - Wrapper over raw httpx client: isolates retry logic from services
    - Retry/raise tie-break delegated to core.retry_policy (pure state machine)
    - sleep and transport injectable: tests run without real waits or sockets
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any
from urllib.parse import urlencode

import httpx

from fne.core.constants import (
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_TIMEOUT_MS,
    SDK_USER_AGENT,
)
from fne.core.credential_store import CredentialStore
from fne.core.errors import AuthFailure, FneError, RemoteFailure, TransportFailure
from fne.core.retry_policy import AttemptState, classify_status, next_decision
from fne.infrastructure.response import ResponseEnvelope

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[Any]]

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class ResilientHttpClient:
    """One logical request -> one ResponseEnvelope or one FneError."""

    def __init__(
        self,
        base_url: str,
        credentials: CredentialStore,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: SleepFn = asyncio.sleep,
    ):
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials
        self.timeout_ms = timeout_ms
        self.retry_attempts = retry_attempts
        self._sleep = sleep
        self.client = httpx.AsyncClient(
            transport=transport,
            timeout=httpx.Timeout(timeout_ms / 1000),
        )

    async def __aenter__(self) -> "ResilientHttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def post(
        self, path: str, payload: dict[str, Any] | None = None,
    ) -> ResponseEnvelope:
        return await self.execute("POST", path, payload if payload is not None else {})

    async def get(
        self, path: str, params: dict[str, str] | None = None,
    ) -> ResponseEnvelope:
        if params:
            path = f"{path}?{urlencode(params)}"
        return await self.execute("GET", path)

    async def execute(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
    ) -> ResponseEnvelope:
        """Run the request with retry on transient failures."""
        method = method.upper()
        url = f"{self.base_url}{path}"

        for attempt in range(1, self.retry_attempts + 1):
            headers = self._build_headers()
            try:
                envelope = await self._send(method, url, headers, payload)
            except TransportFailure as e:
                outcome: AttemptState = AttemptState.RETRYABLE_FAILURE
                failure: FneError = e
            else:
                outcome = classify_status(envelope.status_code)
                if outcome == AttemptState.SUCCESS:
                    self._log_success(method, path, envelope, attempt)
                    return envelope
                failure = self._failure_from(envelope)

            failure.with_context(method=method, endpoint=path, attempt=attempt)
            decision = next_decision(outcome, attempt, self.retry_attempts)
            if not decision.should_retry:
                self._log_failure(failure, attempt, decision.exhausted)
                raise failure

            logger.warning(
                f"Transient failure on {method} {path}, retry after "
                f"{decision.delay_ms}ms: {failure.message}",
                extra={
                    "method": method,
                    "endpoint": path,
                    "attempt": attempt,
                    "max_attempts": self.retry_attempts,
                    "delay_ms": decision.delay_ms,
                    "error_code": failure.code,
                },
            )
            await self._sleep(decision.delay_ms / 1000)

        raise TransportFailure.connection_failed().with_context(
            method=method, endpoint=path,
        )

    def _build_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": SDK_USER_AGENT,
        }
        if self.credentials.has_credential():
            headers["Authorization"] = self.credentials.bearer_token()
        return headers

    async def _send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        payload: dict[str, Any] | None,
    ) -> ResponseEnvelope:
        """Single attempt. Transport problems surface as TransportFailure."""
        body = payload if payload is not None and method in _BODY_METHODS else None
        try:
            response = await asyncio.wait_for(
                self.client.request(method, url, headers=headers, json=body),
                timeout=self.timeout_ms / 1000,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise TransportFailure.timeout(self.timeout_ms, cause=e) from e
        except httpx.HTTPError as e:
            raise TransportFailure.from_exception(e) from e
        return ResponseEnvelope.from_httpx(response)

    def _failure_from(self, envelope: ResponseEnvelope) -> FneError:
        if envelope.status_code == 401:
            return AuthFailure.unauthorized().with_context(status_code=401)
        return RemoteFailure.from_response(envelope.status_code, envelope.as_json())

    def _log_success(
        self, method: str, path: str, envelope: ResponseEnvelope, attempt: int,
    ) -> None:
        logger.info(
            f"FNE API success: {method} {path}",
            extra={
                "method": method,
                "endpoint": path,
                "attempt": attempt,
                "status_code": envelope.status_code,
            },
        )

    def _log_failure(self, failure: FneError, attempt: int, exhausted: bool) -> None:
        suffix = f" after {attempt} attempt(s)" if exhausted else ""
        logger.error(
            f"FNE API failure{suffix}: {failure.message}",
            extra={
                "method": failure.context.method,
                "endpoint": failure.context.endpoint,
                "attempt": attempt,
                "error_code": failure.code,
                "error_kind": failure.kind.value,
                "status_code": getattr(failure, "status_code", None),
            },
        )
