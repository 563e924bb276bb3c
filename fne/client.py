"""FNE Client - entry point wiring credentials, the HTTP pipeline and the services.

Invariants:
    - The CredentialStore is owned here and shared by reference with the pipeline:
      set_api_key() is visible to the very next request
    - Services are built lazily and cached; switching mode rebuilds the pipeline and resets them
    - Production mode always needs an explicit, non-blank base URL
    - The environment is never read implicitly; from_settings() is the opt-in path
"""

import asyncio
import logging
from typing import Any

import httpx

from fne.config import FneSettings, get_settings
from fne.core.clock import Clock
from fne.core.constants import (
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_TIMEOUT_MS,
    MIN_API_KEY_LENGTH,
    TEST_BASE_URL,
)
from fne.core.credential_store import CredentialStore
from fne.infrastructure.http_client import ResilientHttpClient, SleepFn
from fne.infrastructure.observability import setup_logging
from fne.services.invoice_service import InvoiceService
from fne.services.purchase_service import PurchaseService
from fne.services.refund_service import RefundService

logger = logging.getLogger(__name__)


def _require_url(base_url: str | None) -> str:
    if not base_url or not base_url.strip():
        raise ValueError("A production base URL is required")
    return base_url.strip()


class FneClient:
    """Facade over the FNE signing API."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = TEST_BASE_URL,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
        min_api_key_length: int = MIN_API_KEY_LENGTH,
        test_mode: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: SleepFn = asyncio.sleep,
        clock: Clock | None = None,
    ):
        self.credentials = CredentialStore(api_key, min_api_key_length, clock)
        self._base_url = base_url
        self._test_mode = test_mode
        self._timeout_ms = timeout_ms
        self._retry_attempts = retry_attempts
        self._transport = transport
        self._sleep = sleep
        self._retired: list[ResilientHttpClient] = []
        self.http = self._build_http()
        self._invoices: InvoiceService | None = None
        self._refunds: RefundService | None = None
        self._purchases: PurchaseService | None = None

    # ─── Factories ───────────────────────────────────────────────

    @classmethod
    def test(cls, api_key: str, **kwargs: Any) -> "FneClient":
        return cls(api_key=api_key, base_url=TEST_BASE_URL, test_mode=True, **kwargs)

    @classmethod
    def production(cls, api_key: str, base_url: str, **kwargs: Any) -> "FneClient":
        return cls(
            api_key=api_key, base_url=_require_url(base_url), test_mode=False, **kwargs,
        )

    @classmethod
    def from_settings(
        cls,
        settings: FneSettings | None = None,
        configure_logging: bool = False,
        **kwargs: Any,
    ) -> "FneClient":
        """Build a client from FneSettings (FNE_* environment by default)."""
        settings = settings or get_settings()
        if configure_logging:
            setup_logging(settings.log_level, settings.log_format)
        base_url = settings.base_url if settings.test_mode else _require_url(settings.base_url)
        return cls(
            api_key=settings.api_key or None,
            base_url=base_url,
            timeout_ms=settings.timeout_ms,
            retry_attempts=settings.retry_attempts,
            min_api_key_length=settings.min_api_key_length,
            test_mode=settings.test_mode,
            **kwargs,
        )

    # ─── Configuration ───────────────────────────────────────────

    def set_api_key(self, api_key: str | None) -> "FneClient":
        self.credentials.set_credential(api_key)
        return self

    def enable_test_mode(self) -> "FneClient":
        self._test_mode = True
        self._base_url = TEST_BASE_URL
        self._rebuild_http()
        return self

    def enable_production_mode(self, production_url: str) -> "FneClient":
        self._base_url = _require_url(production_url)
        self._test_mode = False
        self._rebuild_http()
        return self

    def is_test_mode(self) -> bool:
        return self._test_mode

    def get_config(self) -> dict[str, Any]:
        return {
            "api_key": self.credentials.get_credential() if self.credentials.has_credential() else "",
            "base_url": self._base_url,
            "test_mode": self._test_mode,
            "timeout_ms": self._timeout_ms,
            "retry_attempts": self._retry_attempts,
        }

    def validate_configuration(self) -> None:
        """Raise AuthFailure if the API key is missing or too short."""
        self.credentials.validate()

    def clear_cache(self) -> "FneClient":
        self.credentials.clear()
        return self

    # ─── Services ────────────────────────────────────────────────

    def invoices(self) -> InvoiceService:
        if self._invoices is None:
            self._invoices = InvoiceService(self.http)
        return self._invoices

    def refunds(self) -> RefundService:
        if self._refunds is None:
            self._refunds = RefundService(self.http)
        return self._refunds

    def purchases(self) -> PurchaseService:
        if self._purchases is None:
            self._purchases = PurchaseService(self.http)
        return self._purchases

    # ─── Lifecycle ───────────────────────────────────────────────

    async def __aenter__(self) -> "FneClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        for http in (*self._retired, self.http):
            await http.aclose()
        self._retired.clear()

    def _build_http(self) -> ResilientHttpClient:
        return ResilientHttpClient(
            self._base_url,
            self.credentials,
            timeout_ms=self._timeout_ms,
            retry_attempts=self._retry_attempts,
            transport=self._transport,
            sleep=self._sleep,
        )

    def _rebuild_http(self) -> None:
        # Old pipeline may still be referenced by a caller's service; closed in aclose().
        self._retired.append(self.http)
        self.http = self._build_http()
        self._invoices = None
        self._refunds = None
        self._purchases = None
        logger.info(
            f"FNE client switched to {'test' if self._test_mode else 'production'} mode",
            extra={"endpoint": self._base_url},
        )
