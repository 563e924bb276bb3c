"""Test Doubles - deterministic clock, recorded sleep and a scripted httpx transport.

Invariants:
    - ManualClock only moves when advance() is called
    - RecordedSleep never waits; it records the requested delays in seconds
    - ScriptedTransport replays one step per request: an httpx.Response, an exception
      to raise, or a Stall that blocks longer than any test timeout
    - Builders return fresh, valid documents on every call

Design Decisions:
    - httpx.MockTransport over patching the client: the real pipeline code path runs end to end
    - Flat classes, no inheritance: simple, explicit, easy to debug
"""

import asyncio
from typing import Any

import httpx

from fne.core.models import Invoice, InvoiceItem

API_KEY = "test_api_key_minimum_20_chars"
BASE_URL = "http://fne.test/ws"


# -- Time ----------------------------------------------------------------------


class ManualClock:
    """Clock whose time is set by the test."""

    def __init__(self, start: float = 1_000.0):
        self.current = start

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class RecordedSleep:
    """Replacement for asyncio.sleep that records delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


# -- Network -------------------------------------------------------------------


class Stall:
    """Script step that hangs the request for `seconds`."""

    def __init__(self, seconds: float = 5.0):
        self.seconds = seconds


class ScriptedTransport:
    """Sequences pre-configured outcomes, one per request."""

    def __init__(self, steps: list[Any]):
        self._steps = list(steps)
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._steps:
            raise AssertionError(
                f"ScriptedTransport: no step for request {len(self.requests)}",
            )
        step = self._steps.pop(0)
        if isinstance(step, Stall):
            await asyncio.sleep(step.seconds)
            return httpx.Response(200, json={})
        if isinstance(step, BaseException):
            raise step
        return step


# -- Builders ------------------------------------------------------------------


def sign_body(**overrides: Any) -> dict[str, Any]:
    """Realistic sign/refund response body."""
    body = {
        "ncc": "9502363N",
        "reference": "9502363N25000000019",
        "token": "http://54.247.95.108/fr/verification/019465c1-3f61-766c-9652-706e32dfb436",
        "warning": False,
        "balance_sticker": 179,
        "invoice": {"id": "e2b2d8da-a532-4c08-9182-f5b428ca468d", "status": "signed"},
    }
    body.update(overrides)
    return body


def ok(body: dict[str, Any] | None = None, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=body if body is not None else sign_body())


def make_item(**overrides: Any) -> InvoiceItem:
    fields = {"description": "Rice 25kg bag", "quantity": 2, "amount": 15_000, "taxes": ["TVA"]}
    fields.update(overrides)
    return InvoiceItem(**fields)


def make_invoice(with_item: bool = True, **overrides: Any) -> Invoice:
    """Sale / cash / B2C invoice that passes validation as-is."""
    fields = {
        "invoice_type": "sale",
        "payment_method": "cash",
        "template": "B2C",
        "point_of_sale": "POS-01",
        "establishment": "Abidjan Plateau",
        "client_company_name": "Koffi & Fils SARL",
        "client_phone": "0709080765",
        "client_email": "compta@koffi.ci",
    }
    fields.update(overrides)
    invoice = Invoice(**fields)
    if with_item:
        invoice.add_item(make_item())
    return invoice
