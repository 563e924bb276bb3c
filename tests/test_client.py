"""FNE Client - tests for factories, mode switching, configuration and end-to-end signing.

Tests cover:
    - test()/production() factories; production without URL raises ValueError
    - set_api_key is visible to the next request (shared CredentialStore)
    - enable_test_mode/enable_production_mode switch URL and reset services
    - services are lazily built and cached
    - validate_configuration raises AuthFailure for short keys
    - clear_cache empties the cache, keeps the key
    - from_settings maps FneSettings fields
    - full sign round trip with retries through the facade
"""

import json

import httpx
import pytest

from fne import FneClient, FneSettings
from fne.core.constants import TEST_BASE_URL
from fne.core.errors import AuthFailure, AuthReason

from tests.fakes import API_KEY, ManualClock, RecordedSleep, ScriptedTransport, make_invoice, ok

PRODUCTION_URL = "https://api.dgi.ci/ws"


# ─── Factories ───────────────────────────────────────────────────

async def test_test_factory():
    async with FneClient.test(API_KEY) as client:
        assert client.is_test_mode()
        assert client.get_config()["base_url"] == TEST_BASE_URL


async def test_production_factory():
    async with FneClient.production(API_KEY, PRODUCTION_URL) as client:
        assert not client.is_test_mode()
        assert client.get_config()["base_url"] == PRODUCTION_URL


@pytest.mark.parametrize("url", ["", "   ", None])
def test_production_requires_url(url):
    with pytest.raises(ValueError):
        FneClient.production(API_KEY, url)


# ─── Configuration ───────────────────────────────────────────────

async def test_get_config():
    async with FneClient.test(API_KEY, timeout_ms=5_000, retry_attempts=5) as client:
        assert client.get_config() == {
            "api_key": API_KEY,
            "base_url": TEST_BASE_URL,
            "test_mode": True,
            "timeout_ms": 5_000,
            "retry_attempts": 5,
        }


async def test_set_api_key_used_by_next_request():
    scripted = ScriptedTransport([ok(), ok()])
    async with FneClient.test(API_KEY, transport=scripted.transport) as client:
        await client.invoices().sign_invoice(make_invoice())
        client.set_api_key("new_api_key_minimum_20_chars")
        await client.invoices().sign_invoice(make_invoice())

        assert client.get_config()["api_key"] == "new_api_key_minimum_20_chars"
    assert scripted.requests[0].headers["authorization"] == f"Bearer {API_KEY}"
    assert scripted.requests[1].headers["authorization"] == "Bearer new_api_key_minimum_20_chars"


async def test_switch_modes_resets_services():
    scripted = ScriptedTransport([ok(), ok()])
    async with FneClient.test(API_KEY, transport=scripted.transport) as client:
        test_service = client.invoices()
        await test_service.sign_invoice(make_invoice())

        client.enable_production_mode(PRODUCTION_URL)
        prod_service = client.invoices()
        await prod_service.sign_invoice(make_invoice())

        assert prod_service is not test_service
        assert not client.is_test_mode()

        client.enable_test_mode()
        assert client.is_test_mode()
        assert client.get_config()["base_url"] == TEST_BASE_URL

    assert str(scripted.requests[0].url).startswith(TEST_BASE_URL)
    assert str(scripted.requests[1].url) == f"{PRODUCTION_URL}/external/invoices/sign"


async def test_enable_production_mode_requires_url():
    async with FneClient.test(API_KEY) as client:
        with pytest.raises(ValueError):
            client.enable_production_mode(" ")
        assert client.is_test_mode()


async def test_services_are_cached():
    async with FneClient.test(API_KEY) as client:
        assert client.invoices() is client.invoices()
        assert client.refunds() is client.refunds()
        assert client.purchases() is client.purchases()


async def test_validate_configuration():
    async with FneClient.test(API_KEY) as client:
        client.validate_configuration()
        client.set_api_key("short")
        with pytest.raises(AuthFailure) as exc_info:
            client.validate_configuration()
        assert exc_info.value.reason == AuthReason.CREDENTIAL_TOO_SHORT


async def test_clear_cache_keeps_credential():
    async with FneClient.test(API_KEY, clock=ManualClock()) as client:
        client.credentials.put("k", "v")
        assert client.clear_cache() is client
        assert client.credentials.get("k") is None
        assert client.get_config()["api_key"] == API_KEY


async def test_missing_key_reported_as_empty():
    async with FneClient() as client:
        assert client.get_config()["api_key"] == ""
        with pytest.raises(AuthFailure):
            client.validate_configuration()


# ─── Settings ────────────────────────────────────────────────────

async def test_from_settings():
    settings = FneSettings(
        _env_file=None,
        api_key=API_KEY,
        base_url=PRODUCTION_URL + "/",
        test_mode=False,
        timeout_ms=10_000,
        retry_attempts=2,
    )
    async with FneClient.from_settings(settings) as client:
        assert client.get_config() == {
            "api_key": API_KEY,
            "base_url": PRODUCTION_URL,
            "test_mode": False,
            "timeout_ms": 10_000,
            "retry_attempts": 2,
        }


def test_from_settings_empty_key_means_unset():
    client = FneClient.from_settings(FneSettings(_env_file=None))
    assert not client.credentials.has_credential()
    assert client.is_test_mode()


# ─── End to End ──────────────────────────────────────────────────

async def test_sign_with_retries_through_facade():
    scripted = ScriptedTransport([
        httpx.ConnectError("Connection refused"),
        httpx.Response(503),
        ok(),
    ])
    sleeper = RecordedSleep()

    async with FneClient.test(API_KEY, transport=scripted.transport, sleep=sleeper) as client:
        invoice = make_invoice()
        invoice.items[0].set_discount(10).add_custom_tax("DTD", 1000)
        response = await client.invoices().sign_invoice(invoice)

    assert response.is_success()
    assert sleeper.delays == [1.0, 2.0]
    item = json.loads(scripted.requests[-1].content)["items"][0]
    assert item["discount"] == 10
    assert item["customTaxes"] == [{"name": "DTD", "amount": 1000}]
