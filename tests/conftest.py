"""Root conftest - shared fixtures for clock, sleep and HTTP pipeline construction."""

import os

import pytest

from fne.core.credential_store import CredentialStore
from fne.infrastructure.http_client import ResilientHttpClient

from tests.fakes import API_KEY, BASE_URL, ManualClock, RecordedSleep, ScriptedTransport

# Ensure tests never pick up a real key from the environment
for _var in [k for k in os.environ if k.startswith("FNE_")]:
    del os.environ[_var]


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def sleeper():
    return RecordedSleep()


@pytest.fixture
def credentials(clock):
    return CredentialStore(API_KEY, clock=clock)


@pytest.fixture
async def make_http(credentials, sleeper):
    """Factory: ResilientHttpClient over a ScriptedTransport. Closed after the test."""
    created: list[ResilientHttpClient] = []

    def _make(steps, retry_attempts=3, timeout_ms=30_000):
        scripted = ScriptedTransport(steps)
        http = ResilientHttpClient(
            BASE_URL,
            credentials,
            timeout_ms=timeout_ms,
            retry_attempts=retry_attempts,
            transport=scripted.transport,
            sleep=sleeper,
        )
        created.append(http)
        return http, scripted

    yield _make
    for http in created:
        await http.aclose()
