"""
Pytest configuration and shared fixtures for client tests.

This module provides shared fixtures for the test suite: client
configuration, a recording sleep, and clients wired to scripted httpx
transports so that no test touches the network.
"""

import os
from collections.abc import AsyncGenerator, Callable

import pytest

# Keep real credentials from leaking into settings tests
os.environ.pop("GENAI_API_KEY", None)
os.environ.pop("GOOGLE_API_KEY", None)

from genai_client import ClientConfig, GenerativeClient, GenerationRequest, RetryPolicy
from tests.fixtures.test_data import RecordingSleep, ScriptedTransport, Step


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: integration test")
    config.addinivalue_line("markers", "slow: slow running test")


@pytest.fixture
def retry_policy() -> RetryPolicy:
    """Retry policy with small, distinct delays."""
    return RetryPolicy(max_attempts=3, base_delay=0.5, max_delay=8.0)


@pytest.fixture
def client_config(retry_policy) -> ClientConfig:
    """Client configuration carrying a test key."""
    return ClientConfig(api_key="test-key", retry=retry_policy, timeout=5.0)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    """Sleep replacement recording backoff delays."""
    return RecordingSleep()


@pytest.fixture
def sample_request() -> GenerationRequest:
    """Single-turn text request."""
    return GenerationRequest.from_text("Write a haiku about the sea")


@pytest.fixture
async def make_client(
    client_config, recording_sleep
) -> AsyncGenerator[Callable[..., tuple[GenerativeClient, ScriptedTransport]], None]:
    """Factory building clients backed by scripted transports."""
    clients: list[GenerativeClient] = []

    def factory(steps: list[Step], config: ClientConfig | None = None) -> tuple[GenerativeClient, ScriptedTransport]:
        scripted = ScriptedTransport(steps)
        client = GenerativeClient(config or client_config, http_transport=scripted.mock, sleep=recording_sleep)
        clients.append(client)
        return client, scripted

    yield factory

    for client in clients:
        await client.aclose()
