"""Pytest configuration and fixtures.

Provides environment isolation, logging configuration, marker handling,
automatic API test skipping, and a mock-backed client. Fixtures marked
autouse apply to every test.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import suppress
import logging
import os

import httpx
import pytest

from tests.helpers import FakeService
from trafikinfo.client import TrafficInformation
from trafikinfo.config import Config
from trafikinfo.decoding import DecoderCache
from trafikinfo.transport import HttpTransport

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_env(request, monkeypatch):
    """Clear TRAFIKINFO_* env vars to prevent test pollution.

    Opt-out: @pytest.mark.allow_env_pollution or @pytest.mark.api
    """
    if request.node.get_closest_marker("allow_env_pollution") or (
        "api" in request.node.keywords
    ):
        return

    for key in list(os.environ.keys()):
        if key.startswith("TRAFIKINFO_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Suppress noisy third-party loggers."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# =============================================================================
# Pytest Hooks
# =============================================================================

API_TESTS_REASON = "API tests require ENABLE_API_TESTS=1"


def _api_tests_enabled() -> bool:
    return bool(os.getenv("ENABLE_API_TESTS"))


def pytest_collection_modifyitems(items):
    """Automatically skip API tests when not explicitly enabled."""
    if _api_tests_enabled():
        return
    skip_api = pytest.mark.skip(reason=API_TESTS_REASON)
    for item in items:
        if "api" in item.keywords:
            item.add_marker(skip_api)


# =============================================================================
# Client Fixtures
# =============================================================================


@pytest.fixture
def config() -> Config:
    return Config(api_key="test-key", url="https://example.invalid/v2/data.xml")


@pytest.fixture
def service() -> FakeService:
    return FakeService()


@pytest.fixture
def http_client(service: FakeService) -> Iterator[httpx.Client]:
    client = httpx.Client(transport=httpx.MockTransport(service.handler))
    yield client
    client.close()


@pytest.fixture
def make_client(
    config: Config, http_client: httpx.Client
) -> Callable[..., TrafficInformation]:
    """Build a client wired to the fake service with fresh decoder caches."""

    def _make(**kwargs) -> TrafficInformation:
        kwargs.setdefault("local_decoders", DecoderCache())
        kwargs.setdefault("remote_decoders", DecoderCache())
        return TrafficInformation(
            config,
            transport=HttpTransport(config, client=http_client),
            **kwargs,
        )

    return _make


@pytest.fixture
def client(make_client: Callable[..., TrafficInformation]) -> TrafficInformation:
    return make_client()


@pytest.fixture
def api_key():
    """Return TRAFIKINFO_API_KEY or skip the test if unavailable."""
    key = os.getenv("TRAFIKINFO_API_KEY")
    if not key:
        pytest.skip("TRAFIKINFO_API_KEY not set")
    return key
