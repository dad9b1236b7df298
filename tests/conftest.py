"""
Shared pytest fixtures for Sessionward tests.

This module provides common fixtures including:
- FakeClock: Deterministic time source for expiry tests
- Registry/manager wiring around the in-memory provider
- Redis mocks for the redis provider tests
"""

import os
import sys
from http.cookies import SimpleCookie
from typing import Dict
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import Response

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sessionward.modules.manager import SessionManager
from sessionward.modules.provider import MemoryProvider, ProviderRegistry

COOKIE_NAME = "gosessionid"
MAX_LIFETIME = 3600


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def parse_set_cookies(response: Response) -> Dict[str, SimpleCookie]:
    """Parse every Set-Cookie header of a response, keyed by cookie name."""
    cookies = {}
    for header in response.headers.getlist("set-cookie"):
        parsed = SimpleCookie()
        parsed.load(header)
        for name in parsed:
            cookies[name] = parsed[name]
    return cookies


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_provider(clock):
    return MemoryProvider(clock=clock)


@pytest.fixture
def registry(memory_provider):
    registry = ProviderRegistry()
    registry.register("memory", memory_provider)
    return registry


@pytest.fixture
def manager(registry, clock):
    return SessionManager(
        registry,
        provider_name="memory",
        cookie_name=COOKIE_NAME,
        max_lifetime=MAX_LIFETIME,
        clock=clock,
    )


@pytest.fixture
def response():
    return Response()


@pytest.fixture
def mock_redis():
    """Create a mock Redis client."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock()
    redis.setex = AsyncMock()
    redis.delete = AsyncMock()
    redis.sadd = AsyncMock()
    redis.srem = AsyncMock()
    redis.smembers = AsyncMock(return_value=set())
    return redis


def make_mock_provider(**methods):
    """
    Build a mock provider with all four contract methods as AsyncMocks.

    Every method is assigned explicitly so the registry's protocol check
    sees real attributes. Pass side effects as keyword arguments.
    """
    provider = MagicMock()
    for name in ("session_init", "session_read", "session_destroy", "session_gc"):
        setattr(provider, name, methods.get(name, AsyncMock()))
    return provider
