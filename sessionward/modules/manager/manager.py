import asyncio
import logging
import time
from datetime import UTC, datetime
from typing import Any, Awaitable, Callable, Mapping, TypeVar

from ..errors import ConfigurationError, CookieDecodeError, ProviderError
from ..identifier import generate_session_id
from ..provider import Provider, ProviderRegistry, Session
from .cookie_transport import CookieTransport

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SessionManager:
    """
    Orchestrates session start/destroy against one provider.

    A single asyncio lock serializes session_start, session_destroy and
    every GC tick, so no two of them touch the provider at the same time.
    This trades throughput for simplicity; a per-identifier lock could
    replace it without changing observable behavior.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        provider_name: str,
        cookie_name: str,
        max_lifetime: int,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize session manager.

        Args:
            registry: Registry holding the available providers
            provider_name: Name of the provider to use
            cookie_name: Name of the session cookie
            max_lifetime: Idle expiry in seconds (0 = browser-session cookie)
            clock: Returns the current time in seconds

        Raises:
            ProviderNotFoundError: If provider_name is not registered
            ConfigurationError: If cookie_name is empty or max_lifetime < 0
        """
        if not cookie_name:
            raise ConfigurationError("Session cookie name must not be empty")
        if max_lifetime < 0:
            raise ConfigurationError(
                "Session max lifetime must not be negative",
                details={"max_lifetime": max_lifetime},
            )

        self.provider: Provider = registry.resolve(provider_name)
        self.provider_name = provider_name
        self.cookie_name = cookie_name
        self.max_lifetime = max_lifetime
        self.transport = CookieTransport(cookie_name, max_lifetime)
        self._clock = clock
        self._lock = asyncio.Lock()

    async def session_start(self, cookies: Mapping[str, str], response: Any) -> Session:
        """
        Resolve the visitor's session, creating one if needed.

        Args:
            cookies: Request cookies
            response: Response to attach the session cookie to

        Returns:
            The visitor's session

        Raises:
            RandomnessError: If no identifier could be generated
            ProviderError: If the provider failed

        Logic:
        1. Read the session cookie (malformed counts as absent)
        2. No cookie: new id, provider init, set cookie on response
        3. Cookie: provider read, which recreates missing or expired sessions
        """
        async with self._lock:
            try:
                session_id = self.transport.read(cookies)
            except CookieDecodeError:
                logger.debug("Ignoring malformed session cookie")
                session_id = None

            if session_id is None:
                session_id = generate_session_id()
                session = await self._call("init", session_id, self.provider.session_init)
                self.transport.write(response, session_id)
                logger.debug(f"Started new session {session_id[:8]}...")
                return session

            return await self._call(
                "read", session_id, self.provider.session_read, self.max_lifetime
            )

    async def session_destroy(self, cookies: Mapping[str, str], response: Any) -> None:
        """
        Destroy the visitor's session and expire the cookie.

        Does nothing when the request carries no session cookie.
        """
        try:
            session_id = self.transport.read(cookies)
        except CookieDecodeError:
            logger.debug("Ignoring malformed session cookie on destroy")
            return
        if session_id is None:
            return

        async with self._lock:
            await self._call("destroy", session_id, self.provider.session_destroy)
            self.transport.expire(response, datetime.fromtimestamp(self._clock(), UTC))
        logger.debug(f"Destroyed session {session_id[:8]}...")

    async def session_gc(self) -> int:
        """
        Run one expiry sweep on the provider.

        Returns:
            Number of sessions evicted
        """
        async with self._lock:
            try:
                removed = await self.provider.session_gc(self.max_lifetime)
            except ProviderError:
                raise
            except Exception as e:
                raise ProviderError("gc", f"Session sweep failed: {e}") from e

        if removed:
            logger.info(f"Session sweep evicted {removed} session(s)")
        return removed

    async def _call(
        self,
        operation: str,
        session_id: str,
        method: Callable[..., Awaitable[T]],
        *args: Any,
    ) -> T:
        try:
            return await method(session_id, *args)
        except ProviderError:
            raise
        except Exception as e:
            logger.error(f"Session provider '{self.provider_name}' failed on {operation}: {e}")
            raise ProviderError(operation, f"Session {operation} failed: {e}", session_id) from e
