"""
Session Factory following Black Box Design principles.

This factory:
- Builds the provider registry from configuration
- Wires providers and the manager together
- Returns only the manager (hiding backend construction)
"""

import logging
from typing import Any, Optional

from ...config.provider import ConfigProvider
from ..provider import MemoryProvider, ProviderRegistry, RedisProvider
from .manager import SessionManager

logger = logging.getLogger(__name__)


class SessionFactory:
    """
    Factory for building the session stack.

    This is the composition root that:
    - Creates the registry and registers every available backend
    - Resolves the configured backend for the manager
    - Returns only the public interface
    """

    @staticmethod
    def build_registry(redis_client: Optional[Any] = None, redis_ttl: Optional[int] = None) -> ProviderRegistry:
        """
        Build a registry with the built-in providers.

        Args:
            redis_client: Optional async Redis client; enables the "redis" provider
            redis_ttl: Optional Redis-side expiry for session documents

        Returns:
            Populated ProviderRegistry
        """
        registry = ProviderRegistry()
        registry.register("memory", MemoryProvider())
        if redis_client is not None:
            registry.register("redis", RedisProvider(redis_client, ttl=redis_ttl))
        return registry

    @staticmethod
    def build(
        config_provider: ConfigProvider,
        redis_client: Optional[Any] = None,
        registry: Optional[ProviderRegistry] = None,
    ) -> SessionManager:
        """
        Build the session manager.

        Args:
            config_provider: Configuration provider
            redis_client: Optional Redis client for the redis backend
            registry: Pre-built registry (custom providers); built-ins are used if omitted

        Returns:
            SessionManager bound to the configured provider

        Raises:
            ProviderNotFoundError: If the configured provider is not registered
        """
        session_config = config_provider.get_session_config()

        if registry is None:
            registry = SessionFactory.build_registry(
                redis_client, redis_ttl=session_config.max_lifetime
            )

        manager = SessionManager(
            registry,
            provider_name=session_config.provider,
            cookie_name=session_config.cookie_name,
            max_lifetime=session_config.max_lifetime,
        )
        logger.info(
            f"Session manager using provider '{session_config.provider}' "
            f"(cookie={session_config.cookie_name}, max_lifetime={session_config.max_lifetime}s)"
        )
        return manager
