"""Catalog of named session providers, populated once at startup."""
import logging
import threading
from typing import Dict, List

from ..errors import ConfigurationError, ProviderNotFoundError
from .interfaces import Provider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """
    Write-once mapping from backend name to provider instance.

    Build one registry in the composition root and hand it to every
    SessionManager. Registration mistakes are configuration errors and
    surface immediately instead of overwriting an existing backend.
    """

    def __init__(self):
        self._providers: Dict[str, Provider] = {}
        self._lock = threading.Lock()

    def register(self, name: str, provider: Provider) -> None:
        """
        Register a provider under a name.

        Args:
            name: Backend name (e.g. "memory", "redis")
            provider: Object implementing the Provider protocol

        Raises:
            ConfigurationError: If the name is empty or taken, or provider
                is None or does not implement the Provider protocol
        """
        if not name:
            raise ConfigurationError("Session provider name must not be empty")
        if provider is None:
            raise ConfigurationError(
                f"Session provider '{name}' is None", details={"provider": name}
            )
        if not isinstance(provider, Provider):
            raise ConfigurationError(
                f"Session provider '{name}' does not implement the provider contract",
                details={"provider": name, "type": type(provider).__name__},
            )

        with self._lock:
            if name in self._providers:
                raise ConfigurationError(
                    f"Session provider '{name}' is already registered",
                    details={"provider": name},
                )
            self._providers[name] = provider

        logger.debug(f"Registered session provider '{name}' ({type(provider).__name__})")

    def resolve(self, name: str) -> Provider:
        """
        Look up a provider by name.

        Raises:
            ProviderNotFoundError: If nothing is registered under the name
        """
        with self._lock:
            provider = self._providers.get(name)
        if provider is None:
            raise ProviderNotFoundError(name, self.names())
        return provider

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._providers)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._providers

    def __len__(self) -> int:
        with self._lock:
            return len(self._providers)
