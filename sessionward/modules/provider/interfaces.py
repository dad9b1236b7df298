"""Provider and session contracts following Black Box Design principles."""
from typing import Any, Optional, Protocol, runtime_checkable


class _Missing:
    """Marker returned by Session.get() for keys that were never set."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@runtime_checkable
class Session(Protocol):
    """Protocol for a per-visitor key/value store."""

    async def set(self, key: str, value: Any) -> None:
        """
        Store a value, replacing any previous value for the key.

        Args:
            key: Value name
            value: Any value the backend can hold
        """
        ...

    async def get(self, key: str) -> Any:
        """
        Fetch a value.

        Returns:
            The stored value, or MISSING if the key was never set
        """
        ...

    async def delete(self, key: str) -> None:
        """Remove a key. Removing an unknown key is not an error."""
        ...

    def identifier(self) -> str:
        """Return the session identifier."""
        ...


@runtime_checkable
class Provider(Protocol):
    """Protocol for session storage backends."""

    async def session_init(self, session_id: str) -> Session:
        """Create a fresh session under the given identifier."""
        ...

    async def session_read(
        self, session_id: str, max_lifetime: Optional[int] = None
    ) -> Session:
        """
        Return the session for an identifier, refreshing its last access.

        A missing identifier is not an error: a fresh session is created
        under it and returned. When max_lifetime is given, a session idle
        for longer than that is replaced by a fresh one under the same id.
        """
        ...

    async def session_destroy(self, session_id: str) -> None:
        """Remove the session for an identifier if it exists."""
        ...

    async def session_gc(self, max_lifetime: int) -> int:
        """
        Evict every session idle for longer than max_lifetime seconds.

        Returns:
            Number of sessions removed
        """
        ...
