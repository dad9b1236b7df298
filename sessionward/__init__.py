"""
Sessionward - Server-side Session Lifecycle Manager

Issues an opaque identifier to each visitor, keeps a per-visitor key/value
store behind it, carries the identifier in a cookie and reclaims sessions
that have been idle for too long.

Architecture:
- Each module is self-contained with clear interfaces
- Storage backends (providers) are completely replaceable
- The manager only talks to a provider through its contract
- All communication through defined interfaces

Modules:
- identifier: Unguessable session identifier generation
- provider: Provider/Session contracts, registry and backends
- manager: Session start/destroy protocol and cookie transport
- gc: Periodic expiry sweep
- storage: Redis connection handling
- api: HTTP request/response models
"""

__version__ = "1.0.0"
