"""
Manager Module - Black Box Interface

Purpose: Start and destroy visitor sessions
Interface: SessionManager.session_start(), session_destroy(), session_gc()
Hidden: Cookie encoding, provider selection, locking strategy

The provider behind the manager can be swapped through the registry
without affecting request handling code.
"""

from .cookie_transport import CookieTransport
from .factory import SessionFactory
from .manager import SessionManager

__all__ = ["CookieTransport", "SessionFactory", "SessionManager"]
