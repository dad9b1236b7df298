"""
GC Module - Black Box Interface

Purpose: Periodically evict expired sessions
Interface: SessionCollector.start(), stop(), run_once()
Hidden: Scheduling, shutdown signalling, tick error handling

Can be replaced with an external scheduler (cron, Celery beat) that calls
SessionManager.session_gc() on its own.
"""

from .collector import SessionCollector

__all__ = ["SessionCollector"]
