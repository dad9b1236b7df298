"""
Identifier Module - Black Box Interface

Purpose: Produce unguessable session identifiers
Interface: generate_session_id(), decode_session_id(), is_well_formed()
Hidden: Entropy source, encoding alphabet

Can be replaced with any other token scheme as long as tokens stay
unique, unguessable and cookie-safe.
"""

from .generator import SESSION_ID_BYTES, decode_session_id, generate_session_id, is_well_formed

__all__ = ["SESSION_ID_BYTES", "decode_session_id", "generate_session_id", "is_well_formed"]
