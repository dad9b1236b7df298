"""
API Module - Black Box Interface

Purpose: Request/response models for the HTTP surface
Interface: SessionResponse, SessionValueRequest, SessionValueResponse, GCResponse, ErrorResponse
Hidden: Validation rules
"""

from .models import (
    ErrorResponse,
    GCResponse,
    HealthResponse,
    SessionResponse,
    SessionValueRequest,
    SessionValueResponse,
)

__all__ = [
    "ErrorResponse",
    "GCResponse",
    "HealthResponse",
    "SessionResponse",
    "SessionValueRequest",
    "SessionValueResponse",
]
