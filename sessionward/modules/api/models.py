"""
Sessionward HTTP data models.

These models define the request and response bodies of the demo API.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

# Request Models (API Input)


class SessionValueRequest(BaseModel):
    """Value to store under a session key."""

    value: Any = Field(..., description="JSON value to store")


# Response Models (API Output)


class SessionResponse(BaseModel):
    """The caller's session."""

    session_id: str = Field(..., description="Opaque session identifier")
    provider: str = Field(..., description="Backend holding the session")


class SessionValueResponse(BaseModel):
    """A single stored value."""

    session_id: str
    key: str
    value: Any = None


class GCResponse(BaseModel):
    """Result of a manual expiry sweep."""

    evicted: int = Field(..., ge=0)
    max_lifetime: int = Field(..., ge=0)


class HealthResponse(BaseModel):
    status: str = "healthy"
    provider: Optional[str] = None
    collector_running: bool = False


class ErrorResponse(BaseModel):
    """Structured error body."""

    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
