"""
Journeo Backend — Shared Schema Building Blocks
=================================================

What:  The camelCase base model every request/response schema derives from,
       the uniform error body and the health check payload.
How:   `alias_generator=to_camel` makes the wire names camelCase
       (numberOfDays, averageRating) while Python code keeps snake_case;
       `populate_by_name=True` also accepts snake_case keys on input.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def strip_required(value: Optional[str]) -> Optional[str]:
    """Field validator body: trims a string and rejects one that is blank."""
    if value is None:
        return value
    stripped = value.strip()
    if not stripped:
        raise ValueError("must not be blank")
    return stripped


def strip_optional(value: Optional[str]) -> Optional[str]:
    """Field validator body: trims a string and turns blank into None."""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


# ══════════════════════════════════════════════════════════════════════════
# Error / Health
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Uniform body of every non-2xx response.

    Example:
        {
            "status": 404,
            "error": "Not Found",
            "message": "Guide not found with id: 42",
            "path": "/guides/42"
        }
    """
    status: int = Field(description="HTTP status code")
    error: str = Field(description="Short status label (e.g. 'Not Found')")
    message: str = Field(description="Human-readable description of the failure")
    path: str = Field(description="Request path that produced the error")


class HealthResponse(BaseModel):
    """
    Health check payload.

    A backend that cannot reach its database or write its media directory
    is effectively down, so both are probed rather than just the process.
    """
    status: str = Field(description="Overall service status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    storage: str = Field(description="Media directory: writable, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
