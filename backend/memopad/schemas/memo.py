"""
MemoPad Backend — Pydantic Request/Response Schemas
====================================================

What:  Pydantic models defining the JSON contract of the memo API.
Why:   Request bodies are validated before a handler runs, responses are
       serialized consistently, and OpenAPI docs are generated from them.

Design Decision:
    Schemas are separate from the SQLAlchemy model. The storage adapter hands
    back `MemoResponse` objects, so handlers only ever hold transient copies
    and never a live ORM row.
"""

from typing import List

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class MemoCreate(BaseModel):
    """
    What:  Body of POST /memo/submit/.
    Why extra="allow": The create endpoint echoes the body it received, so
           fields the API does not use are kept instead of dropped.
    """
    text: str = Field(description="Memo content. Any string, including empty.")

    model_config = {"extra": "allow"}


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class MemoResponse(BaseModel):
    """A stored memo."""
    id: int = Field(description="Identifier assigned by storage on insert")
    text: str = Field(description="Memo content")

    model_config = {"from_attributes": True}


class MemoListData(BaseModel):
    """The envelope: a display title plus every stored memo in creation order."""
    title: str = Field(description="Fixed display title for the list view")
    content: List[MemoResponse] = Field(description="All memos, oldest first")


class MemoListResponse(BaseModel):
    """Returned by GET /memo/."""
    data: MemoListData


class ErrorResponse(BaseModel):
    """
    What:  Error body used by every failure response.

    Example:
        {"error": "Memo not found"}
    """
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
