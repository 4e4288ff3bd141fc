"""
Pydantic Schemas - Data Models

Defines the Pydantic schemas shared by the store, the API and the broadcast channel:
- User creation payloads (presence-only, no format validation)
- Stored user records
- Real-time video control events

Usage:
    from utils.schemas import UserCreate, UserRecord

    payload = UserCreate(**body)
    record = UserRecord(id=1, name="Ann", email="ann@x.com", timestamp="2025-01-15 03:15:02")
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

PLAY_VIDEO = "play-video"
STOP_VIDEO = "stop-video"


class UserCreate(BaseModel):
    """Body of ``POST /api/users``.

    Both fields are optional and accepted as-is: missing values are stored as
    NULL, empty strings are stored as empty strings.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    name: Optional[str] = Field(default=None, description="Display name")
    email: Optional[str] = Field(default=None, description="Email address, not validated")


class UserRecord(BaseModel):
    """A stored user row."""

    id: int = Field(..., description="Store-assigned identity")
    name: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)
    timestamp: str = Field(..., description="Insert time as stored (UTC, YYYY-MM-DD HH:MM:SS)")


class VideoEvent(BaseModel):
    """Real-time control frame.

    Wire format (JSON text frame):
    {
        "event": "play-video",
        "data": 7
    }

    ``stop-video`` frames carry no ``data`` key.
    """

    event: str = Field(..., description="Event name")
    data: Any = Field(default=None, description="Event payload, relayed verbatim")
