# lockbox/client/models.py
"""
Client-side entity model.

Lockbox records are frozen: the engine replaces them wholesale when the
store answers, and readers can hold on to a record without seeing it
change underneath them.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from lockbox.app.core.config import settings


class LockboxStatus(str, Enum):
    LOCKED = "locked"
    UNLOCKING = "unlocking"
    UNLOCKED = "unlocked"
    # Presentation-only; resolve_status never returns it
    RELOCKING = "relocking"


class Lockbox(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    content: str
    category: Optional[str] = None
    is_locked: bool = True
    unlock_delay_seconds: int
    relock_delay_seconds: int
    unlock_timestamp: Optional[int] = None
    relock_timestamp: Optional[int] = None
    created_at: int
    updated_at: int

    @property
    def sort_key(self) -> str:
        return self.name.lower()


class CreateLockboxInput(BaseModel):
    name: str
    content: str
    category: Optional[str] = None
    unlock_delay_seconds: int = Field(default_factory=lambda: settings.DEFAULT_UNLOCK_DELAY_SECONDS)
    relock_delay_seconds: int = Field(default_factory=lambda: settings.DEFAULT_RELOCK_DELAY_SECONDS)
