# lockbox/app/schemas/lockbox.py
from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from typing import Annotated, Optional

from lockbox.app.core.constants import CATEGORIES


def _check_category(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in CATEGORIES:
        raise ValueError(f"Unknown category: {value}")
    return value


Category = Annotated[Optional[str], AfterValidator(_check_category)]


class LockboxCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    category: Category = None
    unlock_delay_seconds: int = Field(60, gt=0)
    relock_delay_seconds: int = Field(3600, gt=0)


class LockboxUpdate(BaseModel):
    # Only fields explicitly sent are applied (exclude_unset)
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=1)
    category: Category = None
    unlock_delay_seconds: Optional[int] = Field(None, gt=0)
    relock_delay_seconds: Optional[int] = Field(None, gt=0)


class LockboxResponse(BaseModel):
    id: int
    name: str
    content: str
    category: Optional[str]
    is_locked: bool
    unlock_delay_seconds: int
    relock_delay_seconds: int
    unlock_timestamp: Optional[int]
    relock_timestamp: Optional[int]
    created_at: int
    updated_at: int

    model_config = ConfigDict(from_attributes=True)
