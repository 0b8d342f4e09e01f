# lockbox/app/security/jwt.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt

from lockbox.app.core.config import settings

# Single-user vault: every token is issued to the same subject
TOKEN_SUBJECT = "owner"


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
