# lockbox/app/schemas/auth.py
from pydantic import BaseModel, Field
from typing import Optional


class MasterPasswordRequest(BaseModel):
    password: str = Field(..., min_length=1)


class MasterPasswordStatus(BaseModel):
    is_set: bool


class Token(BaseModel):
    access_token: str
    token_type: str


class TokenPayload(BaseModel):
    sub: Optional[str] = None
