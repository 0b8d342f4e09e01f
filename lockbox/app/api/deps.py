# lockbox/app/api/deps.py
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from lockbox.app.core.config import settings
from lockbox.app.db.base import get_db
from lockbox.app.models.setting import Setting, MASTER_PASSWORD_HASH_KEY
from lockbox.app.schemas.auth import TokenPayload
from lockbox.app.security.jwt import TOKEN_SUBJECT

reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login"
)


async def get_master_password_hash(db: AsyncSession) -> Optional[str]:
    setting = await db.get(Setting, MASTER_PASSWORD_HASH_KEY)
    return setting.value if setting else None


async def get_current_owner(
        token: str = Depends(reusable_oauth2)
) -> TokenPayload:
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        token_data = TokenPayload(**payload)
    except (JWTError, ValidationError):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Could not validate credentials",
        )

    if token_data.sub != TOKEN_SUBJECT:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Could not validate credentials",
        )

    return token_data


async def get_key_material(
        db: AsyncSession = Depends(get_db),
        _owner: TokenPayload = Depends(get_current_owner),
) -> str:
    # Content is encrypted under the stored master password hash
    key_material = await get_master_password_hash(db)
    if key_material is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Master password is not set",
        )
    return key_material
