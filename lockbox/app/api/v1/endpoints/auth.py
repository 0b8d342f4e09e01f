# lockbox/app/api/v1/endpoints/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from lockbox.app.api.deps import get_master_password_hash
from lockbox.app.db.base import get_db
from lockbox.app.models.setting import Setting, MASTER_PASSWORD_HASH_KEY
from lockbox.app.schemas.auth import MasterPasswordRequest, MasterPasswordStatus, Token
from lockbox.app.security import hashing, jwt

logger = logging.getLogger(__name__)

router = APIRouter()


def _issue_token() -> Token:
    access_token = jwt.create_access_token(data={"sub": jwt.TOKEN_SUBJECT})
    return Token(access_token=access_token, token_type="bearer")


@router.get("/status", response_model=MasterPasswordStatus)
async def master_password_status(db: AsyncSession = Depends(get_db)):
    stored_hash = await get_master_password_hash(db)
    return MasterPasswordStatus(is_set=stored_hash is not None)


@router.post("/setup", response_model=Token)
async def setup_master_password(
        request: MasterPasswordRequest,
        db: AsyncSession = Depends(get_db)
):
    """
    Set the master password for the first time.

    The password cannot be replaced through this endpoint once set,
    otherwise existing content would become undecryptable.
    """
    if await get_master_password_hash(db) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Master password already set",
        )

    db.add(Setting(
        key=MASTER_PASSWORD_HASH_KEY,
        value=hashing.get_password_hash(request.password),
    ))
    await db.commit()
    logger.info("Master password configured")

    return _issue_token()


@router.post("/login", response_model=Token)
async def login(request: MasterPasswordRequest, db: AsyncSession = Depends(get_db)):
    stored_hash = await get_master_password_hash(db)

    if stored_hash is None or not hashing.verify_password(request.password, stored_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect master password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return _issue_token()
