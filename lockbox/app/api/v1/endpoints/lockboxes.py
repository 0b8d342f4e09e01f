# lockbox/app/api/v1/endpoints/lockboxes.py
"""
Lockbox endpoints: the authoritative side of the time lock.

Every state transition happens here and bumps updated_at, which clients
use to order concurrent responses:
- POST /{id}/unlock  - start the unlock delay
- POST /{id}/relock  - lock immediately
- POST /reconcile    - apply every elapsed unlock/relock, return the list

Content is only decrypted by GET /{id}, and only while unlocked.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from lockbox.app.api import deps
from lockbox.app.db.base import get_db
from lockbox.app.models.lockbox import Lockbox
from lockbox.app.schemas.auth import TokenPayload
from lockbox.app.schemas.lockbox import LockboxCreate, LockboxResponse, LockboxUpdate
from lockbox.app.security import crypto, timelock

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_or_404(db: AsyncSession, lockbox_id: int) -> Lockbox:
    item = await db.get(Lockbox, lockbox_id)
    if not item:
        raise HTTPException(status_code=404, detail="Lockbox not found")
    return item


async def _ensure_name_available(db: AsyncSession, name: str, exclude_id: Optional[int] = None):
    query = select(Lockbox.id).where(Lockbox.name == name)
    if exclude_id is not None:
        query = query.where(Lockbox.id != exclude_id)
    result = await db.execute(query)
    if result.scalars().first() is not None:
        raise HTTPException(status_code=400, detail="Lockbox name already exists")


async def _list_ordered(db: AsyncSession) -> List[Lockbox]:
    result = await db.execute(select(Lockbox).order_by(Lockbox.name.asc()))
    return list(result.scalars().all())


# 1. LIST (content stays encrypted)
@router.get("/", response_model=List[LockboxResponse])
async def read_lockboxes(
        db: AsyncSession = Depends(get_db),
        _owner: TokenPayload = Depends(deps.get_current_owner),
):
    return await _list_ordered(db)


# 2. RECONCILE - apply elapsed transitions against the service clock
@router.post("/reconcile", response_model=List[LockboxResponse])
async def reconcile_lockboxes(
        db: AsyncSession = Depends(get_db),
        _owner: TokenPayload = Depends(deps.get_current_owner),
):
    now = timelock.now_ms()

    completed = await db.execute(
        update(Lockbox)
        .where(
            Lockbox.is_locked.is_(True),
            Lockbox.unlock_timestamp.is_not(None),
            Lockbox.unlock_timestamp <= now,
        )
        .values(
            is_locked=False,
            relock_timestamp=timelock.relock_deadline(now, Lockbox.relock_delay_seconds),
            unlock_timestamp=None,
            updated_at=now,
        )
    )
    relocked = await db.execute(
        update(Lockbox)
        .where(
            Lockbox.is_locked.is_(False),
            Lockbox.relock_timestamp.is_not(None),
            Lockbox.relock_timestamp <= now,
        )
        .values(is_locked=True, relock_timestamp=None, updated_at=now)
    )
    await db.commit()

    if completed.rowcount or relocked.rowcount:
        logger.info(
            f"Reconciled lockboxes: {completed.rowcount} unlocked, {relocked.rowcount} relocked"
        )

    return await _list_ordered(db)


# 3. READ ONE - decrypted only while unlocked
@router.get("/{lockbox_id}", response_model=Optional[LockboxResponse])
async def read_lockbox(
        lockbox_id: int,
        db: AsyncSession = Depends(get_db),
        key_material: str = Depends(deps.get_key_material),
):
    item = await db.get(Lockbox, lockbox_id)
    if item is None:
        return None

    response = LockboxResponse.model_validate(item)
    if item.is_locked:
        return response

    try:
        return response.model_copy(update={"content": crypto.decrypt(item.content, key_material)})
    except crypto.CryptoError as e:
        # Imported or legacy content may not be ours to decrypt
        logger.warning(f"Could not decrypt lockbox {lockbox_id}: {e}")
        return response


# 4. CREATE
@router.post("/", response_model=LockboxResponse)
async def create_lockbox(
        item_in: LockboxCreate,
        db: AsyncSession = Depends(get_db),
        key_material: str = Depends(deps.get_key_material),
):
    await _ensure_name_available(db, item_in.name)

    now = timelock.now_ms()
    new_item = Lockbox(
        **item_in.model_dump(exclude={"content"}),
        content=crypto.encrypt(item_in.content, key_material),
        is_locked=True,
        created_at=now,
        updated_at=now,
    )
    db.add(new_item)
    await db.commit()
    await db.refresh(new_item)
    return new_item


# 5. UPDATE (partial)
@router.patch("/{lockbox_id}", response_model=LockboxResponse)
async def update_lockbox(
        lockbox_id: int,
        item_in: LockboxUpdate,
        db: AsyncSession = Depends(get_db),
        key_material: str = Depends(deps.get_key_material),
):
    item = await _get_or_404(db, lockbox_id)

    update_data = item_in.model_dump(exclude_unset=True)
    for required in ("name", "content", "unlock_delay_seconds", "relock_delay_seconds"):
        if required in update_data and update_data[required] is None:
            raise HTTPException(status_code=400, detail=f"{required} cannot be null")

    if "name" in update_data:
        await _ensure_name_available(db, update_data["name"], exclude_id=lockbox_id)
    if "content" in update_data:
        update_data["content"] = crypto.encrypt(update_data["content"], key_material)

    for key, value in update_data.items():
        setattr(item, key, value)
    item.updated_at = timelock.bump_updated_at(timelock.now_ms(), item.updated_at)

    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


# 6. DELETE
@router.delete("/{lockbox_id}")
async def delete_lockbox(
        lockbox_id: int,
        db: AsyncSession = Depends(get_db),
        _owner: TokenPayload = Depends(deps.get_current_owner),
):
    item = await _get_or_404(db, lockbox_id)
    await db.delete(item)
    await db.commit()
    return {"message": "Lockbox deleted successfully"}


# 7. UNLOCK - start the mandatory delay
@router.post("/{lockbox_id}/unlock", response_model=LockboxResponse)
async def unlock_lockbox(
        lockbox_id: int,
        db: AsyncSession = Depends(get_db),
        _owner: TokenPayload = Depends(deps.get_current_owner),
):
    item = await _get_or_404(db, lockbox_id)

    now = timelock.now_ms()
    item.unlock_timestamp = timelock.unlock_deadline(now, item.unlock_delay_seconds)
    item.updated_at = timelock.bump_updated_at(now, item.updated_at)

    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


# 8. RELOCK - immediately
@router.post("/{lockbox_id}/relock", response_model=LockboxResponse)
async def relock_lockbox(
        lockbox_id: int,
        db: AsyncSession = Depends(get_db),
        _owner: TokenPayload = Depends(deps.get_current_owner),
):
    item = await _get_or_404(db, lockbox_id)

    item.is_locked = True
    item.unlock_timestamp = None
    item.relock_timestamp = None
    item.updated_at = timelock.bump_updated_at(timelock.now_ms(), item.updated_at)

    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item
