# lockbox/app/api/v1/endpoints/transfer.py
"""
Export/import of lockboxes.

Endpoints:
- GET /transfer/export - serialize every lockbox (content stays encrypted)
- POST /transfer/import - create lockboxes from an export blob

Import skips any lockbox whose name already exists and always creates
entries locked, with fresh timestamps.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lockbox.app.api import deps
from lockbox.app.core.constants import EXPORT_FORMAT_VERSION
from lockbox.app.db.base import get_db
from lockbox.app.models.lockbox import Lockbox
from lockbox.app.schemas.auth import TokenPayload
from lockbox.app.schemas.transfer import (
    ExportData,
    ExportLockbox,
    ExportResponse,
    ImportRequest,
    ImportResponse,
)
from lockbox.app.security import timelock

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/export", response_model=ExportResponse)
async def export_lockboxes(
        db: AsyncSession = Depends(get_db),
        _owner: TokenPayload = Depends(deps.get_current_owner),
):
    result = await db.execute(select(Lockbox).order_by(Lockbox.name.asc()))
    lockboxes = result.scalars().all()

    export_data = ExportData(
        version=EXPORT_FORMAT_VERSION,
        exported_at=timelock.now_ms(),
        lockboxes=[
            ExportLockbox(
                name=lb.name,
                content=lb.content,
                category=lb.category,
                unlock_delay_seconds=lb.unlock_delay_seconds,
                relock_delay_seconds=lb.relock_delay_seconds,
            )
            for lb in lockboxes
        ],
    )

    return ExportResponse(data=export_data.model_dump_json(indent=2))


@router.post("/import", response_model=ImportResponse)
async def import_lockboxes(
        request: ImportRequest,
        db: AsyncSession = Depends(get_db),
        _owner: TokenPayload = Depends(deps.get_current_owner),
):
    try:
        export_data = ExportData.model_validate_json(request.data)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file format: {e.error_count()} error(s)",
        )

    result = await db.execute(select(Lockbox.name))
    existing_names = set(result.scalars().all())

    imported = []
    now = timelock.now_ms()
    for lb in export_data.lockboxes:
        if lb.name in existing_names:
            continue

        db.add(Lockbox(
            name=lb.name,
            content=lb.content,
            category=lb.category,
            is_locked=True,
            unlock_delay_seconds=lb.unlock_delay_seconds,
            relock_delay_seconds=lb.relock_delay_seconds,
            created_at=now,
            updated_at=now,
        ))
        existing_names.add(lb.name)
        imported.append(lb.name)

    await db.commit()
    logger.info(f"Imported {len(imported)} lockbox(es), skipped {len(export_data.lockboxes) - len(imported)}")

    return ImportResponse(imported=imported)
