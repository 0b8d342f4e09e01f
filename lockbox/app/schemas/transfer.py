# lockbox/app/schemas/transfer.py
"""
Pydantic schemas for the export/import endpoints.

An export blob is the pretty-printed JSON of ExportData. Content is
carried exactly as stored, i.e. still encrypted.
"""
from pydantic import BaseModel
from typing import List, Optional


class ExportLockbox(BaseModel):
    name: str
    content: str
    category: Optional[str] = None
    unlock_delay_seconds: int
    relock_delay_seconds: int


class ExportData(BaseModel):
    version: str
    exported_at: int
    lockboxes: List[ExportLockbox]


class ExportResponse(BaseModel):
    data: str


class ImportRequest(BaseModel):
    data: str


class ImportResponse(BaseModel):
    imported: List[str]
