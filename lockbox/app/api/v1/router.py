# lockbox/app/api/v1/router.py
from fastapi import APIRouter
from lockbox.app.api.v1.endpoints import auth, lockboxes, transfer

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(lockboxes.router, prefix="/lockboxes", tags=["lockboxes"])
api_router.include_router(transfer.router, prefix="/transfer", tags=["transfer"])
