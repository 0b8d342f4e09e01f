# lockbox/client/session.py
"""
Authenticated session context.

A Session is created against a store, becomes authenticated through
setup() or login(), and owns for its lifetime:
- the SyncEngine holding the canonical lockbox list
- the background reconciliation task

logout() cancels the task and wipes the engine, including any decrypted
content, before dropping the store credentials.

Usage:
    async with Session(HttpSecretStore()) as session:
        await session.login(password)
        await session.engine.fetch_all()
        ...
"""
import asyncio
import logging
from typing import Callable, List, Optional

from lockbox.app.core.config import settings
from lockbox.app.security.timelock import now_ms
from lockbox.client.engine import SyncEngine
from lockbox.client.errors import AuthError, ValidationError
from lockbox.client.store import SecretStore
from lockbox.client.validation import validate_new_password

logger = logging.getLogger(__name__)


class Session:
    def __init__(
        self,
        store: SecretStore,
        reconcile_interval: Optional[float] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self._store = store
        self._clock = clock
        self._interval = (
            settings.RECONCILE_INTERVAL_SECONDS if reconcile_interval is None else reconcile_interval
        )
        self._engine: Optional[SyncEngine] = None
        self._task: Optional[asyncio.Task] = None
        self.is_master_password_set: Optional[bool] = None

    async def __aenter__(self) -> "Session":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.logout()

    @property
    def is_authenticated(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> SyncEngine:
        if self._engine is None:
            raise AuthError("Not authenticated")
        return self._engine

    @property
    def reconciling(self) -> bool:
        return self._task is not None and not self._task.done()

    async def check_master_password(self) -> bool:
        self.is_master_password_set = await self._store.is_master_password_set()
        return self.is_master_password_set

    async def setup(self, password: str, confirmation: str) -> SyncEngine:
        """Set the master password for the first time and open the session."""
        validate_new_password(password, confirmation)
        await self._store.set_master_password(password)
        self.is_master_password_set = True
        return self._open()

    async def login(self, password: str) -> SyncEngine:
        if not password:
            raise ValidationError("password", "is required")
        if not await self._store.verify_master_password(password):
            raise AuthError()
        return self._open()

    async def logout(self) -> None:
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        if self._engine is not None:
            self._engine.close()
            self._engine = None
            logger.info("Session closed")

        forget = getattr(self._store, "forget_credentials", None)
        if forget is not None:
            forget()

    async def export_all(self) -> str:
        return await self.engine.export_all()

    async def import_all(self, blob: str) -> List[str]:
        """Import an export blob; the lockbox list is refreshed afterwards."""
        return await self.engine.import_all(blob)

    def _open(self) -> SyncEngine:
        if self._engine is None:
            self._engine = SyncEngine(self._store, clock=self._clock)
            self._task = asyncio.get_running_loop().create_task(
                self._reconcile_loop(self._engine)
            )
            logger.info(f"Session opened, reconciling every {self._interval}s")
        return self._engine

    async def _reconcile_loop(self, engine: SyncEngine) -> None:
        while True:
            await engine.reconcile()
            await asyncio.sleep(self._interval)
