# lockbox/client/detail.py
"""
Detail view model for one lockbox.

Re-resolves the lockbox's status from the engine on every refresh and
keeps a Countdown pointed at the deadline that matters for that status.
Closing the view cancels the countdown.
"""
from typing import Callable, Optional

from lockbox.client.countdown import Countdown, TimeRemaining
from lockbox.client.engine import SyncEngine
from lockbox.client.models import Lockbox, LockboxStatus
from lockbox.client.status import countdown_target, resolve_status


class LockboxDetail:
    def __init__(
        self,
        engine: SyncEngine,
        lockbox_id: int,
        on_tick: Optional[Callable[[Optional[TimeRemaining]], None]] = None,
        interval: Optional[float] = None,
    ):
        self._engine = engine
        self.lockbox_id = lockbox_id
        self.countdown = Countdown(on_tick=on_tick, interval=interval, clock=engine.clock)
        self.status: Optional[LockboxStatus] = None

    @property
    def lockbox(self) -> Optional[Lockbox]:
        return self._engine.get(self.lockbox_id)

    @property
    def content(self) -> Optional[str]:
        """Plaintext if unlocked and already fetched, otherwise None."""
        return self._engine.decrypted_content(self.lockbox_id)

    def refresh(self, now: Optional[int] = None) -> Optional[LockboxStatus]:
        """
        Re-derive status and retarget the countdown if its deadline moved.

        Returns None once the lockbox has left the canonical list.
        """
        lockbox = self.lockbox
        if lockbox is None:
            self.status = None
            if self.countdown.target is not None:
                self.countdown.set_target(None)
            return None

        self.status = resolve_status(lockbox, self._engine.clock() if now is None else now)
        target = countdown_target(lockbox, self.status)
        if target != self.countdown.target:
            self.countdown.set_target(target)
        return self.status

    async def load_content(self) -> Optional[str]:
        """Ask the store for the plaintext when the lockbox is unlocked."""
        if self.refresh() is not LockboxStatus.UNLOCKED:
            return None
        await self._engine.fetch_decrypted(self.lockbox_id)
        return self.content

    def close(self) -> None:
        self.countdown.close()
