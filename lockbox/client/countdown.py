# lockbox/client/countdown.py
"""
Countdown to a pending unlock or relock.

A Countdown is owned by one detail view. It publishes a TimeRemaining
immediately when its target changes, then once per tick until the
remaining time reaches zero. Zero is published exactly once; after that
nothing is scheduled until the target changes again.

Usage:
    countdown = Countdown(on_tick=view.render_remaining)
    countdown.set_target(lockbox.unlock_timestamp)
    ...
    countdown.close()
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from lockbox.app.core.config import settings
from lockbox.app.security.timelock import now_ms

logger = logging.getLogger(__name__)

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR


@dataclass(frozen=True)
class TimeRemaining:
    days: int
    hours: int
    minutes: int
    seconds: int
    total_ms: int

    @property
    def is_elapsed(self) -> bool:
        return self.total_ms <= 0


def compute_time_remaining(target: Optional[int], now: Optional[int] = None) -> Optional[TimeRemaining]:
    """
    Break the time left until `target` into days/hours/minutes/seconds.

    Args:
        target: Epoch ms to count down to, or None
        now: Current epoch ms (defaults to the wall clock)

    Returns:
        TimeRemaining, or None when there is no target
    """
    if target is None:
        return None
    if now is None:
        now = now_ms()

    total = max(0, target - now)

    days, rest = divmod(total, MS_PER_DAY)
    hours, rest = divmod(rest, MS_PER_HOUR)
    minutes, rest = divmod(rest, MS_PER_MINUTE)
    seconds = rest // MS_PER_SECOND

    return TimeRemaining(days=days, hours=hours, minutes=minutes, seconds=seconds, total_ms=total)


def format_time_remaining(remaining: Optional[TimeRemaining]) -> str:
    if remaining is None or remaining.total_ms <= 0:
        return "00:00:00"

    clock = f"{remaining.hours:02d}:{remaining.minutes:02d}:{remaining.seconds:02d}"
    if remaining.days > 0:
        return f"{remaining.days}d {clock}"
    return clock


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''}"


def format_delay(seconds: int) -> str:
    """Render a configured delay in its largest whole unit, e.g. "2 hours"."""
    if seconds < 60:
        return _plural(seconds, "second")
    if seconds < 3600:
        return _plural(seconds // 60, "minute")
    if seconds < 86400:
        return _plural(seconds // 3600, "hour")
    return _plural(seconds // 86400, "day")


class Countdown:
    """
    Ticking computation of the time left until a target timestamp.

    Must be driven from inside a running event loop. The tick interval
    and clock are injectable so views and tests can control them.
    """

    def __init__(
        self,
        on_tick: Optional[Callable[[Optional[TimeRemaining]], None]] = None,
        interval: Optional[float] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self._on_tick = on_tick
        self._interval = settings.COUNTDOWN_TICK_SECONDS if interval is None else interval
        self._clock = clock
        self._target: Optional[int] = None
        self._remaining: Optional[TimeRemaining] = None
        self._task: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def target(self) -> Optional[int]:
        return self._target

    @property
    def remaining(self) -> Optional[TimeRemaining]:
        return self._remaining

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def set_target(self, target: Optional[int]) -> Optional[TimeRemaining]:
        """
        Point the countdown at a new target.

        The previous schedule is cancelled and the new value is computed
        and published right away, without waiting for a tick boundary.
        """
        if self._closed:
            raise RuntimeError("Countdown is closed")

        self._cancel()
        self._target = target
        remaining = self._publish()

        if remaining is not None and remaining.total_ms > 0:
            self._task = asyncio.get_running_loop().create_task(self._run(target))
        return remaining

    def close(self) -> None:
        """Stop ticking immediately. No further callbacks fire."""
        self._closed = True
        self._cancel()

    async def wait(self) -> None:
        """Wait until the current schedule finishes (reaches zero or is cancelled)."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    def _cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def _publish(self) -> Optional[TimeRemaining]:
        self._remaining = compute_time_remaining(self._target, self._clock())
        if self._on_tick is not None:
            self._on_tick(self._remaining)
        return self._remaining

    async def _run(self, target: int) -> None:
        while True:
            await asyncio.sleep(self._interval)
            if self._closed or self._target != target:
                return
            remaining = self._publish()
            if remaining is None or remaining.total_ms <= 0:
                logger.debug(f"Countdown to {target} elapsed")
                return
