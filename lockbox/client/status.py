# lockbox/client/status.py
"""
Status resolution for lockboxes.

The status is never stored. It is derived from the authoritative
is_locked flag and the pending timestamps, against the local clock:

    is_locked  unlock_timestamp in future  -> unlocking
    is_locked  otherwise                   -> locked
    unlocked   relock_timestamp in future  -> unlocked
    unlocked   otherwise                   -> locked (relock pending)

Because the answer depends on the clock, callers re-resolve on every
tick instead of caching it. An elapsed deadline only relabels the
lockbox; is_locked flips when the store reconciles.
"""
from typing import Optional

from lockbox.app.security.timelock import now_ms
from lockbox.client.models import Lockbox, LockboxStatus


def resolve_status(lockbox: Lockbox, now: Optional[int] = None) -> LockboxStatus:
    if now is None:
        now = now_ms()

    if lockbox.is_locked:
        if lockbox.unlock_timestamp is not None and lockbox.unlock_timestamp > now:
            return LockboxStatus.UNLOCKING
        return LockboxStatus.LOCKED

    if lockbox.relock_timestamp is not None and lockbox.relock_timestamp > now:
        return LockboxStatus.UNLOCKED

    return LockboxStatus.LOCKED


def countdown_target(lockbox: Lockbox, status: LockboxStatus) -> Optional[int]:
    """Timestamp a detail view should count down to for the given status."""
    if status is LockboxStatus.UNLOCKING:
        return lockbox.unlock_timestamp
    if status is LockboxStatus.UNLOCKED:
        return lockbox.relock_timestamp
    return None


def is_readable(lockbox: Lockbox, now: Optional[int] = None) -> bool:
    return resolve_status(lockbox, now) is LockboxStatus.UNLOCKED
