# lockbox/app/security/timelock.py
"""
Time arithmetic for the unlock/relock policy.

All timestamps are epoch milliseconds. The service is the only place
where is_locked flips; these helpers compute when it should.
"""
import time


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def unlock_deadline(requested_at: int, unlock_delay_seconds: int) -> int:
    """When an unlock requested at `requested_at` becomes readable."""
    return requested_at + unlock_delay_seconds * 1000


def relock_deadline(unlocked_at: int, relock_delay_seconds: int) -> int:
    """When content unlocked at `unlocked_at` must lock again."""
    return unlocked_at + relock_delay_seconds * 1000


def bump_updated_at(now: int, previous: int) -> int:
    """Version stamp for an explicit transition; strictly newer than `previous`."""
    return max(now, previous + 1)
