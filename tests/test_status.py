"""Tests for status resolution."""
import itertools

import pytest

from lockbox.client.models import Lockbox, LockboxStatus
from lockbox.client.status import countdown_target, is_readable, resolve_status

NOW = 1_700_000_000_000


def make_lockbox(**fields):
    data = {
        "id": 1,
        "name": "Bank",
        "content": "enc",
        "unlock_delay_seconds": 60,
        "relock_delay_seconds": 3600,
        "created_at": NOW - 10_000,
        "updated_at": NOW - 10_000,
    }
    data.update(fields)
    return Lockbox(**data)


@pytest.mark.parametrize(
    "is_locked,unlock_ts,relock_ts",
    list(itertools.product(
        [True, False],
        [None, NOW - 1000, NOW + 1000],
        [None, NOW - 1000, NOW + 1000],
    )),
)
def test_resolve_status_is_total(is_locked, unlock_ts, relock_ts):
    lockbox = make_lockbox(is_locked=is_locked, unlock_timestamp=unlock_ts, relock_timestamp=relock_ts)

    status = resolve_status(lockbox, NOW)

    assert status in (LockboxStatus.LOCKED, LockboxStatus.UNLOCKING, LockboxStatus.UNLOCKED)


def test_pending_unlock_is_unlocking():
    lockbox = make_lockbox(is_locked=True, unlock_timestamp=NOW + 5000)
    assert resolve_status(lockbox, NOW) is LockboxStatus.UNLOCKING


def test_elapsed_unlock_without_server_response_stays_locked():
    lockbox = make_lockbox(is_locked=True, unlock_timestamp=NOW + 5000)

    # The flag only flips when the store answers
    assert resolve_status(lockbox, NOW + 5000) is LockboxStatus.LOCKED
    assert resolve_status(lockbox, NOW + 60_000) is LockboxStatus.LOCKED
    assert lockbox.is_locked is True


def test_open_relock_window_is_unlocked():
    lockbox = make_lockbox(is_locked=False, relock_timestamp=NOW + 1)
    assert resolve_status(lockbox, NOW) is LockboxStatus.UNLOCKED
    assert is_readable(lockbox, NOW)


def test_elapsed_relock_window_relabels_as_locked():
    lockbox = make_lockbox(is_locked=False, relock_timestamp=NOW)
    assert resolve_status(lockbox, NOW) is LockboxStatus.LOCKED
    assert not is_readable(lockbox, NOW)


def test_unlocked_without_relock_timestamp_is_locked():
    lockbox = make_lockbox(is_locked=False, relock_timestamp=None)
    assert resolve_status(lockbox, NOW) is LockboxStatus.LOCKED


def test_resolve_status_never_returns_relocking():
    for is_locked, ts in itertools.product([True, False], [None, NOW - 1, NOW + 1]):
        lockbox = make_lockbox(is_locked=is_locked, unlock_timestamp=ts, relock_timestamp=ts)
        assert resolve_status(lockbox, NOW) is not LockboxStatus.RELOCKING


def test_resolve_status_defaults_to_wall_clock():
    far_future = make_lockbox(is_locked=True, unlock_timestamp=NOW * 10)
    assert resolve_status(far_future) is LockboxStatus.UNLOCKING


def test_countdown_target_follows_status():
    unlocking = make_lockbox(is_locked=True, unlock_timestamp=NOW + 5000)
    unlocked = make_lockbox(is_locked=False, relock_timestamp=NOW + 9000)
    locked = make_lockbox()

    assert countdown_target(unlocking, LockboxStatus.UNLOCKING) == NOW + 5000
    assert countdown_target(unlocked, LockboxStatus.UNLOCKED) == NOW + 9000
    assert countdown_target(locked, LockboxStatus.LOCKED) is None
