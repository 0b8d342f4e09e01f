"""Tests for the countdown timer and its formatting helpers."""
import asyncio

import pytest

from lockbox.client.countdown import (
    Countdown,
    TimeRemaining,
    compute_time_remaining,
    format_delay,
    format_time_remaining,
)
from tests.fakes import FakeClock


def test_compute_breaks_down_remaining_time():
    remaining = compute_time_remaining(1_000 + 3_661_000, now=1_000)

    assert remaining == TimeRemaining(days=0, hours=1, minutes=1, seconds=1, total_ms=3_661_000)


def test_compute_carries_days():
    remaining = compute_time_remaining(2 * 86_400_000 + 5_500, now=0)

    assert (remaining.days, remaining.hours, remaining.minutes, remaining.seconds) == (2, 0, 0, 5)


def test_compute_clamps_past_targets_to_zero():
    remaining = compute_time_remaining(500, now=10_000)

    assert remaining.total_ms == 0
    assert remaining.is_elapsed


def test_compute_without_target_is_none():
    assert compute_time_remaining(None, now=0) is None


def test_format_time_remaining():
    assert format_time_remaining(compute_time_remaining(3_661_000, now=0)) == "01:01:01"
    assert format_time_remaining(compute_time_remaining(90_061_000, now=0)) == "1d 01:01:01"
    assert format_time_remaining(compute_time_remaining(0, now=0)) == "00:00:00"
    assert format_time_remaining(None) == "00:00:00"


def test_format_delay():
    assert format_delay(1) == "1 second"
    assert format_delay(30) == "30 seconds"
    assert format_delay(300) == "5 minutes"
    assert format_delay(3600) == "1 hour"
    assert format_delay(2 * 86400) == "2 days"


class Recorder:
    """Collects published values and advances the clock one second per tick."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.values = []

    def __call__(self, remaining):
        self.values.append(remaining)
        self.clock.advance(1000)


@pytest.mark.asyncio
async def test_countdown_publishes_immediately_then_every_second():
    clock = FakeClock()
    recorder = Recorder(clock)
    countdown = Countdown(on_tick=recorder, interval=0, clock=clock)

    first = countdown.set_target(clock.now + 3_661_000)

    assert (first.days, first.hours, first.minutes, first.seconds) == (0, 1, 1, 1)
    assert recorder.values == [first]

    await asyncio.sleep(0)
    await asyncio.sleep(0)
    countdown.close()

    totals = [value.total_ms for value in recorder.values]
    assert len(totals) >= 2
    assert all(a - b == 1000 for a, b in zip(totals, totals[1:]))


@pytest.mark.asyncio
async def test_countdown_reaches_zero_once_and_stops():
    clock = FakeClock()
    recorder = Recorder(clock)
    countdown = Countdown(on_tick=recorder, interval=0, clock=clock)

    countdown.set_target(clock.now + 3000)
    await countdown.wait()

    totals = [value.total_ms for value in recorder.values]
    assert totals == [3000, 2000, 1000, 0]
    assert not countdown.running

    # Nothing else is scheduled after zero
    await asyncio.sleep(0.01)
    assert len(recorder.values) == 4


@pytest.mark.asyncio
async def test_countdown_retarget_cancels_previous_schedule():
    clock = FakeClock()
    values = []
    countdown = Countdown(on_tick=values.append, interval=60, clock=clock)

    countdown.set_target(clock.now + 10_000)
    first_task = countdown._task
    countdown.set_target(clock.now + 20_000)
    await asyncio.sleep(0)

    assert first_task.cancelled()
    assert [value.total_ms for value in values] == [10_000, 20_000]
    countdown.close()


@pytest.mark.asyncio
async def test_countdown_close_stops_ticks():
    clock = FakeClock()
    recorder = Recorder(clock)
    countdown = Countdown(on_tick=recorder, interval=0.01, clock=clock)

    countdown.set_target(clock.now + 60_000)
    countdown.close()
    await asyncio.sleep(0.05)

    assert len(recorder.values) == 1
    assert not countdown.running
    with pytest.raises(RuntimeError):
        countdown.set_target(clock.now + 1000)


@pytest.mark.asyncio
async def test_countdown_without_target_does_not_schedule():
    values = []
    countdown = Countdown(on_tick=values.append, interval=0, clock=FakeClock())

    assert countdown.set_target(None) is None
    assert values == [None]
    assert not countdown.running
