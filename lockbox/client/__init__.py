"""Lockbox sync client: status resolution, countdowns, and the sync engine."""
from lockbox.client.countdown import (
    Countdown,
    TimeRemaining,
    compute_time_remaining,
    format_delay,
    format_time_remaining,
)
from lockbox.client.detail import LockboxDetail
from lockbox.client.engine import SyncEngine
from lockbox.client.errors import AuthError, LockboxError, TransportError, ValidationError
from lockbox.client.models import CreateLockboxInput, Lockbox, LockboxStatus
from lockbox.client.projection import UNCATEGORIZED, Projection, filter_lockboxes
from lockbox.client.session import Session
from lockbox.client.status import resolve_status
from lockbox.client.store import HttpSecretStore, SecretStore

__all__ = [
    "AuthError",
    "Countdown",
    "CreateLockboxInput",
    "HttpSecretStore",
    "Lockbox",
    "LockboxDetail",
    "LockboxError",
    "LockboxStatus",
    "Projection",
    "SecretStore",
    "Session",
    "SyncEngine",
    "TimeRemaining",
    "TransportError",
    "UNCATEGORIZED",
    "ValidationError",
    "compute_time_remaining",
    "filter_lockboxes",
    "format_delay",
    "format_time_remaining",
    "resolve_status",
]
