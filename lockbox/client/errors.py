# lockbox/client/errors.py
"""Client exceptions.

All exceptions raised by the sync client inherit from LockboxError:

    try:
        await engine.unlock(lockbox_id)
    except LockboxError as e:
        show(str(e))
"""


class LockboxError(Exception):
    """Base exception for all lockbox client errors."""
    pass


class ValidationError(LockboxError):
    """Raised before any backend call when user input is rejected."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class AuthError(LockboxError):
    """Raised when the master password is wrong or the session has no valid token."""

    def __init__(self, message: str = "Incorrect master password"):
        super().__init__(message)


class TransportError(LockboxError):
    """Raised when the authoritative store rejects or fails a call."""

    def __init__(self, message: str, status_code: int = 0):
        self.status_code = status_code
        super().__init__(message)
