# lockbox/client/validation.py
"""
Client-side input checks. Failures raise ValidationError and never
reach the store.
"""
from typing import Any, Dict, Optional

from lockbox.app.core.config import settings
from lockbox.app.core.constants import CATEGORIES
from lockbox.client.errors import ValidationError
from lockbox.client.models import CreateLockboxInput

UPDATABLE_FIELDS = (
    "name",
    "content",
    "category",
    "unlock_delay_seconds",
    "relock_delay_seconds",
)


def _check_text(field: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, "is required")
    return value.strip()


def _check_delay(field: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(field, "must be a positive number of seconds")
    return value


def _check_category(value: Optional[str]) -> Optional[str]:
    # Empty string means "no category", like an unselected dropdown
    if value is None or value == "":
        return None
    if value not in CATEGORIES:
        raise ValidationError("category", f"unknown category {value!r}")
    return value


def validate_create(fields: CreateLockboxInput) -> CreateLockboxInput:
    """Return a normalized copy of the create input (trimmed text, empty category dropped)."""
    return CreateLockboxInput(
        name=_check_text("name", fields.name),
        content=_check_text("content", fields.content),
        category=_check_category(fields.category),
        unlock_delay_seconds=_check_delay("unlock_delay_seconds", fields.unlock_delay_seconds),
        relock_delay_seconds=_check_delay("relock_delay_seconds", fields.relock_delay_seconds),
    )


def validate_update(fields: Dict[str, Any]) -> Dict[str, Any]:
    unknown = set(fields) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(sorted(unknown)[0], "cannot be updated")
    if not fields:
        raise ValidationError("fields", "nothing to update")

    cleaned = {}
    for field, value in fields.items():
        if field in ("name", "content"):
            cleaned[field] = _check_text(field, value)
        elif field == "category":
            cleaned[field] = _check_category(value)
        else:
            cleaned[field] = _check_delay(field, value)
    return cleaned


def validate_new_password(password: str, confirmation: str) -> str:
    if not password:
        raise ValidationError("password", "is required")
    if len(password) < settings.MIN_PASSWORD_LENGTH:
        raise ValidationError(
            "password", f"must be at least {settings.MIN_PASSWORD_LENGTH} characters"
        )
    if password != confirmation:
        raise ValidationError("confirmation", "does not match the password")
    return password
