import pytest

from lockbox.client.errors import ValidationError
from lockbox.client.models import CreateLockboxInput
from lockbox.client.validation import validate_create, validate_new_password, validate_update


def test_create_defaults_come_from_settings():
    fields = validate_create(CreateLockboxInput(name="Bank", content="1234"))

    assert fields.unlock_delay_seconds == 60
    assert fields.relock_delay_seconds == 3600
    assert fields.category is None


@pytest.mark.parametrize("name, content, field", [
    ("", "x", "name"),
    ("   ", "x", "name"),
    ("Bank", "", "content"),
    ("Bank", "\n\t", "content"),
])
def test_create_rejects_blank_text(name, content, field):
    with pytest.raises(ValidationError) as exc_info:
        validate_create(CreateLockboxInput(name=name, content=content))
    assert exc_info.value.field == field


@pytest.mark.parametrize("delay", [0, -5])
def test_create_rejects_non_positive_delays(delay):
    with pytest.raises(ValidationError, match="positive"):
        validate_create(CreateLockboxInput(name="Bank", content="x", unlock_delay_seconds=delay))


def test_create_rejects_unknown_category():
    with pytest.raises(ValidationError) as exc_info:
        validate_create(CreateLockboxInput(name="Bank", content="x", category="Crypto"))
    assert exc_info.value.field == "category"


def test_create_keeps_known_category():
    fields = validate_create(CreateLockboxInput(name="Bank", content="x", category="Financial"))
    assert fields.category == "Financial"


def test_update_cleans_each_field():
    cleaned = validate_update({"name": " Renamed ", "category": "", "relock_delay_seconds": 10})

    assert cleaned == {"name": "Renamed", "category": None, "relock_delay_seconds": 10}


def test_update_rejects_empty_and_unknown_fields():
    with pytest.raises(ValidationError, match="nothing to update"):
        validate_update({})
    with pytest.raises(ValidationError) as exc_info:
        validate_update({"is_locked": False})
    assert exc_info.value.field == "is_locked"


def test_update_rejects_bool_delay():
    with pytest.raises(ValidationError):
        validate_update({"unlock_delay_seconds": True})


def test_new_password_rules():
    assert validate_new_password("correct horse", "correct horse") == "correct horse"

    with pytest.raises(ValidationError, match="required"):
        validate_new_password("", "")
    with pytest.raises(ValidationError, match="at least 8"):
        validate_new_password("short", "short")
    with pytest.raises(ValidationError) as exc_info:
        validate_new_password("correct horse", "correct h0rse")
    assert exc_info.value.field == "confirmation"
