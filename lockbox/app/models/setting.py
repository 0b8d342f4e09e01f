# lockbox/app/models/setting.py
"""
Key/value settings owned by the service.

Only one key is used today: the master password hash. It is written once
by /auth/setup and read by /auth/login and the content cipher.
"""
from sqlalchemy import Column, String, Text

from lockbox.app.db.base import Base

MASTER_PASSWORD_HASH_KEY = "master_password_hash"


class Setting(Base):
    __tablename__ = "settings"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)
