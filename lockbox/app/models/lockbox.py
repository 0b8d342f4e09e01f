# lockbox/app/models/lockbox.py
from sqlalchemy import BigInteger, Boolean, Column, Integer, String, Text

from lockbox.app.db.base import Base


class Lockbox(Base):
    __tablename__ = "lockboxes"
    # Never reuse the id of a deleted lockbox
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # --- METADATA (readable while locked) ---
    name = Column(String(200), unique=True, nullable=False)
    category = Column(String(50), nullable=True, index=True)

    # --- SECRET DATA (encrypted blob, see security/crypto.py) ---
    content = Column(Text, nullable=False)

    # --- TIME LOCK POLICY ---
    is_locked = Column(Boolean, nullable=False, default=True)
    unlock_delay_seconds = Column(Integer, nullable=False, default=60)
    relock_delay_seconds = Column(Integer, nullable=False, default=3600)

    # Epoch milliseconds. At most one of them is pending at a time:
    # unlock_timestamp while an unlock request waits out its delay,
    # relock_timestamp while the content is readable.
    unlock_timestamp = Column(BigInteger, nullable=True)
    relock_timestamp = Column(BigInteger, nullable=True)

    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)
