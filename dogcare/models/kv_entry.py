"""
KeyValueEntry: one row per State Store key.

The tracker only ever touches four keys (see dogcare/services/tracker.py);
values are stored verbatim as text, exactly as they would sit in a
browser's localStorage, so the key layout stays compatible.
"""
from datetime import datetime
from sqlalchemy import String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from dogcare.db.base import Base


class KeyValueEntry(Base):
    __tablename__ = "kv_store"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
