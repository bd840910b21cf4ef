"""Local key-value store table."""

from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


class KeyValueEntry(SQLModel, table=True):
    __tablename__ = "kv_store"

    key: str = Field(primary_key=True)
    value: bytes
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
