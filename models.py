from sqlmodel import SQLModel, Field
from datetime import datetime, timezone


class StoreEntry(SQLModel, table=True):
    """One serialized collection stored under its collection name"""
    key: str = Field(primary_key=True, max_length=100)
    value: str
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
