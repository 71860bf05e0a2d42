from __future__ import annotations
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime, timezone

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class NewsRecord(SQLModel, table=True):
    __tablename__ = "news"
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=512)
    source: str = Field(max_length=255)
    url: str = Field(max_length=2048)
    fetched_at: datetime = Field(default_factory=utcnow, index=True)

    def to_public(self) -> dict:
        return {"title": self.title, "source": self.source, "url": self.url}
