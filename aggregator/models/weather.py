from __future__ import annotations
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime, timezone

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class WeatherRecord(SQLModel, table=True):
    __tablename__ = "weather"
    id: Optional[int] = Field(default=None, primary_key=True)
    city: str = Field(index=True, unique=True, max_length=128)
    temperature: float  # celsius
    condition: str = Field(max_length=64)
    humidity: Optional[float] = Field(default=None, ge=0, le=100)
    wind_speed: Optional[float] = Field(default=None, ge=0)
    fetched_at: datetime = Field(default_factory=utcnow, index=True)

    def to_public(self) -> dict:
        return {
            "city": self.city,
            "temperature": self.temperature,
            "condition": self.condition,
            "humidity": self.humidity,
            "wind_speed": self.wind_speed,
        }
