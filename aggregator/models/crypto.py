from __future__ import annotations
from typing import Optional, List
from sqlmodel import SQLModel, Field, Column, JSON
from datetime import datetime, timezone

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class CryptoRecord(SQLModel, table=True):
    __tablename__ = "crypto"
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=128)
    symbol: str = Field(index=True, max_length=32)
    price: float = Field(ge=0)
    market_cap: float = Field(ge=0)
    price_change_24h: Optional[float] = Field(default=None)
    volume_24h: Optional[float] = Field(default=None)
    sparkline_7d: Optional[List[float]] = Field(default=None, sa_column=Column(JSON))
    fetched_at: datetime = Field(default_factory=utcnow, index=True)

    def to_public(self) -> dict:
        return {
            "name": self.name,
            "symbol": self.symbol,
            "price": self.price,
            "market_cap": self.market_cap,
            "price_change_24h": self.price_change_24h,
            "volume_24h": self.volume_24h,
            "sparkline_7d": list(self.sparkline_7d or []),
        }
