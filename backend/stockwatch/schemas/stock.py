# backend/stockwatch/schemas/stock.py
"""Stock record documents stored in MongoDB, using Pydantic for validation"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

NO_TICKER = "No Ticker Found"


class Company(BaseModel):
    """A tracked company from static configuration"""
    name: str
    ticker: str = NO_TICKER


class Article(BaseModel):
    """News article attached to a company's history"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    url: str
    title: Optional[str] = None
    source: Optional[str] = None
    date: Optional[str] = None
    sentiment: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageURL")


class PricePair(BaseModel):
    date: str
    price: float


class StockRecord(BaseModel):
    """Per-company aggregate of article history and closing prices"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    company: str
    ticker: str = NO_TICKER
    history: List[Article] = Field(default_factory=list)
    price_history: Dict[str, float] = Field(default_factory=dict)
    updated_at: Optional[datetime] = None

    def to_document(self) -> dict:
        """Serialize for MongoDB (aliases on, so image_url is stored as imageURL)"""
        return self.model_dump(by_alias=True, exclude_none=False)

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)


class ImageResult(BaseModel):
    url: str
    image_url: str


class RefreshRequest(BaseModel):
    companies: Optional[List[str]] = None
