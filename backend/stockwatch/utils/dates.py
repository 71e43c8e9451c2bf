# backend/stockwatch/utils/dates.py
"""
Date helpers for the two formats in play:
  - market-data dates: "YYYY-MM-DD" (price history keys)
  - article dates: ISO-8601 timestamps from discovery, e.g. "2018-01-25T14:03:11Z"
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List, Mapping

from stockwatch.schemas.stock import PricePair

AV_DATE_FORMAT = "%Y-%m-%d"
ARTICLE_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def parse_av_date(s: str) -> date:
    if not isinstance(s, str):
        raise ValueError(f"Invalid market-data date: {s!r}")
    return datetime.strptime(s.strip(), AV_DATE_FORMAT).date()


def format_av_date(d: date) -> str:
    return d.strftime(AV_DATE_FORMAT)


def parse_article_date(s: str) -> datetime:
    """Parse an article timestamp; naive values are taken as UTC."""
    if not isinstance(s, str) or not s.strip():
        raise ValueError(f"Invalid article date: {s!r}")
    raw = s.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    dt = datetime.fromisoformat(raw)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_article_date(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime(ARTICLE_DATE_FORMAT)


def article_date_to_av_date(s: str) -> str:
    return format_av_date(parse_article_date(s).date())


def av_date_to_article_date(s: str) -> str:
    d = parse_av_date(s)
    return format_article_date(datetime(d.year, d.month, d.day, tzinfo=timezone.utc))


def price_map_to_list(price_map: Mapping[str, float] | None) -> List[PricePair]:
    """{date: price} -> [PricePair] sorted ascending by date"""
    if not price_map:
        return []
    pairs = [PricePair(date=d, price=float(p)) for d, p in price_map.items()]
    pairs.sort(key=lambda p: parse_av_date(p.date))
    return pairs
