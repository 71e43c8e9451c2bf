# backend/stockwatch/services/prices.py
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional

from stockwatch.logger import get_logger
from stockwatch.schemas.stock import PricePair
from stockwatch.utils.dates import parse_av_date, price_map_to_list

log = get_logger(__name__)


def find_price(target_date: Optional[str], sorted_pairs: Optional[List[PricePair]]) -> Optional[PricePair]:
    """
    Price for target_date, or the latest one before it.

    sorted_pairs must be ascending by date. Returns:
      - the pair itself on an exact date match
      - PricePair(target_date, previous.price) when target falls between two points
      - the last pair when target is after every point
      - None when the list is empty or target is before every point
    """
    if not target_date or not sorted_pairs:
        return None

    target = parse_av_date(target_date)
    for i, pair in enumerate(sorted_pairs):
        if pair.date == target_date:
            return pair
        if parse_av_date(pair.date) > target:
            if i == 0:
                log.debug("No price on or before %s (earliest is %s)", target_date, pair.date)
                return None
            previous = sorted_pairs[i - 1]
            log.debug("No price exists for %s, using previous of %s", target_date, previous.date)
            return PricePair(date=target_date, price=previous.price)

    return sorted_pairs[-1]


def merge_price_history(existing: Optional[Mapping[str, float]], fresh: Mapping[str, float]) -> Dict[str, float]:
    """Fresh values win on date collision."""
    merged = dict(existing or {})
    merged.update({d: float(p) for d, p in fresh.items()})
    return merged


def trim_price_history(price_history: Optional[Mapping[str, float]], needed_dates: Iterable[str]) -> Dict[str, float]:
    """
    Keep only one price per needed date (aligned with find_price);
    every other cached point is dropped.
    """
    sorted_pairs = price_map_to_list(price_history)
    trimmed: Dict[str, float] = {}
    for d in dict.fromkeys(needed_dates):
        pair = find_price(d, sorted_pairs)
        if pair is not None:
            trimmed[pair.date] = pair.price
    return trimmed
