# backend/stockwatch/services/articles.py
"""Parsing discovery results into Articles, deduplication and capped merging."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from stockwatch.logger import get_logger
from stockwatch.schemas.stock import Article
from stockwatch.utils.dates import parse_article_date

log = get_logger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _dig(d: Any, *keys: str) -> Optional[Any]:
    for k in keys:
        if not isinstance(d, dict):
            return None
        d = d.get(k)
    return d


def parse_article(result: Dict[str, Any]) -> Article:
    """Map one discovery result to an Article."""
    return Article(
        url=result.get("url") or "",
        sentiment=_dig(result, "enriched_text", "sentiment", "document", "label"),
        date=result.get("crawl_date"),
        title=result.get("title"),
        source=result.get("forum_title"),
    )


def parse_results(results: Iterable[Dict[str, Any]]) -> List[Article]:
    return [parse_article(r) for r in results or []]


def dedupe_batch(articles: Iterable[Article], company: str = "") -> List[Article]:
    """Drop repeated URLs within one fetch, keeping the first occurrence."""
    seen = set()
    out = []
    for a in articles:
        if not a.url:
            log.debug("Skipping article without url for %r", company)
            continue
        if a.url in seen:
            log.info("Received duplicate article %s from discovery", a.url)
            continue
        seen.add(a.url)
        out.append(a)
    return out


def filter_new_articles(existing: Iterable[Article], incoming: Iterable[Article]) -> List[Article]:
    known = {a.url for a in existing}
    new = []
    for a in incoming:
        if a.url in known:
            log.debug("Not adding duplicate article: %s", a.url)
            continue
        new.append(a)
    return new


def _sort_key(article: Article) -> datetime:
    if not article.date:
        return _OLDEST
    try:
        return parse_article_date(article.date)
    except ValueError:
        log.warning("Unparseable article date %r for %s", article.date, article.url)
        return _OLDEST


def sort_articles(articles: Iterable[Article]) -> List[Article]:
    """Most recent first; equal dates keep their relative order."""
    return sorted(articles, key=_sort_key, reverse=True)


def merge_articles(
    existing: List[Article],
    incoming: Iterable[Article],
    max_articles: int,
    company: str = "",
) -> List[Article]:
    """
    New (by URL) incoming articles + existing history, sorted most recent first
    and truncated to max_articles by dropping the oldest.
    """
    new = filter_new_articles(existing, incoming)
    merged = sort_articles(new + list(existing))
    if len(merged) > max_articles:
        log.info(
            "%r has exceeded article max of %d, removing %d oldest article(s)",
            company, max_articles, len(merged) - max_articles,
        )
        merged = merged[:max_articles]
    return merged
