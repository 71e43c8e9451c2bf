# backend/stockwatch/services/images.py
from __future__ import annotations

import asyncio
from typing import Iterable, List, Optional

import requests
from bs4 import BeautifulSoup

from stockwatch.core.config import Settings, settings as default_settings
from stockwatch.core.errors import NoImageFound, ScrapeError
from stockwatch.core.outcome import Outcome, settle_all, successes
from stockwatch.logger import get_logger
from stockwatch.schemas.stock import Article, ImageResult
from stockwatch.utils.urls import is_usable_src, resolve_image_url

log = get_logger(__name__)

_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/125.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


def find_image_src(html: str) -> Optional[str]:
    """src of the first <img> with a usable src, else the first one under <body>.

    Blank srcs and data: placeholders are skipped.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    img = soup.find("img", src=is_usable_src)
    if img is None and soup.body is not None:
        img = soup.body.find("img", src=is_usable_src)
    if img is None:
        return None
    src = (img.get("src") or "").strip()
    return src or None


class ImageResolver:
    """Finds a representative image for article pages."""

    def __init__(self, config: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.config = config or default_settings
        self.session = session or requests.Session()

    def _fetch(self, url: str) -> str:
        try:
            r = self.session.get(url, headers=_HEADERS, timeout=self.config.REQUEST_TIMEOUT_SECONDS)
            r.raise_for_status()
            return r.text
        except requests.RequestException as e:
            raise ScrapeError(f"page fetch failed for {url}: {e}") from e

    async def resolve_image(self, article_url: str) -> Outcome[ImageResult]:
        """Never raises; failures come back as Outcome.failure and are logged."""
        try:
            html = await asyncio.to_thread(self._fetch, article_url)
            src = find_image_src(html)
            if not src:
                raise NoImageFound(f"no image url found for article with url: ({article_url})")
            image_url = resolve_image_url(article_url, src)
        except NoImageFound as e:
            log.info("%s", e)
            return Outcome.failure(e)
        except ScrapeError as e:
            log.warning("%s", e)
            return Outcome.failure(e)
        except Exception as e:
            log.warning("Error finding img url for %s: %s", article_url, e)
            return Outcome.failure(ScrapeError(str(e)))

        log.info("image url (%s) found for article with url: (%s)", image_url, article_url)
        return Outcome.success(ImageResult(url=article_url, image_url=image_url))

    async def resolve_images(self, articles: Iterable[Article]) -> List[ImageResult]:
        """Resolve concurrently; only successful lookups are returned."""
        outcomes = await settle_all(self.resolve_image(a.url) for a in articles)
        return successes(outcomes)


def attach_images(articles: List[Article], images: Iterable[ImageResult]) -> List[Article]:
    by_url = {img.url: img.image_url for img in images}
    for a in articles:
        if a.url in by_url:
            a.image_url = by_url[a.url]
    return articles
