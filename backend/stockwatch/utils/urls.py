from __future__ import annotations

from typing import Optional
from urllib.parse import urlsplit

_WEB_SCHEMES = ("http", "https")


def is_usable_src(src: Optional[str]) -> bool:
    """False for blank values and for non-web schemes such as data: placeholders."""
    s = (src or "").strip()
    if not s:
        return False
    if s.startswith("//"):
        return True
    scheme = urlsplit(s).scheme
    return not scheme or scheme.lower() in _WEB_SCHEMES


def extract_http_url(src: str) -> Optional[str]:
    """Return src if it is already absolute (http/https or protocol-relative), else None."""
    s = (src or "").strip()
    if s.startswith("//"):
        s = "http:" + s
    parts = urlsplit(s)
    if parts.scheme.lower() in _WEB_SCHEMES and parts.netloc:
        return s
    return None


def extract_domain(url: str) -> str:
    """scheme://host[:port] of url"""
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"Not an absolute URL: {url!r}")
    return f"{parts.scheme}://{parts.netloc}"


def resolve_image_url(article_url: str, src: str) -> str:
    if not is_usable_src(src):
        raise ValueError(f"Not a usable image src: {src!r}")
    absolute = extract_http_url(src)
    if absolute:
        return absolute
    # relative path: join to the article's domain, dropping one leading slash
    path = src.strip()
    if path.startswith("/"):
        path = path[1:]
    return extract_domain(article_url) + "/" + path
