# a11y_scout/crawler/link_extractor.py
"""
Link extraction for the crawl fallback: static (no browser) discovery of
same-origin page links when a site publishes no sitemap.
"""
from __future__ import annotations

from typing import Iterable, List, Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup
from bs4.element import Tag

from a11y_scout.crawler.fetcher import Fetcher
from a11y_scout.gate import should_analyze
from a11y_scout.logger import get_logger
from a11y_scout.utils import (
    DEFAULT_SKIP_EXTENSIONS,
    is_likely_html_url,
    remove_duplicates,
    same_origin,
    strip_fragment,
)

logger = get_logger("fallback")


def filter_page_links(
    base_url: str,
    hrefs: Iterable[str],
    skip_extensions: Iterable[str] = DEFAULT_SKIP_EXTENSIONS,
    limit: Optional[int] = None,
) -> List[str]:
    """
    Resolve *hrefs* against *base_url* and keep same-origin HTML-like pages.

    Fragments are stripped, duplicates removed (first occurrence wins), and
    the result truncated to *limit*. Shared by the static fallback and by live
    discovery, which feeds it hrefs read from the rendered DOM.
    """
    skip = tuple(skip_extensions)
    links: List[str] = []
    for href in hrefs:
        if not isinstance(href, str):
            continue
        raw = href.strip()
        if not raw or raw.startswith(("mailto:", "javascript:", "tel:", "#")):
            continue
        try:
            absolute = strip_fragment(urljoin(base_url, raw))
        except ValueError:
            continue
        parts = urlsplit(absolute)
        if parts.scheme not in ("http", "https"):
            continue
        if not parts.path:
            absolute = urlunsplit((parts.scheme, parts.netloc, "/", parts.query, ""))
        if not same_origin(absolute, base_url):
            continue
        if not is_likely_html_url(absolute, skip):
            continue
        links.append(absolute)
    unique = remove_duplicates(links)
    return unique if limit is None else unique[:limit]


def extract_links(
    base_url: str,
    html: str | bytes,
    skip_extensions: Iterable[str] = DEFAULT_SKIP_EXTENSIONS,
    limit: Optional[int] = None,
) -> List[str]:
    """Same-origin, HTML-like ``<a href>`` targets of *html*, resolved against *base_url*."""
    soup = BeautifulSoup(html, "html.parser")
    hrefs: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if isinstance(href_val, str):
            hrefs.append(href_val)
    return filter_page_links(base_url, hrefs, skip_extensions, limit)


async def fetch_root_and_extract_links(
    fetcher: Fetcher,
    url: str,
    limit: int,
    skip_extensions: Iterable[str] = DEFAULT_SKIP_EXTENSIONS,
) -> List[str]:
    """
    GET *url* without a browser and return up to *limit* same-origin links.

    Anything but an analyzable ``text/html`` response yields ``[]``. Links are
    resolved against the origin of the request URL; a redirect to another
    host does not widen the scope.
    """
    document = await fetcher.fetch(url)
    if document is None:
        return []
    decision = should_analyze(document.status, document.content_type)
    if not decision.ok or not document.is_html:
        logger.info("Fallback discovery skipped %s: %s", url, decision.reason or "not text/html")
        return []
    links = extract_links(url, document.content, skip_extensions, limit)
    logger.info("Fallback discovery found %d links on %s", len(links), url)
    return links


__all__ = ["extract_links", "filter_page_links", "fetch_root_and_extract_links"]
