# a11y_scout/crawler/sitemap.py
"""
Recursive sitemap expansion into a filtered, deterministically sampled list of
page URLs.

A sitemap index can reference thousands of child sitemaps. Only a sampled
handful of children (same strategy and seed as the page sample) is fetched,
and nested indexes are followed to a fixed depth, so finding fifty pages never
turns into unbounded network work.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List

from a11y_scout.config import MAX_CHILD_SITEMAPS
from a11y_scout.crawler.fetcher import Fetcher
from a11y_scout.exceptions import DiscoveryError
from a11y_scout.logger import get_logger
from a11y_scout.parser.sitemap_parser import parse_sitemap
from a11y_scout.sampling import SampleConfig, sample_urls
from a11y_scout.utils import (
    DEFAULT_SKIP_EXTENSIONS,
    PDF_RUN_LIMIT,
    is_likely_html_url,
    is_pdf_like,
    remove_duplicates,
)


class SitemapResolver:
    """Expands one sitemap URL into candidate page URLs."""

    def __init__(
        self,
        fetcher: Fetcher,
        sample: SampleConfig,
        skip_extensions: Iterable[str] = DEFAULT_SKIP_EXTENSIONS,
        max_depth: int = 3,
        max_children: int = MAX_CHILD_SITEMAPS,
    ) -> None:
        self.fetcher = fetcher
        self.sample = sample
        self.skip_extensions = tuple(skip_extensions)
        self.max_depth = max_depth
        self.max_children = max(1, min(max_children, MAX_CHILD_SITEMAPS))
        self.fetched: List[str] = []
        self.logger = get_logger("sitemap")

    async def resolve(self, url: str) -> List[str]:
        """Return at most ``sample.max_pages`` HTML-like URLs listed under *url*.

        Unreachable or malformed sitemaps yield ``[]``; that is the normal
        "no sitemap" outcome and never raises.
        """
        raw = await self._expand(url, depth=0)
        unique = remove_duplicates(raw)
        html_like = [u for u in unique if is_likely_html_url(u, self.skip_extensions)]
        if len(html_like) != len(unique):
            self.logger.debug("Sitemap %s: dropped %d non-HTML entries", url, len(unique) - len(html_like))
        return sample_urls(html_like, self.sample)

    async def _expand(self, url: str, depth: int) -> List[str]:
        self.fetched.append(url)
        try:
            doc = await self._load(url)
        except DiscoveryError as exc:
            self.logger.warning("Sitemap discovery failed for %s: %s", url, exc)
            return []

        if doc.is_index:
            if depth >= self.max_depth:
                self.logger.warning(
                    "Sitemap index %s nested deeper than %d levels, ignoring %d children",
                    url, self.max_depth, len(doc.locations),
                )
                return []
            children = sample_urls(doc.locations, replace(self.sample, max_pages=self.max_children))
            self.logger.info(
                "Sitemap index %s lists %d sitemaps, fetching %d", url, len(doc.locations), len(children)
            )
            urls: List[str] = []
            for child in children:
                urls.extend(await self._expand(child, depth + 1))
            return urls

        return self._take_until_pdf_run(url, doc.locations)

    async def _load(self, url: str):
        document = await self.fetcher.fetch(url)
        if document is None:
            raise DiscoveryError("network failure")
        if not document.ok:
            raise DiscoveryError(f"HTTP {document.status}")
        return parse_sitemap(document.content)

    def _take_until_pdf_run(self, url: str, locations: List[str]) -> List[str]:
        # a run of PDF entries marks a document archive; stop there
        taken: List[str] = []
        pdf_run = 0
        for loc in locations:
            if is_pdf_like(loc):
                pdf_run += 1
                if pdf_run >= PDF_RUN_LIMIT:
                    self.logger.info(
                        "Sitemap %s: %d PDF entries in a row, skipping the rest", url, PDF_RUN_LIMIT
                    )
                    break
            else:
                pdf_run = 0
            taken.append(loc)
        return taken


async def fetch_sitemap(
    fetcher: Fetcher,
    url: str,
    sample: SampleConfig,
    skip_extensions: Iterable[str] = DEFAULT_SKIP_EXTENSIONS,
    max_depth: int = 3,
    max_children: int = MAX_CHILD_SITEMAPS,
) -> List[str]:
    """Functional shortcut around :class:`SitemapResolver`."""
    resolver = SitemapResolver(fetcher, sample, skip_extensions, max_depth, max_children)
    return await resolver.resolve(url)


__all__ = ["SitemapResolver", "fetch_sitemap"]
