# File: a11y_scout/discovery.py
"""a11y_scout.discovery: Turns configured targets into the candidate URL set of a run.

* ``list``    – the normalized targets, as given.
* ``crawl``   – the normalized targets; pages are found live while scanning.
* ``sitemap`` – each target's sitemap (the target itself when it ends in
  ``.xml``, ``/sitemap.xml`` of its origin otherwise). When a sitemap yields
  nothing and the fallback is enabled, the root page is fetched statically and
  its links become candidates; live discovery is then switched on as well.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List
from urllib.parse import urlsplit, urlunsplit

from a11y_scout.config import RunConfig, ScanMode, Target
from a11y_scout.crawler.fetcher import Fetcher
from a11y_scout.crawler.link_extractor import fetch_root_and_extract_links
from a11y_scout.crawler.sitemap import SitemapResolver
from a11y_scout.logger import logger
from a11y_scout.sampling import sample_urls
from a11y_scout.utils import remove_duplicates

__all__ = ["DiscoveryResult", "should_allow_discovery", "sitemap_location", "discover_candidates"]


@dataclass(slots=True)
class DiscoveryResult:
    """Candidate URLs plus whether the sitemap fallback kicked in."""

    candidates: List[str] = field(default_factory=list)
    fallback_triggered: bool = False


def should_allow_discovery(mode: ScanMode, fallback_triggered: bool) -> bool:
    """Live link discovery runs in crawl mode, or when a sitemap target fell back to crawling."""
    return mode == "crawl" or (mode == "sitemap" and fallback_triggered)


def _origin_url(url: str, path: str) -> str:
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, path, "", ""))


def sitemap_location(url: str) -> str:
    """The sitemap to read for a target: the target itself if it is XML, else ``/sitemap.xml``."""
    if urlsplit(url).path.lower().endswith(".xml"):
        return url
    return _origin_url(url, "/sitemap.xml")


async def _discover_sitemap_target(
    config: RunConfig, fetcher: Fetcher, target: Target, result: DiscoveryResult
) -> None:
    url = target.normalized_url
    sitemap_url = sitemap_location(url)
    logger.info("Checking sitemap %s", sitemap_url)
    resolver = SitemapResolver(
        fetcher,
        config.sample_config(sitemap_url),
        skip_extensions=config.skip_extensions,
        max_depth=config.sitemap_max_depth,
        max_children=config.sitemap_max_children,
    )
    urls = await resolver.resolve(sitemap_url)
    if urls:
        logger.info("Found %d URLs in sitemap %s", len(urls), sitemap_url)
        result.candidates.extend(urls)
        return

    root = url if sitemap_url != url else _origin_url(url, "/")
    if not config.sitemap_fallback_to_crawl:
        logger.info("No sitemap URLs for %s, scanning the root page only", url)
        if sitemap_url != url:
            result.candidates.append(root)
        return

    logger.info("No sitemap URLs for %s, falling back to link discovery from %s", url, root)
    result.fallback_triggered = True
    result.candidates.append(root)
    links = await fetch_root_and_extract_links(
        fetcher, root, max(config.max_pages - 1, 0), config.skip_extensions
    )
    result.candidates.extend(links)


async def discover_candidates(config: RunConfig, fetcher: Fetcher) -> DiscoveryResult:
    """Run the discovery phase for every configured target."""
    result = DiscoveryResult()
    targets = config.targets()

    if config.mode != "sitemap":
        result.candidates = remove_duplicates([t.normalized_url for t in targets])
        return result

    for target in targets:
        await _discover_sitemap_target(config, fetcher, target, result)

    result.candidates = remove_duplicates(result.candidates)
    if len(result.candidates) > config.max_pages:
        first = targets[0].normalized_url if targets else None
        result.candidates = sample_urls(result.candidates, config.sample_config(first))
    return result
