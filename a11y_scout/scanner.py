# === FILE: a11y_scout/scanner.py ===
"""
Bounded-concurrency scan orchestration.

The orchestrator drains a FIFO queue in batches of ``concurrency`` URLs. All
members of a batch run concurrently against one shared browser context (each
opens its own page); the next batch starts only after every member of the
current one has settled. Links discovered while a batch runs are appended to
the queue tail and picked up by later batches.

``visited`` check-then-insert and queue appends happen under an
:class:`asyncio.Lock`, so at most ``max_pages`` pages are ever processed and no
URL is scanned twice, however many links discovery injects.
"""
from __future__ import annotations

import asyncio
from collections import deque
from typing import Deque, Dict, Iterable, List, Optional, Protocol, Set

from a11y_scout.crawler.link_extractor import filter_page_links
from a11y_scout.gate import should_analyze
from a11y_scout.logger import get_logger
from a11y_scout.models import (
    AuditOutcome,
    Navigation,
    PageResult,
    ScanFailed,
    ScanSkipped,
    ScanSuccess,
    with_sources,
)
from a11y_scout.utils import DEFAULT_SKIP_EXTENSIONS

__all__ = ["AuditPage", "PageAuditor", "ScanOrchestrator"]


class AuditPage(Protocol):
    """One browser tab."""

    async def navigate(self, url: str, timeout_ms: int) -> Navigation: ...

    async def links(self) -> List[str]: ...

    async def run_audit(self) -> AuditOutcome: ...

    async def close(self) -> None: ...


class PageAuditor(Protocol):
    """Opens pages from a shared browser context."""

    async def open_page(self) -> AuditPage: ...


class ScanOrchestrator:
    """Drains candidate URLs through the auditor with a page cap and live discovery."""

    def __init__(
        self,
        auditor: PageAuditor,
        *,
        max_pages: int,
        concurrency: int = 2,
        timeout_ms: int = 30_000,
        discovery: bool = False,
        skip_extensions: Iterable[str] = DEFAULT_SKIP_EXTENSIONS,
    ) -> None:
        if max_pages < 1:
            raise ValueError("max_pages must be > 0")
        if concurrency < 1:
            raise ValueError("concurrency must be > 0")
        self.auditor = auditor
        self.max_pages = max_pages
        self.concurrency = concurrency
        self.timeout_ms = timeout_ms
        self.discovery = discovery
        self.skip_extensions = tuple(skip_extensions)

        self.queue: Deque[str] = deque()
        self.visited: Set[str] = set()
        self.processed = 0
        self.results: Dict[str, PageResult] = {}
        self._sources: Dict[str, List[str]] = {}
        self._lock = asyncio.Lock()
        self.logger = get_logger("scanner")

    # ------------------------------------------------------------------ #
    # Public API                                                         #
    # ------------------------------------------------------------------ #

    def seed(self, urls: Iterable[str]) -> None:
        """Queue *urls* in order, ignoring duplicates."""
        for url in urls:
            if url not in self.visited and url not in self.queue:
                self.queue.append(url)

    async def run(self) -> Dict[str, PageResult]:
        """Scan until the queue is empty or ``max_pages`` pages were processed."""
        batch_no = 0
        while self.queue and self.processed < self.max_pages:
            batch = [self.queue.popleft() for _ in range(min(self.concurrency, len(self.queue)))]
            batch_no += 1
            self.logger.debug("Batch %d: %s", batch_no, batch)
            outcomes = await asyncio.gather(*(self._scan(url) for url in batch), return_exceptions=True)
            for url, outcome in zip(batch, outcomes):
                if isinstance(outcome, BaseException):
                    self.logger.error("Unexpected error while scanning %s: %r", url, outcome)
        return self._finalize()

    # ------------------------------------------------------------------ #
    # Internals                                                          #
    # ------------------------------------------------------------------ #

    async def _claim(self, url: str) -> Optional[int]:
        """Mark *url* visited and count it; None if it was seen or the cap is reached."""
        async with self._lock:
            if url in self.visited or self.processed >= self.max_pages:
                return None
            self.visited.add(url)
            self.processed += 1
            return self.processed

    async def _claim_final(self, url: str, final_url: str) -> bool:
        """Register a redirect target. False if another input already owns it."""
        async with self._lock:
            if final_url in self.visited:
                self._sources.setdefault(final_url, []).append(url)
                return False
            self.visited.add(final_url)
            self._sources.setdefault(final_url, []).append(url)
            return True

    async def _enqueue(self, links: Iterable[str]) -> int:
        added = 0
        async with self._lock:
            for link in links:
                if link in self.visited or link in self.queue:
                    continue
                self.queue.append(link)
                added += 1
        return added

    async def _scan(self, url: str) -> None:
        position = await self._claim(url)
        if position is None:
            return
        self.logger.info("Scanning [%d/%d] %s", position, self.max_pages, url)
        result = await self._scan_page(url)
        if result is None:
            return
        async with self._lock:
            self.results[result.url] = result

    async def _scan_page(self, url: str) -> Optional[PageResult]:
        try:
            page = await self.auditor.open_page()
        except Exception as exc:
            self.logger.error("Could not open a page for %s: %s", url, exc)
            return ScanFailed(url=url, original_url=url, error=str(exc) or type(exc).__name__)

        final_url = url
        try:
            nav = await page.navigate(url, self.timeout_ms)
            final_url = nav.final_url or url
            if final_url != url and not await self._claim_final(url, final_url):
                self.logger.info("%s redirects to already scanned %s", url, final_url)
                return None

            content_type = nav.content_type
            decision = should_analyze(nav.status, content_type)
            if not decision.ok:
                self.logger.info("Skipping %s: %s", final_url, decision.reason)
                return ScanSkipped(
                    url=final_url,
                    original_url=url,
                    reason=decision.reason or "",
                    status=nav.status,
                    content_type=content_type,
                )

            if self.discovery and len(self.queue) < self.max_pages:
                hrefs = await page.links()
                found = filter_page_links(final_url, hrefs, self.skip_extensions)
                added = await self._enqueue(found)
                if added:
                    self.logger.debug("Discovered %d new links on %s", added, final_url)

            audit = await page.run_audit()
            return ScanSuccess(
                url=final_url,
                original_url=url,
                status=nav.status,
                content_type=content_type,
                title=nav.title,
                violations=audit.violations,
                passes=audit.passes,
                incomplete=audit.incomplete,
            )
        except Exception as exc:
            self.logger.error("Error scanning %s: %s", url, exc)
            return ScanFailed(url=final_url, original_url=url, error=str(exc) or type(exc).__name__)
        finally:
            try:
                await page.close()
            except Exception as exc:
                self.logger.debug("Closing page for %s failed: %s", url, exc)

    def _finalize(self) -> Dict[str, PageResult]:
        final: Dict[str, PageResult] = {}
        for key, result in self.results.items():
            sources = tuple(s for s in self._sources.get(key, []) if s != key)
            final[key] = with_sources(result, sources)
        orphans = set(self._sources) - set(self.results)
        if orphans:
            self.logger.debug("Redirect targets without results: %s", sorted(orphans))
        return final
