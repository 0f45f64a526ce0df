# File: a11y_scout/engine.py
"""a11y_scout.engine: Orchestration layer running discovery, then scanning, for one site."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import AsyncContextManager, Callable, Optional

from a11y_scout import __version__
from a11y_scout.aggregator import ScanRun
from a11y_scout.browser import PlaywrightAuditor
from a11y_scout.config import RunConfig, build_run_id
from a11y_scout.crawler.fetcher import Fetcher, open_session
from a11y_scout.discovery import DiscoveryResult, discover_candidates, should_allow_discovery
from a11y_scout.logger import logger
from a11y_scout.scanner import PageAuditor, ScanOrchestrator

__all__ = ["Engine", "start_scan"]

AuditorFactory = Callable[[RunConfig], AsyncContextManager[PageAuditor]]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class Engine:
    """Facade for the CLI and tests: discovery, scanning and result assembly."""

    def __init__(self, config: RunConfig, auditor_factory: Optional[AuditorFactory] = None) -> None:
        self.config = config
        self.auditor_factory = auditor_factory or PlaywrightAuditor

    async def discover(self) -> DiscoveryResult:
        """Discovery phase: build the candidate set from the configured targets."""
        async with open_session(self.config) as session:
            return await discover_candidates(self.config, Fetcher(session, self.config))

    async def scan(self, discovery: DiscoveryResult, auditor: PageAuditor) -> ScanRun:
        """Scanning phase over an already discovered candidate set."""
        cfg = self.config
        run = ScanRun(
            run_id=build_run_id(cfg.label),
            started_at=_now_iso(),
            tool_version=__version__,
            config=cfg.model_dump(mode="json"),
            targets=[t.normalized_url for t in cfg.targets()],
        )
        allow = should_allow_discovery(cfg.mode, discovery.fallback_triggered)
        orchestrator = ScanOrchestrator(
            auditor,
            max_pages=cfg.max_pages,
            concurrency=cfg.concurrency,
            timeout_ms=cfg.timeout_ms,
            discovery=allow,
            skip_extensions=cfg.skip_extensions,
        )
        orchestrator.seed(discovery.candidates)
        logger.info(
            "Starting scan: mode=%s max_pages=%d concurrency=%d candidates=%d discovery=%s",
            cfg.mode, cfg.max_pages, cfg.concurrency, len(discovery.candidates), allow,
        )
        run.results_by_url = await orchestrator.run()
        run.finished_at = _now_iso()
        logger.info("Run %s complete: %d pages", run.run_id, len(run.results_by_url))
        return run

    async def run(self) -> ScanRun:
        """Discovery followed by scanning; returns the finished run."""
        discovery = await self.discover()
        if not discovery.candidates:
            logger.warning("No URLs to scan")
        async with self.auditor_factory(self.config) as auditor:
            return await self.scan(discovery, auditor)


async def start_scan(cfg: RunConfig) -> ScanRun:
    """Run a full scan for *cfg* with the default Playwright auditor."""
    return await Engine(cfg).run()
