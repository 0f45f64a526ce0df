# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pytest
from aiohttp import web

from a11y_scout.config import RunConfig
from a11y_scout.models import AuditOutcome, Navigation


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


# --------------------------------------------------------------------------- #
#                          Fake browser collaborators                         #
# --------------------------------------------------------------------------- #


@dataclass
class FakePageSpec:
    """How the fake browser answers for one URL."""

    final_url: Optional[str] = None
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    title: str = ""
    links: List[str] = field(default_factory=list)
    violations: List[dict] = field(default_factory=list)
    error: Optional[Exception] = None
    delay: float = 0.0


class FakePage:
    def __init__(self, auditor: "FakeAuditor") -> None:
        self.auditor = auditor
        self.spec = FakePageSpec()
        self.closed = False

    async def navigate(self, url: str, timeout_ms: int) -> Navigation:
        self.auditor.navigated.append(url)
        self.spec = self.auditor.pages.get(url, FakePageSpec())
        self.auditor.active += 1
        self.auditor.peak = max(self.auditor.peak, self.auditor.active)
        try:
            await asyncio.sleep(self.spec.delay)
        finally:
            self.auditor.active -= 1
        if self.spec.error is not None:
            raise self.spec.error
        return Navigation(
            final_url=self.spec.final_url or url,
            status=self.spec.status,
            headers={"content-type": self.spec.content_type} if self.spec.content_type else {},
            title=self.spec.title,
        )

    async def links(self) -> List[str]:
        return list(self.spec.links)

    async def run_audit(self) -> AuditOutcome:
        self.auditor.audited.append(self.spec.final_url)
        return AuditOutcome(violations=list(self.spec.violations))

    async def close(self) -> None:
        self.closed = True


class FakeAuditor:
    """PageAuditor double driven by a ``url -> FakePageSpec`` mapping."""

    def __init__(self, pages: Optional[Dict[str, FakePageSpec]] = None) -> None:
        self.pages = pages or {}
        self.navigated: List[str] = []
        self.audited: List[Optional[str]] = []
        self.opened: List[FakePage] = []
        self.active = 0
        self.peak = 0

    async def open_page(self) -> FakePage:
        page = FakePage(self)
        self.opened.append(page)
        return page

    async def __aenter__(self) -> "FakeAuditor":
        return self

    async def __aexit__(self, *exc) -> None:
        return None


@pytest.fixture()
def fake_auditor() -> FakeAuditor:
    return FakeAuditor()


@pytest.fixture()
def sample_run():
    """A finished ScanRun with one page of each outcome."""
    from a11y_scout.aggregator import ScanRun
    from a11y_scout.models import ScanFailed, ScanSkipped, ScanSuccess

    run = ScanRun(
        run_id="2024-01-02T06-00-00-000Z--site",
        started_at="2024-01-02T06:00:00Z",
        tool_version="0.1.0",
        config=RunConfig(base_url="https://site.test").model_dump(mode="json"),
        targets=["https://site.test"],
        finished_at="2024-01-02T06:01:00Z",
    )
    run.results_by_url = {
        "https://site.test/": ScanSuccess(
            url="https://site.test/",
            original_url="https://site.test",
            sources=("https://site.test/index.html",),
            status=200,
            content_type="text/html",
            title="Home <b>",
            violations=[{"id": "color-contrast", "nodes": [{}, {}, {}]}],
        ),
        "https://site.test/clean": ScanSuccess(
            url="https://site.test/clean",
            original_url="https://site.test/clean",
            status=200,
            content_type="text/html",
            title="Clean",
        ),
        "https://site.test/file": ScanSkipped(
            url="https://site.test/file",
            original_url="https://site.test/file",
            reason="skipped non-html content (application/pdf)",
            status=200,
            content_type="application/pdf",
        ),
        "https://site.test/broken": ScanFailed(
            url="https://site.test/broken",
            original_url="https://site.test/broken",
            error="Timeout 30000ms exceeded",
        ),
    }
    return run
