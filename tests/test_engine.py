# File: tests/test_engine.py
from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import web

from a11y_scout.config import RunConfig
from a11y_scout.engine import Engine
from a11y_scout.models import ScanSuccess
from conftest import FakeAuditor, FakePageSpec, serve_app


@pytest.mark.asyncio()
async def test_engine_list_mode_runs_without_network():
    auditor = FakeAuditor()
    cfg = RunConfig(mode="list", urls=["https://a.test/1", "a.test/2"], label="Demo Site", max_pages=5)
    run = await Engine(cfg, auditor_factory=lambda _: auditor).run()

    assert run.run_id.endswith("--demo-site")
    assert run.targets == ["https://a.test/1", "https://a.test/2"]
    assert run.config["mode"] == "list"
    assert run.finished_at is not None
    assert set(run.results_by_url) == {"https://a.test/1", "https://a.test/2"}
    assert auditor.navigated == ["https://a.test/1", "https://a.test/2"]


@pytest_asyncio.fixture
async def no_sitemap_site(unused_tcp_port: int) -> AsyncIterator[str]:
    app = web.Application()

    async def handle_root(_):
        return web.Response(text='<a href="/one">1</a>', content_type="text/html")

    app.router.add_get("/", handle_root)
    async for url in serve_app(app, unused_tcp_port):
        yield url


@pytest.mark.asyncio()
async def test_engine_fallback_enables_live_discovery(no_sitemap_site: str):
    base = no_sitemap_site
    auditor = FakeAuditor({f"{base}/one": FakePageSpec(links=["/two"])})
    cfg = RunConfig(base_url=base, max_pages=10, retry_times=0, fetch_timeout=2.0)
    run = await Engine(cfg, auditor_factory=lambda _: auditor).run()

    # /two is only reachable through links found while scanning
    assert set(run.results_by_url) == {f"{base}/", f"{base}/one", f"{base}/two"}
    assert all(isinstance(r, ScanSuccess) for r in run.results_by_url.values())


@pytest.mark.asyncio()
async def test_links_back_to_root_do_not_rescan_it(no_sitemap_site: str):
    base = no_sitemap_site
    auditor = FakeAuditor({
        f"{base}/": FakePageSpec(links=["/one", "/"]),
        f"{base}/one": FakePageSpec(links=["/", base]),
    })
    cfg = RunConfig(base_url=base, max_pages=10, retry_times=0, fetch_timeout=2.0)
    run = await Engine(cfg, auditor_factory=lambda _: auditor).run()

    assert sorted(auditor.navigated) == [f"{base}/", f"{base}/one"]
    assert set(run.results_by_url) == {f"{base}/", f"{base}/one"}


@pytest.mark.asyncio()
async def test_crawl_mode_root_is_scanned_once():
    auditor = FakeAuditor({"https://a.test/": FakePageSpec(links=["/", "https://a.test", "/about"])})
    cfg = RunConfig(mode="crawl", base_url="https://a.test", max_pages=10)
    run = await Engine(cfg, auditor_factory=lambda _: auditor).run()

    assert run.targets == ["https://a.test/"]
    assert auditor.navigated == ["https://a.test/", "https://a.test/about"]
    assert set(run.results_by_url) == {"https://a.test/", "https://a.test/about"}
