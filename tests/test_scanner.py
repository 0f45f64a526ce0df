# File: tests/test_scanner.py
from __future__ import annotations

import pytest

from a11y_scout.exceptions import NavigationError
from a11y_scout.models import ScanFailed, ScanSkipped, ScanSuccess
from a11y_scout.scanner import ScanOrchestrator
from conftest import FakeAuditor, FakePageSpec

BASE = "https://site.test"


def orchestrator(auditor: FakeAuditor, **kwargs) -> ScanOrchestrator:
    kwargs.setdefault("max_pages", 10)
    kwargs.setdefault("concurrency", 2)
    return ScanOrchestrator(auditor, **kwargs)


@pytest.mark.parametrize("kwargs", [{"max_pages": 0}, {"max_pages": 5, "concurrency": 0}])
def test_rejects_invalid_limits(fake_auditor, kwargs):
    with pytest.raises(ValueError):
        ScanOrchestrator(fake_auditor, **kwargs)


@pytest.mark.asyncio()
async def test_scans_seeded_urls_in_order(fake_auditor):
    violation = {"id": "image-alt", "nodes": [{"target": ["img"]}, {"target": ["img.b"]}]}
    fake_auditor.pages = {
        f"{BASE}/a": FakePageSpec(title="A", violations=[violation]),
        f"{BASE}/b": FakePageSpec(title="B"),
    }
    orch = orchestrator(fake_auditor)
    orch.seed([f"{BASE}/a", f"{BASE}/b", f"{BASE}/a"])
    results = await orch.run()

    assert fake_auditor.navigated == [f"{BASE}/a", f"{BASE}/b"]
    assert set(results) == {f"{BASE}/a", f"{BASE}/b"}
    page_a = results[f"{BASE}/a"]
    assert isinstance(page_a, ScanSuccess)
    assert page_a.title == "A"
    assert page_a.violation_nodes == 2
    assert all(p.closed for p in fake_auditor.opened)


@pytest.mark.asyncio()
async def test_cap_holds_under_heavy_discovery(fake_auditor):
    links = [f"/p{i}" for i in range(100)]
    fake_auditor.pages = {f"{BASE}/": FakePageSpec(links=links)}
    for i in range(100):
        fake_auditor.pages[f"{BASE}/p{i}"] = FakePageSpec(links=[f"/q{i}-{j}" for j in range(10)])

    orch = orchestrator(fake_auditor, max_pages=7, concurrency=3, discovery=True)
    orch.seed([f"{BASE}/"])
    results = await orch.run()

    assert orch.processed == 7
    assert len(results) == 7
    assert len(fake_auditor.navigated) == 7
    assert len(set(fake_auditor.navigated)) == 7


@pytest.mark.asyncio()
async def test_no_discovery_means_no_new_urls(fake_auditor):
    fake_auditor.pages = {f"{BASE}/": FakePageSpec(links=["/x", "/y"])}
    orch = orchestrator(fake_auditor, discovery=False)
    orch.seed([f"{BASE}/"])
    results = await orch.run()
    assert list(results) == [f"{BASE}/"]


@pytest.mark.asyncio()
async def test_discovered_links_wait_for_next_batch(fake_auditor):
    fake_auditor.pages = {
        f"{BASE}/": FakePageSpec(links=["/found", "/other#frag", "https://elsewhere.test/", "/doc.pdf"]),
    }
    orch = orchestrator(fake_auditor, concurrency=2, discovery=True)
    orch.seed([f"{BASE}/", f"{BASE}/seeded"])
    await orch.run()

    # batch 1 holds both seeds; discovered links come afterwards
    assert fake_auditor.navigated[:2] == [f"{BASE}/", f"{BASE}/seeded"]
    assert fake_auditor.navigated[2:] == [f"{BASE}/found", f"{BASE}/other"]


@pytest.mark.asyncio()
async def test_redirects_to_same_page_are_scanned_once(fake_auditor):
    final = f"{BASE}/home"
    fake_auditor.pages = {
        f"{BASE}/": FakePageSpec(final_url=final),
        f"{BASE}/index.html": FakePageSpec(final_url=final),
        f"{BASE}/start": FakePageSpec(final_url=final),
    }
    orch = orchestrator(fake_auditor, concurrency=1)
    orch.seed([f"{BASE}/", f"{BASE}/index.html", f"{BASE}/start"])
    results = await orch.run()

    assert list(results) == [final]
    result = results[final]
    assert isinstance(result, ScanSuccess)
    assert result.original_url == f"{BASE}/"
    assert set(result.sources) == {f"{BASE}/", f"{BASE}/index.html", f"{BASE}/start"}
    assert len(fake_auditor.audited) == 1


@pytest.mark.asyncio()
async def test_redirect_onto_seeded_url_is_not_rescanned(fake_auditor):
    fake_auditor.pages = {f"{BASE}/old": FakePageSpec(final_url=f"{BASE}/new")}
    orch = orchestrator(fake_auditor, concurrency=1)
    orch.seed([f"{BASE}/old", f"{BASE}/new"])
    results = await orch.run()
    assert list(results) == [f"{BASE}/new"]
    assert fake_auditor.navigated == [f"{BASE}/old"]


@pytest.mark.asyncio()
async def test_gate_rejections_are_skipped_not_failed(fake_auditor):
    fake_auditor.pages = {
        f"{BASE}/gone": FakePageSpec(status=404),
        f"{BASE}/report": FakePageSpec(content_type="application/pdf"),
    }
    orch = orchestrator(fake_auditor)
    orch.seed([f"{BASE}/gone", f"{BASE}/report"])
    results = await orch.run()

    gone, report = results[f"{BASE}/gone"], results[f"{BASE}/report"]
    assert isinstance(gone, ScanSkipped) and gone.reason == "HTTP 404"
    assert isinstance(report, ScanSkipped)
    assert report.reason == "skipped non-html content (application/pdf)"
    assert fake_auditor.audited == []


@pytest.mark.asyncio()
async def test_navigation_errors_are_recorded(fake_auditor):
    fake_auditor.pages = {
        f"{BASE}/broken": FakePageSpec(error=NavigationError(f"{BASE}/broken", "net::ERR_FAILED")),
        f"{BASE}/fine": FakePageSpec(),
    }
    orch = orchestrator(fake_auditor)
    orch.seed([f"{BASE}/broken", f"{BASE}/fine"])
    results = await orch.run()

    broken = results[f"{BASE}/broken"]
    assert isinstance(broken, ScanFailed)
    assert "net::ERR_FAILED" in broken.error
    assert isinstance(results[f"{BASE}/fine"], ScanSuccess)
    assert orch.processed == 2


@pytest.mark.asyncio()
async def test_concurrency_is_bounded(fake_auditor):
    for i in range(9):
        fake_auditor.pages[f"{BASE}/{i}"] = FakePageSpec(delay=0.02)
    orch = orchestrator(fake_auditor, concurrency=3)
    orch.seed(f"{BASE}/{i}" for i in range(9))
    results = await orch.run()
    assert len(results) == 9
    assert fake_auditor.peak == 3


@pytest.mark.asyncio()
async def test_failed_page_open_is_recorded(fake_auditor):
    async def broken_open():
        raise RuntimeError("browser crashed")

    fake_auditor.open_page = broken_open
    orch = orchestrator(fake_auditor)
    orch.seed([f"{BASE}/"])
    results = await orch.run()
    assert isinstance(results[f"{BASE}/"], ScanFailed)
    assert results[f"{BASE}/"].error == "browser crashed"
