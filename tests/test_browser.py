# File: tests/test_browser.py
from __future__ import annotations

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeout

from a11y_scout.browser import DEFAULT_AXE_SCRIPT, PlaywrightAuditor, PlaywrightPage
from a11y_scout.config import RunConfig
from a11y_scout.exceptions import NavigationError


class StubResponse:
    status = 200
    headers = {"content-type": "text/html"}


class StubPage:
    """Just enough of playwright's Page for the adapter."""

    def __init__(self, url: str = "about:blank", error: Exception | None = None) -> None:
        self.url = url
        self.error = error
        self.scripts = []
        self.closed = False

    async def goto(self, url, timeout, wait_until):
        if self.error is not None:
            raise self.error
        self.url = url + "landing"
        return StubResponse()

    async def title(self):
        return "Landing"

    async def eval_on_selector_all(self, selector, script):
        return ["https://site.test/a"]

    async def add_script_tag(self, **kwargs):
        self.scripts.append(kwargs)

    async def evaluate(self, script):
        return {"violations": [{"id": "label", "nodes": [{}]}], "passes": []}

    async def close(self):
        self.closed = True


@pytest.mark.asyncio()
async def test_page_adapter_reports_final_url_and_audit():
    stub = StubPage()
    page = PlaywrightPage(stub, DEFAULT_AXE_SCRIPT)

    nav = await page.navigate("https://site.test/", 1000)
    assert nav.final_url == "https://site.test/landing"
    assert nav.status == 200
    assert nav.content_type == "text/html"
    assert nav.title == "Landing"
    assert await page.links() == ["https://site.test/a"]

    outcome = await page.run_audit()
    assert stub.scripts == [{"url": DEFAULT_AXE_SCRIPT}]
    assert outcome.violations[0]["id"] == "label"
    assert outcome.incomplete == []

    await page.close()
    assert stub.closed


@pytest.mark.asyncio()
async def test_page_adapter_maps_timeouts():
    page = PlaywrightPage(StubPage(error=PlaywrightTimeout("Timeout 50ms exceeded")), DEFAULT_AXE_SCRIPT)
    with pytest.raises(NavigationError) as exc_info:
        await page.navigate("https://site.test/slow", 50)
    assert exc_info.value.url == "https://site.test/slow"
    assert "timed out after 50 ms" in str(exc_info.value)


def test_axe_script_resolution(tmp_path):
    assert PlaywrightAuditor(RunConfig()).axe_script == DEFAULT_AXE_SCRIPT
    assert PlaywrightAuditor(RunConfig(axe_script="https://cdn.test/axe.js")).axe_script == "https://cdn.test/axe.js"

    local = tmp_path / "axe.min.js"
    local.write_text("window.axe = {};", encoding="utf-8")
    assert PlaywrightAuditor(RunConfig(axe_script=str(local))).axe_script == str(local)

    with pytest.raises(FileNotFoundError):
        PlaywrightAuditor(RunConfig(axe_script=str(tmp_path / "missing.js")))


@pytest.mark.asyncio()
async def test_open_page_requires_started_browser():
    with pytest.raises(RuntimeError):
        await PlaywrightAuditor(RunConfig()).open_page()
