# File: a11y_scout/browser.py
"""a11y_scout.browser: Playwright-backed page auditor running axe-core.

One browser and one context are launched per run; every scan task opens its
own page from the shared context. axe-core is injected with
``page.add_script_tag`` from a local file or a URL (``RunConfig.axe_script``).
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeout

from a11y_scout.config import RunConfig
from a11y_scout.exceptions import NavigationError
from a11y_scout.logger import get_logger
from a11y_scout.models import AuditOutcome, Navigation

__all__ = ["PlaywrightAuditor", "PlaywrightPage", "VIEWPORTS", "DEFAULT_AXE_SCRIPT"]

logger = get_logger("browser")

DEFAULT_AXE_SCRIPT = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.10.2/axe.min.js"

VIEWPORTS: Dict[str, Dict[str, Any]] = {
    "desktop": {"viewport": {"width": 1366, "height": 900}},
    "mobile": {
        "viewport": {"width": 390, "height": 844},
        "device_scale_factor": 3,
        "is_mobile": True,
        "has_touch": True,
    },
}

_LINKS_JS = "els => els.map(a => a.href)"
_AXE_RUN_JS = """
async () => {
    const r = await window.axe.run(document);
    return {violations: r.violations, passes: r.passes, incomplete: r.incomplete};
}
"""


class PlaywrightPage:
    """Adapter from a Playwright :class:`Page` to the orchestrator's page contract."""

    def __init__(self, page: Page, axe_script: str) -> None:
        self._page = page
        self._axe_script = axe_script

    async def navigate(self, url: str, timeout_ms: int) -> Navigation:
        try:
            response = await self._page.goto(url, timeout=timeout_ms, wait_until="domcontentloaded")
        except PlaywrightTimeout as exc:
            raise NavigationError(url, f"timed out after {timeout_ms} ms") from exc
        except PlaywrightError as exc:
            raise NavigationError(url, exc.message) from exc
        headers: Dict[str, str] = dict(response.headers) if response else {}
        status = response.status if response else 0
        title = await self._page.title()
        return Navigation(final_url=self._page.url, status=status, headers=headers, title=title)

    async def links(self) -> List[str]:
        return await self._page.eval_on_selector_all("a[href]", _LINKS_JS)

    async def run_audit(self) -> AuditOutcome:
        if self._axe_script.startswith(("http://", "https://")):
            await self._page.add_script_tag(url=self._axe_script)
        else:
            await self._page.add_script_tag(path=self._axe_script)
        raw = await self._page.evaluate(_AXE_RUN_JS)
        return AuditOutcome(
            violations=raw.get("violations", []),
            passes=raw.get("passes", []),
            incomplete=raw.get("incomplete", []),
        )

    async def close(self) -> None:
        await self._page.close()


class PlaywrightAuditor:
    """Launches the configured browser engine and hands out pages.

    Use as an async context manager::

        async with PlaywrightAuditor(cfg) as auditor:
            results = await ScanOrchestrator(auditor, max_pages=cfg.max_pages).run()
    """

    def __init__(self, config: RunConfig) -> None:
        self.config = config
        self.axe_script = self._resolve_axe_script(config.axe_script)
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    @staticmethod
    def _resolve_axe_script(value: Optional[str]) -> str:
        if not value:
            return DEFAULT_AXE_SCRIPT
        if value.startswith(("http://", "https://")):
            return value
        path = Path(value).expanduser()
        if not path.is_file():
            raise FileNotFoundError(f"axe-core script not found: {path}")
        return str(path)

    async def __aenter__(self) -> PlaywrightAuditor:
        self._playwright = await async_playwright().start()
        engine = getattr(self._playwright, self.config.browser)
        self._browser = await engine.launch(headless=True)
        ctx_kwargs: Dict[str, Any] = dict(
            user_agent=self.config.user_agent,
            color_scheme=self.config.color_scheme,
            **VIEWPORTS[self.config.viewport],
        )
        if self.config.browser == "firefox":
            # firefox contexts reject is_mobile
            ctx_kwargs.pop("is_mobile", None)
        self._context = await self._browser.new_context(**ctx_kwargs)
        logger.info(
            "Browser ready: %s, %s viewport, %s scheme",
            self.config.browser, self.config.viewport, self.config.color_scheme,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._context is not None:
            await self._context.close()
        if self._browser is not None:
            await self._browser.close()
        if self._playwright is not None:
            await self._playwright.stop()
        self._context = self._browser = self._playwright = None

    async def open_page(self) -> PlaywrightPage:
        if self._context is None:
            raise RuntimeError("Browser not started; use 'async with PlaywrightAuditor(...)'")
        page = await self._context.new_page()
        return PlaywrightPage(page, self.axe_script)
