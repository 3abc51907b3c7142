"""Rendering engine launchers.

A launcher starts one engine instance per call to ``launch()``. The engine
opens pages that accept HTML content and print it to PDF bytes:

    engine = await launcher.launch()
    page = await engine.new_page()
    await page.set_content(html, wait_until="networkidle", timeout=30000)
    data = await page.pdf(format="A4", print_background=True, margin={...})
    await engine.close()

Engines raise ``RenderTimeoutError`` themselves when content does not settle
in time, so the renderer does not need to know engine-specific exceptions.
An engine whose work can outlive a failed call lists that work in a
``background`` attribute; the renderer keeps the session slot until it ends.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from resume_delivery.config import RendererConfig
from resume_delivery.exceptions import RenderTimeoutError
from resume_delivery.models.page import PageOptions

logger = logging.getLogger(__name__)


class Page(Protocol):
    async def set_content(self, html: str, *, wait_until: str, timeout: float) -> None: ...

    async def pdf(self, **options: Any) -> bytes: ...


class Engine(Protocol):
    async def new_page(self) -> Page: ...

    async def close(self) -> None: ...


class EngineLauncher(Protocol):
    async def launch(self) -> Engine: ...


# --- Headless Chromium via Playwright ---


class _PlaywrightPage:
    def __init__(self, page):
        self._page = page

    async def set_content(self, html: str, *, wait_until: str, timeout: float) -> None:
        from playwright.async_api import TimeoutError as PlaywrightTimeoutError

        try:
            await self._page.set_content(html, wait_until=wait_until, timeout=timeout)
        except PlaywrightTimeoutError as exc:
            raise RenderTimeoutError(
                f"Content did not reach {wait_until} within {timeout:.0f}ms"
            ) from exc

    async def pdf(self, **options: Any) -> bytes:
        return await self._page.pdf(**options)


class _PlaywrightEngine:
    def __init__(self, playwright, browser):
        self._playwright = playwright
        self._browser = browser

    async def new_page(self) -> _PlaywrightPage:
        return _PlaywrightPage(await self._browser.new_page())

    async def close(self) -> None:
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()


class PlaywrightLauncher:
    """Launches one headless Chromium browser per render session."""

    def __init__(
        self,
        headless: bool = True,
        args: tuple[str, ...] = ("--no-sandbox", "--disable-setuid-sandbox"),
    ):
        self.headless = headless
        self.args = list(args)

    async def launch(self) -> _PlaywrightEngine:
        from playwright.async_api import async_playwright

        playwright = await async_playwright().start()
        try:
            browser = await playwright.chromium.launch(headless=self.headless, args=self.args)
        except BaseException:
            await playwright.stop()
            raise
        logger.debug("Chromium launched (headless=%s)", self.headless)
        return _PlaywrightEngine(playwright, browser)


# --- WeasyPrint (no browser, lays out from CSS) ---


class _WeasyPrintPage:
    def __init__(self, engine: _WeasyPrintEngine):
        self._engine = engine
        self._html: str | None = None
        self._timeout_ms: float | None = None

    async def set_content(self, html: str, *, wait_until: str, timeout: float) -> None:
        # WeasyPrint fetches resources while laying out, so the wait happens in pdf()
        self._html = html
        self._timeout_ms = timeout

    async def pdf(self, **options: Any) -> bytes:
        if self._html is None:
            raise RuntimeError("set_content() must be called before pdf()")
        page_options = PageOptions.from_pdf_kwargs(options)
        timeout = self._timeout_ms / 1000 if self._timeout_ms else None
        layout = asyncio.ensure_future(asyncio.to_thread(_weasyprint_pdf, self._html, page_options))
        try:
            # shielded so the layout stays awaitable after the deadline
            return await asyncio.wait_for(asyncio.shield(layout), timeout)
        except asyncio.TimeoutError as exc:
            self._engine.background.append(layout)
            raise RenderTimeoutError(f"Layout did not finish within {timeout}s") from exc
        except asyncio.CancelledError:
            self._engine.background.append(layout)
            raise


def _weasyprint_pdf(html: str, options: PageOptions) -> bytes:
    from weasyprint import CSS, HTML

    return HTML(string=html).write_pdf(stylesheets=[CSS(string=options.to_page_css())])


class _WeasyPrintEngine:
    """Layouts run in worker threads, which cannot be interrupted.

    A layout abandoned after a timeout or cancellation is kept in
    ``background`` so the caller can wait for the thread to finish.
    """

    def __init__(self):
        self.background: list[asyncio.Future] = []

    async def new_page(self) -> _WeasyPrintPage:
        return _WeasyPrintPage(self)

    async def close(self) -> None:
        return None


class WeasyPrintLauncher:
    """In-process engine backed by WeasyPrint."""

    async def launch(self) -> _WeasyPrintEngine:
        # Fails here rather than mid-render when the native libraries are missing
        import weasyprint  # noqa: F401

        return _WeasyPrintEngine()


def create_launcher(config: RendererConfig) -> EngineLauncher:
    if config.engine == "weasyprint":
        return WeasyPrintLauncher()
    return PlaywrightLauncher(headless=config.headless, args=config.chromium_args)
