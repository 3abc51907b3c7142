"""Render a MarkupTree to PDF bytes through a rendering engine."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from resume_delivery.config import RendererConfig
from resume_delivery.exceptions import (
    EngineUnavailableError,
    RenderError,
    RenderFailedError,
)
from resume_delivery.export.engines import EngineLauncher, Page, create_launcher
from resume_delivery.models.markup import MarkupTree
from resume_delivery.models.page import Margins, PageOptions, PageSize
from resume_delivery.templates.html import DEFAULT_THEME, render_html

logger = logging.getLogger(__name__)

QUIESCENCE_EVENT = "networkidle"


class DocumentRenderer:
    """Turns document trees into PDFs, one engine instance per call.

    At most ``max_sessions`` engine instances are alive at once. Extra calls
    queue for a free slot, or fail with ``EngineUnavailableError`` once
    ``acquire_timeout_seconds`` has passed.

    A slot is held until the engine's leftover work ends, not just until the
    call returns. A WeasyPrint layout that timed out keeps its thread and its
    slot until it finishes, so timeouts cannot push the number of running
    layouts past ``max_sessions``.
    """

    def __init__(
        self,
        launcher: EngineLauncher,
        *,
        max_sessions: int = 2,
        quiescence_timeout_ms: int = 30000,
        acquire_timeout_seconds: float | None = None,
        theme: str = DEFAULT_THEME,
    ):
        self._launcher = launcher
        self._slots = asyncio.Semaphore(max_sessions)
        self.max_sessions = max_sessions
        self.quiescence_timeout_ms = quiescence_timeout_ms
        self.acquire_timeout_seconds = acquire_timeout_seconds
        self.theme = theme
        self.live_sessions = 0
        self.sessions_started = 0
        self._draining: set[asyncio.Task] = set()

    @classmethod
    def from_config(
        cls, config: RendererConfig, launcher: EngineLauncher | None = None
    ) -> DocumentRenderer:
        return cls(
            launcher or create_launcher(config),
            max_sessions=config.max_sessions,
            quiescence_timeout_ms=config.quiescence_timeout_ms,
            acquire_timeout_seconds=config.acquire_timeout_seconds,
            theme=config.theme,
        )

    async def render(self, tree: MarkupTree, options: PageOptions | None = None) -> bytes:
        """Render the tree to PDF bytes.

        Raises:
            EngineUnavailableError: engine failed to start or no slot freed up.
            RenderTimeoutError: content did not settle within the timeout.
            RenderFailedError: loading or printing failed.
        """
        options = options or PageOptions()
        html = render_html(tree, self.theme)

        await self._acquire_slot()
        lingering: list = []
        try:
            async with self._session(lingering) as page:
                try:
                    await page.set_content(
                        html,
                        wait_until=QUIESCENCE_EVENT,
                        timeout=self.quiescence_timeout_ms,
                    )
                except RenderError:
                    raise
                except Exception as exc:
                    raise RenderFailedError("Failed to load document content") from exc

                try:
                    data = await page.pdf(**options.to_pdf_kwargs())
                except RenderError:
                    raise
                except Exception as exc:
                    raise RenderFailedError("Print to PDF failed") from exc
        finally:
            if lingering:
                self._release_when_done(lingering)
            else:
                self._slots.release()

        if not data:
            raise RenderFailedError("Engine produced an empty document")
        logger.debug("Rendered %d bytes (%s)", len(data), options.page_size.value)
        return data

    async def _acquire_slot(self) -> None:
        if self.acquire_timeout_seconds is None:
            await self._slots.acquire()
            return
        try:
            await asyncio.wait_for(self._slots.acquire(), self.acquire_timeout_seconds)
        except asyncio.TimeoutError as exc:
            raise EngineUnavailableError(
                f"No render session free within {self.acquire_timeout_seconds}s "
                f"({self.max_sessions} in use)"
            ) from exc

    def _release_when_done(self, pending: list) -> None:
        async def _drain() -> None:
            try:
                await asyncio.gather(*pending, return_exceptions=True)
            finally:
                self._slots.release()
                logger.debug("Released session slot after %d background task(s)", len(pending))

        task = asyncio.get_running_loop().create_task(_drain())
        self._draining.add(task)
        task.add_done_callback(self._draining.discard)

    @asynccontextmanager
    async def _session(self, lingering: list) -> AsyncIterator[Page]:
        """One engine instance with one page, closed on every exit path.

        Work the engine leaves running after close is appended to ``lingering``.
        """
        self.sessions_started += 1
        try:
            engine = await self._launcher.launch()
        except Exception as exc:
            raise EngineUnavailableError("Rendering engine failed to start") from exc

        self.live_sessions += 1
        try:
            try:
                page = await engine.new_page()
            except Exception as exc:
                raise RenderFailedError("Failed to open a page") from exc
            yield page
        finally:
            try:
                await engine.close()
            except Exception:
                logger.warning("Failed to close rendering engine", exc_info=True)
            finally:
                self.live_sessions -= 1
                lingering.extend(getattr(engine, "background", ()))


def page_options_from_config(config: RendererConfig) -> PageOptions:
    return PageOptions(
        page_size=PageSize(config.page_size),
        print_background=config.print_background,
        margins=Margins.uniform(config.margin),
    )
