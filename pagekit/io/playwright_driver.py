"""
Playwright-based BrowserDriver implementation.

Conforms to io/driver.py's BrowserDriver Protocol:
- start() / stop()
- new_context() / close_context(ctx)
- goto(ctx, url) / current_url(ctx) / clear_storage(ctx) / screenshot(ctx, path)
- find_all(ctx, scope, selector) -> [ElementHandle]
- is_visible / is_enabled / text / value / attribute / computed_style
- clear / type_text / click

Handles are Playwright ElementHandles. They are never kept across interactions; the
helpers re-resolve on every use. Detached-node failures surface as StaleElementError.
Mutations get the caller's remaining `timeout_ms`; running out of it (an overlay on
top, a readonly field) surfaces as pagekit TimeoutError with NOT_INTERACTABLE.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    ElementHandle,
    Error as PwError,
    Page,
    Playwright,
    TimeoutError as PwTimeoutError,
    async_playwright,
)

from pagekit.core import errors
from pagekit.core.locator import Selector
from pagekit.core.logging import get_logger
from pagekit.core.polling import Condition

log = get_logger(__name__)

_DETACHED_MARKERS = (
    "not attached",
    "detached",
    "execution context was destroyed",
    "node is not connected",
)

_VALUE_JS = """el => ['INPUT', 'TEXTAREA', 'SELECT'].includes(el.tagName) ? String(el.value) : null"""
_STYLE_JS = """(el, prop) => window.getComputedStyle(el).getPropertyValue(prop)"""
_CLEAR_STORAGE_JS = """() => {
    try { window.sessionStorage.clear(); } catch (e) {}
    try { window.localStorage.clear(); } catch (e) {}
}"""


@contextmanager
def _translate_errors(action: str, timeout_ms: Optional[int] = None) -> Iterator[None]:
    try:
        yield
    except PwTimeoutError as e:
        raise errors.TimeoutError(
            action,
            f"{Condition.NOT_INTERACTABLE.value} after {timeout_ms}ms",
            condition=Condition.NOT_INTERACTABLE,
            details={"timeout_ms": timeout_ms},
            cause=e,
        ) from e
    except PwError as e:
        msg = str(e).lower()
        if any(marker in msg for marker in _DETACHED_MARKERS):
            raise errors.StaleElementError(
                action, "element is not attached to the DOM", cause=e
            ) from e
        raise


class PlaywrightDriver:
    """
    A concrete BrowserDriver based on Playwright Chromium.
    - `ctx` in this implementation is a Playwright `Page`.
    - Each `new_context()` creates an incognito BrowserContext + a new Page.
    """

    def __init__(
        self,
        *,
        headless: bool = True,
        slow_mo_ms: int = 0,
        default_timeout_ms: int = 30_000,
        viewport: tuple[int, int] = (1024, 768),
    ) -> None:
        self.headless = headless
        self.slow_mo_ms = slow_mo_ms
        self.default_timeout_ms = default_timeout_ms
        self.viewport = viewport

        self._pw: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._page_to_context: Dict[Page, BrowserContext] = {}

    # ---------------- lifecycle ----------------

    async def start(self) -> None:
        """Launch Playwright and a Chromium browser once."""
        if self._browser is not None:
            return
        pw = await async_playwright().start()
        self._pw = pw
        try:
            self._browser = await pw.chromium.launch(
                headless=self.headless, slow_mo=self.slow_mo_ms
            )
        except PwError:
            await pw.stop()
            self._pw = None
            raise

    async def stop(self) -> None:
        """Close all contexts and stop Playwright."""
        try:
            for page in list(self._page_to_context):
                await self.close_context(page)
            if self._browser is not None:
                await self._browser.close()
        finally:
            if self._pw is not None:
                await self._pw.stop()
            self._pw = None
            self._browser = None

    async def new_context(self) -> Page:
        """
        Create a fresh incognito context + page.
        Returns the Page object to be used as `ctx`.
        """
        self._ensure_started()
        assert self._browser is not None
        width, height = self.viewport
        ctx = await self._browser.new_context(viewport={"width": width, "height": height})
        ctx.set_default_timeout(self.default_timeout_ms)
        page = await ctx.new_page()
        self._page_to_context[page] = ctx
        return page

    async def close_context(self, ctx: Any) -> None:
        """Close the page and its owning context."""
        page = self._as_page(ctx)
        context = self._page_to_context.pop(page, None)
        try:
            await page.close()
        finally:
            if context is not None:
                try:
                    await context.close()
                except PwError as e:
                    log.warning("context_close_failed", error=str(e))

    # ---------------- session ----------------

    async def goto(self, ctx: Any, url: str, *, timeout_ms: Optional[int] = None) -> None:
        page = self._as_page(ctx)
        await page.goto(url, timeout=timeout_ms or self.default_timeout_ms, wait_until="load")

    async def current_url(self, ctx: Any) -> str:
        return self._as_page(ctx).url

    async def clear_storage(self, ctx: Any) -> None:
        page = self._as_page(ctx)
        await page.context.clear_cookies()
        await page.evaluate(_CLEAR_STORAGE_JS)

    async def screenshot(self, ctx: Any, path: str, *, full_page: bool = True) -> None:
        page = self._as_page(ctx)
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        await page.screenshot(path=path, full_page=full_page)

    # ---------------- resolution ----------------

    async def find_all(self, ctx: Any, scope: Any | None, selector: Selector) -> list[Any]:
        root: Page | ElementHandle = self._as_page(ctx) if scope is None else scope
        with _translate_errors("find_all"):
            return list(await root.query_selector_all(selector.css))

    # ---------------- introspection ----------------

    async def is_visible(self, ctx: Any, handle: Any) -> bool:
        with _translate_errors("is_visible"):
            return await handle.is_visible()

    async def is_enabled(self, ctx: Any, handle: Any) -> bool:
        with _translate_errors("is_enabled"):
            return await handle.is_enabled()

    async def text(self, ctx: Any, handle: Any) -> str:
        with _translate_errors("text"):
            return (await handle.inner_text()).strip()

    async def value(self, ctx: Any, handle: Any) -> str | None:
        with _translate_errors("value"):
            return await handle.evaluate(_VALUE_JS)

    async def attribute(self, ctx: Any, handle: Any, name: str) -> str | None:
        with _translate_errors("attribute"):
            return await handle.get_attribute(name)

    async def computed_style(self, ctx: Any, handle: Any, prop: str) -> str:
        with _translate_errors("computed_style"):
            return await handle.evaluate(_STYLE_JS, prop)

    # ---------------- mutation ----------------

    async def clear(self, ctx: Any, handle: Any, *, timeout_ms: Optional[int] = None) -> None:
        to = self._budget(timeout_ms)
        with _translate_errors("clear", to):
            await handle.fill("", timeout=to)

    async def type_text(
        self, ctx: Any, handle: Any, text: str, *, timeout_ms: Optional[int] = None
    ) -> None:
        # fill() over key-by-key typing for determinism; the field was cleared first
        to = self._budget(timeout_ms)
        with _translate_errors("type_text", to):
            await handle.fill(text, timeout=to)

    async def click(self, ctx: Any, handle: Any, *, timeout_ms: Optional[int] = None) -> None:
        to = self._budget(timeout_ms)
        with _translate_errors("click", to):
            await handle.scroll_into_view_if_needed(timeout=to)
            await handle.click(timeout=to)

    # ---------------- internals ----------------

    def _budget(self, timeout_ms: Optional[int]) -> int:
        # Playwright reads timeout=0 as "no timeout"
        return self.default_timeout_ms if timeout_ms is None else max(1, timeout_ms)

    def _ensure_started(self) -> None:
        if self._browser is None:
            raise RuntimeError("Browser not started. Call start() first.")

    @staticmethod
    def _as_page(ctx: Any) -> Page:
        if not isinstance(ctx, Page):
            raise TypeError("ctx must be a Playwright Page (returned by new_context()).")
        return ctx
