"""
Browser driver protocol (abstraction).

This Protocol is the whole capability set the interaction helpers rely on, so any
backend (Playwright today, a WebDriver or CDP client later) can be plugged in
without touching pages or helpers.

Notes:
- `ctx` is an execution context for one scenario. In the Playwright implementation
  it is a `Page` created via `new_context()`.
- `find_all` resolves ONE selector step under `scope` (a handle it returned earlier,
  or None for the document). Chains are walked by the caller.
- Handles are only used within a single interaction. Any handle method must raise
  `pagekit.core.errors.StaleElementError` when its node is no longer attached.
- Mutations take the caller's remaining budget as `timeout_ms` and raise
  `pagekit.core.errors.TimeoutError` (condition NOT_INTERACTABLE) when the backend
  could not complete the action within it.
"""

from __future__ import annotations

from typing import Any, Protocol

from pagekit.core.locator import Selector


class BrowserDriver(Protocol):
    # -------- lifecycle --------
    async def start(self) -> None: ...
    async def stop(self) -> None: ...
    async def new_context(self) -> Any: ...
    async def close_context(self, ctx: Any) -> None: ...

    # -------- session --------
    async def goto(self, ctx: Any, url: str, *, timeout_ms: int | None = None) -> None: ...
    async def current_url(self, ctx: Any) -> str: ...
    async def clear_storage(self, ctx: Any) -> None: ...
    async def screenshot(self, ctx: Any, path: str, *, full_page: bool = True) -> None: ...

    # -------- resolution --------
    async def find_all(self, ctx: Any, scope: Any | None, selector: Selector) -> list[Any]: ...

    # -------- introspection --------
    async def is_visible(self, ctx: Any, handle: Any) -> bool: ...
    async def is_enabled(self, ctx: Any, handle: Any) -> bool: ...
    async def text(self, ctx: Any, handle: Any) -> str: ...
    async def value(self, ctx: Any, handle: Any) -> str | None: ...
    async def attribute(self, ctx: Any, handle: Any, name: str) -> str | None: ...
    async def computed_style(self, ctx: Any, handle: Any, prop: str) -> str: ...

    # -------- mutation --------
    async def clear(self, ctx: Any, handle: Any, *, timeout_ms: int | None = None) -> None: ...
    async def type_text(
        self, ctx: Any, handle: Any, text: str, *, timeout_ms: int | None = None
    ) -> None: ...
    async def click(self, ctx: Any, handle: Any, *, timeout_ms: int | None = None) -> None: ...
