"""
One logical browser session: a driver, its execution context and the wait defaults.

Scenarios hold exactly one Session and use it strictly one call at a time.
"""
# @file purpose: Bind a driver context to base URL and timeout defaults.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import urljoin

from pagekit.io.driver import BrowserDriver

from .logging import get_logger
from .settings import Settings, settings as default_settings

log = get_logger(__name__)


class Navigable(Protocol):
    @property
    def relative_url(self) -> str: ...


@dataclass
class Session:
    driver: BrowserDriver
    ctx: Any
    base_url: str
    timeout_ms: int = 5_000
    poll_interval_ms: int = 100
    navigation_timeout_ms: int | None = None

    @classmethod
    def from_settings(
        cls, driver: BrowserDriver, ctx: Any, cfg: Settings | None = None, **overrides: Any
    ) -> "Session":
        cfg = cfg or default_settings
        values: dict[str, Any] = {
            "base_url": cfg.base_url,
            "timeout_ms": cfg.default_timeout_ms,
            "poll_interval_ms": cfg.poll_interval_ms,
            "navigation_timeout_ms": cfg.navigation_timeout_ms,
        }
        values.update(overrides)
        return cls(driver=driver, ctx=ctx, **values)

    def url_for(self, relative_url: str) -> str:
        """Resolve a page's relative URL against the base URL."""
        return urljoin(self.base_url, relative_url)

    async def navigate(self, relative_url: str) -> str:
        url = self.url_for(relative_url)
        log.info("navigate", url=url)
        await self.driver.goto(self.ctx, url, timeout_ms=self.navigation_timeout_ms)
        return url

    async def open(self, page: Navigable) -> str:
        """Navigate to a page object's URL. Construction never navigates; this does."""
        return await self.navigate(page.relative_url)

    async def current_url(self) -> str:
        return await self.driver.current_url(self.ctx)

    async def reset(self) -> None:
        """Clear cookies and web storage so no state survives between scenarios."""
        await self.driver.clear_storage(self.ctx)
        log.debug("session_reset")
