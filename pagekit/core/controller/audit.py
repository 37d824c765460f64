# pagekit/core/controller/audit.py
"""
Sequential locator audit for one page object.

Responsibilities:
- Walk the page's component tree in declaration order
- Resolve each locator once (no waiting) and record match count / visibility / enabled state
- On any missing locator: save a screenshot artifact (if artifacts_dir is set)
- Return an AuditReport for CLI rendering and the report writer
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ...reporting.schemas import AuditReport, LocatorStatus
from .. import interactions
from ..component import walk
from ..errors import StaleElementError
from ..logging import get_logger
from ..session import Session

log = get_logger(__name__)


class Auditor:
    def __init__(self, *, artifacts_dir: Path | None = None) -> None:
        self.artifacts_dir = artifacts_dir
        if self.artifacts_dir:
            self.artifacts_dir.mkdir(parents=True, exist_ok=True)

    async def run(self, session: Session, page: Any, *, name: str | None = None) -> AuditReport:
        """Audit an already opened page."""
        page_name = name or type(page).__name__
        items: list[LocatorStatus] = []

        for path, locator in walk(page):
            status = LocatorStatus(path=path, selector=locator.describe())
            try:
                status.matches = await interactions.count_matches(session, locator)
                handle = await interactions.resolve(session, locator)
                if handle is not None:
                    status.found = True
                    status.visible = await session.driver.is_visible(session.ctx, handle)
                    status.enabled = await session.driver.is_enabled(session.ctx, handle)
            except StaleElementError as e:
                status.detail = f"stale during audit: {e}"
            if status.ambiguous:
                status.detail = f"{status.matches} matches, first one used"
            items.append(status)
            log.debug("audit_locator", page=page_name, path=path, found=status.found)

        missing = sum(1 for s in items if not s.found)
        report = AuditReport(
            page=page_name,
            url=await session.current_url(),
            total=len(items),
            found=len(items) - missing,
            missing=missing,
            items=items,
        )
        if missing:
            report.artifact_path = await self._on_failure(session, page_name)
        log.info("audit_finished", page=page_name, total=report.total, missing=missing)
        return report

    async def _on_failure(self, session: Session, name: str) -> str | None:
        """Failure artifact (screenshot)."""
        if not self.artifacts_dir:
            return None
        png = self.artifacts_dir / f"audit-{name}.png"
        await session.driver.screenshot(session.ctx, str(png), full_page=True)
        return str(png)
