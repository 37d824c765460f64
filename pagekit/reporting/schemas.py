"""
Reporting data models for locator audits.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class LocatorStatus(BaseModel):
    """What one locator resolved to on the live page."""

    path: str
    selector: str
    matches: int = 0
    found: bool = False
    visible: bool = False
    enabled: Optional[bool] = None
    detail: str = "-"

    @property
    def ambiguous(self) -> bool:
        return self.matches > 1


class AuditReport(BaseModel):
    """Audit outcome for a single page."""

    page: str
    url: str
    total: int
    found: int
    missing: int
    items: List[LocatorStatus] = Field(default_factory=list)
    artifact_path: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.missing == 0
