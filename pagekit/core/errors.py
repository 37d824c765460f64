"""
Error taxonomy for pagekit.

- PageKitError: base class for every custom error
- InteractionError: an interaction against the live DOM failed (carries locator context)
- TimeoutError: a polled condition never held within its budget; carries the last condition
- StaleElementError: a resolved node was detached before the action finished
- ElementNotFoundError: an immediate (non-polling) read found no element
"""
# @file purpose: Define error taxonomy for pagekit.

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .polling import Condition


class PageKitError(Exception):
    """Base class for all custom errors in pagekit."""


class InteractionError(PageKitError):
    """
    Raised when an interaction helper fails.
    Wraps the action name and locator description so the test runner can print
    a single diagnostic line.
    """

    def __init__(
        self,
        action: str,
        message: str,
        *,
        selector: str | None = None,
        url: str | None = None,
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.action: str = action
        self.selector: str | None = selector
        self.url: str | None = url
        self.details: dict[str, Any] = details or {}
        self.cause: BaseException | None = cause

    def __str__(self) -> str:
        parts = [f"[{self.action}] {super().__str__()}"]
        if self.selector:
            parts.append(f"selector={self.selector}")
        if self.url:
            parts.append(f"url={self.url}")
        if self.details:
            kv = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            parts.append(f"details={{ {kv} }}")
        return " | ".join(parts)


class TimeoutError(InteractionError):
    """Raised when a waiting helper runs out of time."""

    def __init__(self, action: str, message: str, *, condition: Condition, **kwargs: Any) -> None:
        super().__init__(action, message, **kwargs)
        self.condition = condition


class StaleElementError(InteractionError):
    """Raised when a node was removed or replaced while being acted on."""


class ElementNotFoundError(InteractionError):
    """Raised by immediate reads when the locator resolves to nothing."""
