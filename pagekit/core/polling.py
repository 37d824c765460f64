"""
Poll-until-condition primitive shared by every waiting helper.

A check is an async callable returning a Probe. `poll` re-runs it at a fixed interval
until the probe reports Condition.MET or the deadline passes, then raises
errors.TimeoutError carrying the last observed condition. No backoff.
"""
# @file purpose: Fixed-interval polling with a deadline.

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from . import errors
from .logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")


class Condition(str, Enum):
    NOT_FOUND = "element not found"
    HIDDEN = "element found but not visible"
    DISABLED = "element found but not enabled"
    NOT_INTERACTABLE = "element found but did not accept the action"
    VALUE_MISMATCH = "element value differs from expected"
    TEXT_PRESENT = "element still shows the text"
    URL_MISMATCH = "url differs from expected"
    MET = "met"


@dataclass(frozen=True)
class Probe(Generic[T]):
    """Result of one check: the observed condition and, when met, a value."""

    condition: Condition
    value: Optional[T] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.condition is Condition.MET

    @classmethod
    def met(cls, value: Any = None) -> "Probe[Any]":
        return cls(Condition.MET, value)


Check = Callable[[], Awaitable[Probe[T]]]


def deadline_after(timeout_ms: int) -> float:
    return time.monotonic() + timeout_ms / 1000


def remaining_ms(deadline: float) -> int:
    return max(0, int((deadline - time.monotonic()) * 1000))


async def poll(
    check: Check[T],
    *,
    timeout_ms: int,
    interval_ms: int,
    action: str,
    target: str | None = None,
) -> Optional[T]:
    """
    Run `check` until it is met or `timeout_ms` elapses.
    The check always runs at least once, even with a zero timeout.
    Returns the value of the successful probe.
    """
    deadline = deadline_after(timeout_ms)
    attempts = 0
    while True:
        attempts += 1
        probe = await check()
        if probe.ok:
            log.debug("poll_succeeded", action=action, target=target, attempts=attempts)
            return probe.value

        left = deadline - time.monotonic()
        if left <= 0:
            log.info(
                "poll_timed_out",
                action=action,
                target=target,
                condition=probe.condition.value,
                attempts=attempts,
            )
            details: dict[str, Any] = {"timeout_ms": timeout_ms, "attempts": attempts}
            if probe.detail:
                details["last"] = probe.detail
            raise errors.TimeoutError(
                action,
                f"{probe.condition.value} after {timeout_ms}ms",
                condition=probe.condition,
                selector=target,
                details=details,
            )
        await asyncio.sleep(min(interval_ms / 1000, left))
