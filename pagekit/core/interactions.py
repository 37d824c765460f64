"""
Synchronised interactions against a Locator.

Every helper takes the Session and a Locator and resolves the locator afresh; no node
handle survives past the call that obtained it.

Waiting helpers poll at the session's fixed interval until the condition holds or the
timeout elapses (errors.TimeoutError, with the last observed condition):
- wait_for_visibility / wait_for_clickability
- fill_field (visible -> clear -> type -> value verified)
- click (clickable -> click; nothing is read afterwards)
- wait_for_text_absence / wait_for_url

Immediate reads never wait: read_text / read_attribute / read_computed_style /
is_displayed / count_matches.

fill_field, click and the reads re-resolve and retry exactly once when the node is
detached mid-action; a second detachment propagates as errors.StaleElementError.
Driver mutations run on whatever is left of the helper's timeout, never on the
driver's own default.
"""
# @file purpose: Implement the synchronisation-aware interaction helpers.

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional, TypeVar

from . import errors
from .locator import Locator
from .logging import get_logger, interaction
from .polling import Condition, Probe, deadline_after, poll, remaining_ms
from .session import Session

log = get_logger(__name__)

T = TypeVar("T")


# ------------------------------------------------------------------------------
# resolution
# ------------------------------------------------------------------------------


async def resolve(session: Session, locator: Locator) -> Optional[Any]:
    """Walk the selector chain taking the first match at each step; None if any step misses."""
    handle: Any = None
    for selector in locator.chain():
        matches = await session.driver.find_all(session.ctx, handle, selector)
        if not matches:
            return None
        if len(matches) > 1:
            log.debug(
                "ambiguous_selector",
                locator=locator.describe(),
                selector=selector.css,
                matches=len(matches),
            )
        handle = matches[0]
    return handle


async def count_matches(session: Session, locator: Locator) -> int:
    """How many nodes the last selector step matches under the resolved scope."""
    scope: Any = None
    if locator.parent is not None:
        scope = await resolve(session, locator.parent)
        if scope is None:
            return 0
    return len(await session.driver.find_all(session.ctx, scope, locator.selector))


def _timeout(session: Session, timeout_ms: int | None) -> int:
    return session.timeout_ms if timeout_ms is None else timeout_ms


# ------------------------------------------------------------------------------
# probes
# ------------------------------------------------------------------------------


async def _probe_visible(session: Session, locator: Locator) -> Probe[Any]:
    try:
        handle = await resolve(session, locator)
        if handle is None:
            return Probe(Condition.NOT_FOUND)
        if not await session.driver.is_visible(session.ctx, handle):
            return Probe(Condition.HIDDEN)
    except errors.StaleElementError:
        return Probe(Condition.NOT_FOUND, detail="detached while checking visibility")
    return Probe.met(handle)


async def _probe_clickable(session: Session, locator: Locator) -> Probe[Any]:
    probe = await _probe_visible(session, locator)
    if not probe.ok:
        return probe
    try:
        if not await session.driver.is_enabled(session.ctx, probe.value):
            return Probe(Condition.DISABLED)
    except errors.StaleElementError:
        return Probe(Condition.NOT_FOUND, detail="detached while checking enabled state")
    return probe


async def _current_text(session: Session, handle: Any) -> str:
    value = await session.driver.value(session.ctx, handle)
    if value is not None:
        return value
    return await session.driver.text(session.ctx, handle)


# ------------------------------------------------------------------------------
# waits
# ------------------------------------------------------------------------------


async def wait_for_visibility(
    session: Session, locator: Locator, *, timeout_ms: int | None = None
) -> None:
    with interaction("wait_for_visibility", locator.describe()):
        await poll(
            lambda: _probe_visible(session, locator),
            timeout_ms=_timeout(session, timeout_ms),
            interval_ms=session.poll_interval_ms,
            action="wait_for_visibility",
            target=locator.describe(),
        )


async def wait_for_clickability(
    session: Session, locator: Locator, *, timeout_ms: int | None = None
) -> None:
    with interaction("wait_for_clickability", locator.describe()):
        await poll(
            lambda: _probe_clickable(session, locator),
            timeout_ms=_timeout(session, timeout_ms),
            interval_ms=session.poll_interval_ms,
            action="wait_for_clickability",
            target=locator.describe(),
        )


async def wait_for_text_absence(
    session: Session, locator: Locator, text: str, *, timeout_ms: int | None = None
) -> None:
    """Wait until the element's text no longer equals `text`, or the element is gone."""

    async def check() -> Probe[None]:
        try:
            handle = await resolve(session, locator)
            if handle is None:
                return Probe.met()
            current = await _current_text(session, handle)
        except errors.StaleElementError:
            # re-rendered mid-check; the next pass re-resolves
            return Probe(Condition.TEXT_PRESENT, detail="detached while reading")
        if current == text:
            return Probe(Condition.TEXT_PRESENT, detail=f"text={current!r}")
        return Probe.met()

    with interaction("wait_for_text_absence", locator.describe()):
        await poll(
            check,
            timeout_ms=_timeout(session, timeout_ms),
            interval_ms=session.poll_interval_ms,
            action="wait_for_text_absence",
            target=locator.describe(),
        )


async def wait_for_url(
    session: Session, expected_url: str, *, timeout_ms: int | None = None
) -> None:
    async def check() -> Probe[None]:
        current = await session.current_url()
        if current == expected_url:
            return Probe.met()
        return Probe(Condition.URL_MISMATCH, detail=f"current={current!r}")

    with interaction("wait_for_url", None):
        await poll(
            check,
            timeout_ms=_timeout(session, timeout_ms),
            interval_ms=session.poll_interval_ms,
            action="wait_for_url",
            target=expected_url,
        )


# ------------------------------------------------------------------------------
# actions
# ------------------------------------------------------------------------------


async def _retry_stale_once(
    action: str, locator: Locator, attempt: Callable[[], Awaitable[T]]
) -> T:
    with interaction(action, locator.describe()):
        try:
            return await attempt()
        except errors.StaleElementError:
            log.info("stale_element_retry", action=action, locator=locator.describe())
        try:
            return await attempt()
        except errors.StaleElementError as e:
            raise errors.StaleElementError(
                action,
                "element was replaced again after re-resolving",
                selector=locator.describe(),
                cause=e,
            ) from e


async def _mutate(locator: Locator, call: Awaitable[None]) -> None:
    """Await one driver mutation; a driver-side timeout gets the locator attached."""
    try:
        await call
    except errors.TimeoutError as e:
        if e.selector is None:
            e.selector = locator.describe()
        raise


async def fill_field(
    session: Session, locator: Locator, text: str, *, timeout_ms: int | None = None
) -> None:
    """Wait for the field, clear it, type `text` and verify the resulting value."""
    deadline = deadline_after(_timeout(session, timeout_ms))
    target = locator.describe()

    async def attempt() -> None:
        handle = await poll(
            lambda: _probe_visible(session, locator),
            timeout_ms=remaining_ms(deadline),
            interval_ms=session.poll_interval_ms,
            action="fill_field",
            target=target,
        )
        await _mutate(
            locator,
            session.driver.clear(session.ctx, handle, timeout_ms=remaining_ms(deadline)),
        )
        await _mutate(
            locator,
            session.driver.type_text(
                session.ctx, handle, text, timeout_ms=remaining_ms(deadline)
            ),
        )

        async def verify() -> Probe[None]:
            # same handle on purpose: a replaced node surfaces as stale and is retried
            current = await _current_text(session, handle)
            if current == text:
                return Probe.met()
            return Probe(Condition.VALUE_MISMATCH, detail=f"value={current!r}")

        await poll(
            verify,
            timeout_ms=remaining_ms(deadline),
            interval_ms=session.poll_interval_ms,
            action="fill_field",
            target=target,
        )

    await _retry_stale_once("fill_field", locator, attempt)


async def click(session: Session, locator: Locator, *, timeout_ms: int | None = None) -> None:
    """Wait until clickable, then click. The click may navigate, so nothing is read afterwards."""
    deadline = deadline_after(_timeout(session, timeout_ms))

    async def attempt() -> None:
        handle = await poll(
            lambda: _probe_clickable(session, locator),
            timeout_ms=remaining_ms(deadline),
            interval_ms=session.poll_interval_ms,
            action="click",
            target=locator.describe(),
        )
        await _mutate(
            locator,
            session.driver.click(session.ctx, handle, timeout_ms=remaining_ms(deadline)),
        )

    await _retry_stale_once("click", locator, attempt)


# ------------------------------------------------------------------------------
# immediate reads
# ------------------------------------------------------------------------------


async def _read(
    session: Session,
    locator: Locator,
    action: str,
    read: Callable[[Any], Awaitable[T]],
) -> T:
    async def attempt() -> T:
        handle = await resolve(session, locator)
        if handle is None:
            raise errors.ElementNotFoundError(
                action, "element not found", selector=locator.describe()
            )
        return await read(handle)

    return await _retry_stale_once(action, locator, attempt)


async def read_text(session: Session, locator: Locator) -> str:
    """Current value for form controls, rendered text for everything else."""
    return await _read(session, locator, "read_text", lambda h: _current_text(session, h))


async def read_attribute(session: Session, locator: Locator, name: str) -> str | None:
    return await _read(
        session,
        locator,
        "read_attribute",
        lambda h: session.driver.attribute(session.ctx, h, name),
    )


async def read_computed_style(session: Session, locator: Locator, prop: str) -> str:
    return await _read(
        session,
        locator,
        "read_computed_style",
        lambda h: session.driver.computed_style(session.ctx, h, prop),
    )


async def is_displayed(session: Session, locator: Locator) -> bool:
    """Immediate check: resolved and visible right now."""
    probe = await _probe_visible(session, locator)
    return probe.ok
