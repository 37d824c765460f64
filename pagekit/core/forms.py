"""
Form fill convenience: sequential composition of interaction helpers.

Fields are filled in declaration order; missing or empty data items are skipped,
which is how scenarios reach the validation-error paths. Nothing here asserts.
"""
# @file purpose: Fill declared form fields from data and submit.

from __future__ import annotations

from typing import Any, Mapping, Union

from pydantic import BaseModel

from . import interactions
from .component import form_fields, submit_control
from .locator import Locator
from .logging import get_logger
from .session import Session

log = get_logger(__name__)

FormData = Union[Mapping[str, Any], BaseModel]


def _as_mapping(data: FormData) -> Mapping[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump()
    return data


async def fill_form(
    session: Session, form: Any, data: FormData, *, timeout_ms: int | None = None
) -> list[str]:
    """Fill every declared field that has a non-empty value; returns the keys filled."""
    values = _as_mapping(data)
    filled: list[str] = []
    for key, locator in form_fields(form):
        value = values.get(key)
        if value is None or value == "":
            continue
        await interactions.fill_field(session, locator, str(value), timeout_ms=timeout_ms)
        filled.append(key)
    log.debug("form_filled", form=type(form).__name__, fields=filled)
    return filled


async def fill_form_and_submit(
    session: Session,
    form: Any,
    data: FormData,
    *,
    submit: Locator | None = None,
    timeout_ms: int | None = None,
) -> list[str]:
    button = submit or submit_control(form)
    if button is None:
        raise ValueError(f"{type(form).__name__} declares no submit control")
    filled = await fill_form(session, form, data, timeout_ms=timeout_ms)
    await interactions.click(session, button, timeout_ms=timeout_ms)
    return filled
