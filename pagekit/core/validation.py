"""
Field validation signalling.

Pages mark invalid fields in their own way (a background colour, a custom
attribute...). Scenarios only ask one question, `has_validation_error`; how the page
renders the answer lives in an ErrorIndicator declared next to the form.
"""
# @file purpose: Canonical per-field validation-error observable.

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from . import interactions
from .locator import Locator
from .session import Session

_RGBA_OPAQUE = re.compile(r"^rgba\((\d+),(\d+),(\d+),(?:1|1\.0+)\)$")


def normalize_css_value(value: Optional[str]) -> str:
    """Lower-case, drop whitespace and fold opaque rgba() into rgb()."""
    if value is None:
        return ""
    compact = re.sub(r"\s+", "", value).lower()
    m = _RGBA_OPAQUE.match(compact)
    if m:
        return "rgb({},{},{})".format(*m.groups())
    return compact


@dataclass(frozen=True)
class ErrorIndicator:
    """How invalid fields are rendered: a computed style or an attribute with a sentinel value."""

    value: str
    style_property: Optional[str] = None
    attribute_name: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.style_property is None) == (self.attribute_name is None):
            raise ValueError("ErrorIndicator needs exactly one of style_property / attribute_name")

    @classmethod
    def style(cls, prop: str, value: str) -> "ErrorIndicator":
        return cls(value=value, style_property=prop)

    @classmethod
    def attribute(cls, name: str, value: str) -> "ErrorIndicator":
        return cls(value=value, attribute_name=name)

    def matches(self, observed: Optional[str]) -> bool:
        return normalize_css_value(observed) == normalize_css_value(self.value)


async def has_validation_error(
    session: Session, locator: Locator, indicator: ErrorIndicator
) -> bool:
    """Immediate read; wait first if the page validates asynchronously."""
    if indicator.style_property is not None:
        observed = await interactions.read_computed_style(
            session, locator, indicator.style_property
        )
    else:
        assert indicator.attribute_name is not None
        observed = await interactions.read_attribute(session, locator, indicator.attribute_name)
    return indicator.matches(observed)
