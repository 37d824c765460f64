"""
Deferred element references.

A Locator is a value: a parent scope plus one selector. Building one never talks to
the browser; the interaction helpers resolve it against the live DOM on every use,
so a Locator stays valid before its node is rendered and after the node is replaced.

    form = element(By.css("form"))
    name = form.find(By.id("name"))
    name.describe()  # "form >> #name"
"""
# @file purpose: Define Selector, Locator and the root scope.

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Union


class SelectorStrategy(str, Enum):
    CSS = "css"
    ID = "id"
    CLASS_NAME = "class_name"
    TAG = "tag"


_CSS_IDENT_SAFE = re.compile(r"[A-Za-z0-9_-]")


def _css_escape(ident: str) -> str:
    out = []
    for i, ch in enumerate(ident):
        if i == 0 and ch.isdigit():
            out.append(f"\\{ord(ch):x} ")
        elif _CSS_IDENT_SAFE.match(ch):
            out.append(ch)
        else:
            out.append("\\" + ch)
    return "".join(out)


@dataclass(frozen=True)
class Selector:
    """One selector step: a strategy and its value."""

    strategy: SelectorStrategy
    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError("selector value must be a non-empty string")

    @property
    def css(self) -> str:
        """The equivalent CSS selector, for drivers that only speak CSS."""
        if self.strategy is SelectorStrategy.ID:
            return "#" + _css_escape(self.value)
        if self.strategy is SelectorStrategy.CLASS_NAME:
            return "".join("." + _css_escape(c) for c in self.value.split())
        return self.value

    def __str__(self) -> str:
        return self.css


class By:
    """Selector factories, one per strategy."""

    @staticmethod
    def css(value: str) -> Selector:
        return Selector(SelectorStrategy.CSS, value)

    @staticmethod
    def id(value: str) -> Selector:
        return Selector(SelectorStrategy.ID, value)

    @staticmethod
    def class_name(value: str) -> Selector:
        return Selector(SelectorStrategy.CLASS_NAME, value)

    @staticmethod
    def tag(value: str) -> Selector:
        return Selector(SelectorStrategy.TAG, value)


SelectorLike = Union[Selector, str]


def _as_selector(selector: SelectorLike) -> Selector:
    if isinstance(selector, Selector):
        return selector
    return By.css(selector)


class RootScope:
    """The document itself. There is exactly one: ROOT."""

    _instance: RootScope | None = None

    def __new__(cls) -> RootScope:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def find(self, selector: SelectorLike) -> Locator:
        return Locator(self, _as_selector(selector))

    def __repr__(self) -> str:
        return "ROOT"


ROOT = RootScope()


@dataclass(frozen=True)
class Locator:
    """A lazily resolved handle to the first node matching `selector` under `scope`."""

    scope: Union[Locator, RootScope]
    selector: Selector

    def find(self, selector: SelectorLike) -> Locator:
        """Derive a locator scoped under this one."""
        return Locator(self, _as_selector(selector))

    def chain(self) -> tuple[Selector, ...]:
        """Selectors from the document root down to this locator."""
        return tuple(self._walk())

    def _walk(self) -> Iterator[Selector]:
        if isinstance(self.scope, Locator):
            yield from self.scope._walk()
        yield self.selector

    @property
    def parent(self) -> Locator | None:
        return self.scope if isinstance(self.scope, Locator) else None

    def is_within(self, other: Locator) -> bool:
        """True when `other` is this locator or one of its ancestors."""
        node: Locator | None = self
        while node is not None:
            if node == other:
                return True
            node = node.parent
        return False

    def describe(self) -> str:
        return " >> ".join(s.css for s in self.chain())

    def __str__(self) -> str:
        return self.describe()


Scope = Union[Locator, RootScope]


def element(selector: SelectorLike) -> Locator:
    """A locator scoped at the document root."""
    return ROOT.find(selector)
