"""
Page registry and metadata:
- pages are registered by name when their module is imported (@page does it)
- get_page() / list_pages() back the CLI and the audit
"""
# @file purpose: Provide the page-object registry.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class PageMeta:
    """Page metadata: registered name, relative URL and the page class."""

    name: str
    relative_url: str
    page_cls: type

    def build(self) -> Any:
        return self.page_cls()


_PAGES: Dict[str, PageMeta] = {}


def register_page(name: str, page_cls: type, *, relative_url: str) -> None:
    """Non-decorator registration, handy for dynamic assembly and tests."""
    existing = _PAGES.get(name)
    if existing is not None and existing.page_cls is not page_cls:
        raise ValueError(f"Page name already registered: {name}")
    _PAGES[name] = PageMeta(name=name, relative_url=relative_url, page_cls=page_cls)


def get_page(name: str) -> PageMeta:
    try:
        return _PAGES[name]
    except KeyError as e:
        raise KeyError(f"Page not registered: {name}") from e


def list_pages() -> Dict[str, PageMeta]:
    """A shallow copy, for display and debugging."""
    return dict(_PAGES)


# tests only: reset the registry
def _reset_registry_for_tests() -> None:
    _PAGES.clear()
