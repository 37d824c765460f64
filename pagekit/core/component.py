"""
Component composition.

A component is a plain class decorated with @component(selector). Its members are
declared with descriptors and derived from the component's container at construction:

    @component(By.css("form"))
    class LoginForm:
        user = field(By.id("user"))
        password = field(By.id("password"))
        submit_button = child(By.css("button[type='submit']"), submit=True)
        header = nested(FormHeader)

    form = LoginForm(parent)      # container = parent.find(form), never touches a driver
    form.user                     # Locator("form >> #user")
    form.user = other             # AttributeError

Every member is scoped under the container, so relocating a component means
changing its container selector only. Declaration order is kept and is the order
forms are filled in.

@page(relative_url) does the same for a whole screen: the container is the
document root and the class gains a read-only `relative_url`.
"""
# @file purpose: Declarative, read-only component trees built from Locators.

from __future__ import annotations

from typing import Any, Callable, Iterator, Optional, TypeVar

from . import registry
from .locator import ROOT, Locator, Scope, Selector, SelectorLike, _as_selector

C = TypeVar("C", bound=type)


class Child:
    """A Locator member under the component's container."""

    def __init__(self, selector: SelectorLike, *, submit: bool = False) -> None:
        self.selector: Selector = _as_selector(selector)
        self.submit = submit
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def build(self, container: Scope) -> Any:
        return container.find(self.selector)

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return instance._members[self.name]

    def __set__(self, instance: Any, value: Any) -> None:
        raise AttributeError(f"{type(instance).__name__}.{self.name} is read-only")


class Field(Child):
    """A fillable form field; `key` names the data item that fills it."""

    def __init__(self, selector: SelectorLike, *, key: str | None = None) -> None:
        super().__init__(selector)
        self._key = key

    @property
    def key(self) -> str:
        return self._key or self.name


class Nested(Child):
    """A child component built under this component's container."""

    def __init__(self, component_cls: type) -> None:
        if not is_component_class(component_cls):
            raise TypeError(f"{component_cls.__name__} is not decorated with @component")
        self.component_cls = component_cls
        self.submit = False
        self.name = ""

    def build(self, container: Scope) -> Any:
        return self.component_cls(container)


def child(selector: SelectorLike, *, submit: bool = False) -> Any:
    return Child(selector, submit=submit)


def field(selector: SelectorLike, *, key: str | None = None) -> Any:
    return Field(selector, key=key)


def nested(component_cls: type) -> Any:
    return Nested(component_cls)


def _read_only_setattr(self: Any, name: str, value: Any) -> None:
    raise AttributeError(f"{type(self).__name__}.{name} is read-only")


def _read_only_delattr(self: Any, name: str) -> None:
    raise AttributeError(f"{type(self).__name__}.{name} is read-only")


def component(selector: Optional[SelectorLike] = None) -> Callable[[C], C]:
    """
    Class decorator turning a class of member descriptors into a component.
    `selector=None` makes the parent scope itself the container.
    """
    container_selector = None if selector is None else _as_selector(selector)

    def deco(cls: C) -> C:
        if "__init__" in vars(cls):
            raise TypeError(f"{cls.__name__}: components are declared with members, not __init__")
        declared = tuple(
            (name, attr) for name, attr in vars(cls).items() if isinstance(attr, Child)
        )

        def __init__(self: Any, parent: Scope = ROOT) -> None:
            container = parent if container_selector is None else parent.find(container_selector)
            object.__setattr__(self, "_container", container)
            object.__setattr__(
                self, "_members", {name: attr.build(container) for name, attr in declared}
            )

        def __repr__(self: Any) -> str:
            return f"{cls.__name__}({self._container!r})"

        cls.__init__ = __init__  # type: ignore[misc]
        cls.__repr__ = __repr__  # type: ignore[assignment]
        cls.__setattr__ = _read_only_setattr  # type: ignore[assignment]
        cls.__delattr__ = _read_only_delattr  # type: ignore[assignment]
        cls.container = property(lambda self: self._container)  # type: ignore[attr-defined]
        cls.__component_members__ = declared  # type: ignore[attr-defined]
        cls.__component_selector__ = container_selector  # type: ignore[attr-defined]
        return cls

    return deco


def page(relative_url: str, *, name: str | None = None) -> Callable[[C], C]:
    """Declare a page object: a root component with a navigable relative URL."""

    def deco(cls: C) -> C:
        cls = component(None)(cls)
        cls.__relative_url__ = relative_url  # type: ignore[attr-defined]
        cls.relative_url = property(lambda self: type(self).__relative_url__)  # type: ignore[attr-defined]
        registry.register_page(name or cls.__name__, cls, relative_url=relative_url)
        return cls

    return deco


# ------------------------------------------------------------------------------
# introspection
# ------------------------------------------------------------------------------


def is_component_class(cls: Any) -> bool:
    return isinstance(cls, type) and hasattr(cls, "__component_members__")


def is_component(obj: Any) -> bool:
    return is_component_class(type(obj))


def members(comp: Any) -> list[tuple[str, Child, Any]]:
    """(name, descriptor, built member) in declaration order."""
    return [(name, attr, comp._members[name]) for name, attr in type(comp).__component_members__]


def walk(comp: Any, prefix: str = "") -> Iterator[tuple[str, Locator]]:
    """Every Locator in the tree as (dotted path, locator), containers before their members."""
    if isinstance(comp.container, Locator) and type(comp).__component_selector__ is not None:
        yield (prefix or type(comp).__name__), comp.container
    for name, _attr, member in members(comp):
        path = f"{prefix}.{name}" if prefix else name
        if is_component(member):
            yield from walk(member, path)
        else:
            yield path, member


def form_fields(comp: Any) -> list[tuple[str, Locator]]:
    """(data key, locator) for every Field in declaration order, nested components included."""
    found: list[tuple[str, Locator]] = []
    for _name, attr, member in members(comp):
        if isinstance(attr, Nested):
            found.extend(form_fields(member))
        elif isinstance(attr, Field):
            found.append((attr.key, member))
    return found


def submit_control(comp: Any) -> Locator | None:
    """The first member declared with submit=True, searching nested components too."""
    for _name, attr, member in members(comp):
        if isinstance(attr, Nested):
            found = submit_control(member)
            if found is not None:
                return found
        elif attr.submit:
            return member
    return None
