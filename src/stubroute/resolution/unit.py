"""Test-unit descriptor and its containment scopes.

A test unit is what a router is resolved for: a test class, optionally
an instance of it, and optionally the test function about to run. Its
*scopes* are the objects whose configuration the unit may see, most
specific first:

1. the test function itself;
2. the test class;
3. the classes lexically enclosing it (``Outer`` for ``Outer.Inner``);
4. base classes of each of the above.

Sibling test functions and sibling nested classes are never scopes.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any


def enclosing_class(cls: type) -> type | None:
    """The class lexically containing *cls*, from its ``__qualname__``.

    Returns None for top-level classes and classes defined in functions.
    """
    parts = cls.__qualname__.split(".")
    if len(parts) < 2 or "<locals>" in parts:
        return None
    obj: Any = sys.modules.get(cls.__module__)
    for part in parts[:-1]:
        obj = getattr(obj, part, None)
        if obj is None:
            return None
    return obj if isinstance(obj, type) else None


def class_scopes(cls: type) -> Iterator[type]:
    """*cls*, its enclosing classes, and their bases, each once."""
    seen: set[type] = set()

    def walk(current: type) -> Iterator[type]:
        if current is object or current in seen:
            return
        seen.add(current)
        yield current
        outer = enclosing_class(current)
        if outer is not None:
            yield from walk(outer)
        for base in current.__bases__:
            yield from walk(base)

    yield from walk(cls)


@dataclass(frozen=True, slots=True)
class TestUnit:
    """The test a router is being resolved for.

    Usage::

        unit = TestUnit.for_instance(self, TestUsers.test_list)
        router = RouterResolver().resolve(unit)
    """

    __test__ = False  # Tell pytest this is not a test class

    owner: type | None = None
    instance: object | None = None
    function: Callable[..., Any] | None = None

    @classmethod
    def for_class(cls, owner: type, function: Callable[..., Any] | None = None) -> TestUnit:
        return cls(owner=owner, function=function)

    @classmethod
    def for_instance(cls, instance: object, function: Callable[..., Any] | None = None) -> TestUnit:
        return cls(owner=type(instance), instance=instance, function=function)

    @classmethod
    def from_pytest_item(cls, item: Any) -> TestUnit:
        """Describe a collected pytest item (``request.node``)."""
        return cls(
            owner=getattr(item, "cls", None),
            instance=getattr(item, "instance", None),
            function=getattr(item, "function", None),
        )

    @property
    def name(self) -> str:
        parts = []
        if self.owner is not None:
            parts.append(self.owner.__qualname__)
        if self.function is not None:
            parts.append(getattr(self.function, "__name__", repr(self.function)))
        return ".".join(parts) or "<anonymous unit>"

    def scopes(self) -> Iterator[object]:
        """Objects whose configuration is visible to this unit, most specific first."""
        if self.function is not None:
            yield getattr(self.function, "__func__", self.function)
        if self.owner is not None:
            yield from class_scopes(self.owner)
