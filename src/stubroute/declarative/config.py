"""Declarative mock responses attached to test functions and classes.

``@mock_response`` is repeatable and can decorate a test function or a
test class (including nested classes). Each use records one
``MockResponseConfig`` on the decorated object; the resolver turns every
entry visible to a test into one ``DeclarativeCapability``.

Usage::

    @mock_response(path="/api/users", status=200, json_content_key_value="users=[]")
    @mock_response(path="/api/users", verb="POST", status=201)
    class TestUsers:
        @mock_response(path="/api/health", status=200, text_content="up")
        def test_health(self, stub_client): ...
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TypeVar

from stubroute.routing.verb import Verb

RESPONSES_ATTR = "__stubroute_responses__"

T = TypeVar("T")


@dataclass(frozen=True, slots=True, kw_only=True)
class MockResponseConfig:
    """One endpoint's intended response.

    At most one of ``text_content``, ``json_content_key_value`` and
    ``string_content`` may be set; empty strings count as unset. The
    check happens when the entry is turned into a capability.
    """

    status: int
    path: str = "/"
    verb: Verb | str = Verb.GET
    # Plain text body, Content-Type defaults to text/plain
    text_content: str | None = None
    # Key-value shorthand converted to JSON, Content-Type defaults to application/json
    json_content_key_value: str | None = None
    # Raw body, no Content-Type inferred
    string_content: str | None = None
    # "Name=value" entries
    headers: tuple[str, ...] = ()
    # Replaces any inferred or explicit Content-Type
    content_type: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.headers, str):
            object.__setattr__(self, "headers", (self.headers,))
        elif not isinstance(self.headers, tuple):
            object.__setattr__(self, "headers", tuple(self.headers))

    def content_kinds(self) -> tuple[str, ...]:
        """Names of the content fields that are set."""
        kinds = (
            ("text_content", self.text_content),
            ("json_content_key_value", self.json_content_key_value),
            ("string_content", self.string_content),
        )
        return tuple(name for name, value in kinds if value)


def mock_response(
    *,
    status: int,
    path: str = "/",
    verb: Verb | str = Verb.GET,
    text_content: str | None = None,
    json_content_key_value: str | None = None,
    string_content: str | None = None,
    headers: str | Iterable[str] = (),
    content_type: str | None = None,
) -> Callable[[T], T]:
    """Attach a declarative mock response to a test function or class."""
    config = MockResponseConfig(
        status=status,
        path=path,
        verb=verb,
        text_content=text_content,
        json_content_key_value=json_content_key_value,
        string_content=string_content,
        headers=(headers,) if isinstance(headers, str) else tuple(headers),
        content_type=content_type,
    )

    def decorator(target: T) -> T:
        # Decorators apply bottom-up; prepend to keep source order.
        existing = declared_responses(target)
        setattr(target, RESPONSES_ATTR, (config, *existing))
        return target

    return decorator


def declared_responses(target: object) -> tuple[MockResponseConfig, ...]:
    """Entries declared directly on *target*, never inherited ones."""
    target = getattr(target, "__func__", target)
    namespace = getattr(target, "__dict__", None)
    if namespace is None:
        return ()
    return tuple(namespace.get(RESPONSES_ATTR, ()))
