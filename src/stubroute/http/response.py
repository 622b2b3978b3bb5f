"""HTTP response descriptor with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class Response:
    """A response produced by a capability or by the router's fallback.

    Construct with a status, then chain ``.with_*()`` calls to set
    headers and body. Each call returns a new ``Response``::

        Response(201).with_header("Location", "/api/users/7").with_body("created")
    """

    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()
    body: str | bytes | None = None

    def __post_init__(self) -> None:
        if isinstance(self.status, bool) or not isinstance(self.status, int) or self.status < 100:
            msg = f"Response status must be an int >= 100, got {self.status!r}"
            raise ValueError(msg)

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def with_body(self, body: str | bytes | None) -> Response:
        """Return a new Response with a different body."""
        return replace(self, body=body)

    # -- Accessors --

    def header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), or None."""
        name_lower = name.lower()
        for key, value in self.headers:
            if key.lower() == name_lower:
                return value
        return None

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value, if any."""
        return self.header("Content-Type")

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes (empty when there is no body)."""
        if self.body is None:
            return b""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string (empty when there is no body)."""
        if self.body is None:
            return ""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(self.body_bytes)
