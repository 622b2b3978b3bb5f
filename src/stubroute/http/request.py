"""Immutable HTTP request.

Frozen metadata plus the complete body. The request is honest about
what it is: received data that doesn't change.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from stubroute.http.headers import Headers

if TYPE_CHECKING:
    from stubroute._internal.asgi import Scope
    from stubroute.routing.verb import Verb


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable test HTTP request.

    Usage::

        request = Request("GET", "/api/users", headers=Headers.from_mapping({"Accept": "*/*"}))
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""
    query_string: str = ""

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | str = b"",
        query_string: str = "",
    ) -> Request:
        """Create a request from plain Python values."""
        raw_body = body.encode("utf-8") if isinstance(body, str) else body
        return cls(
            method=method,
            path=path,
            headers=Headers.from_mapping(headers),
            body=raw_body,
            query_string=query_string,
        )

    @classmethod
    def from_asgi(cls, scope: Scope, body: bytes = b"") -> Request:
        """Create a Request from an ASGI HTTP scope and its fully read body."""
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers.from_asgi(scope.get("headers", ())),
            body=body,
            query_string=scope.get("query_string", b"").decode("latin-1"),
        )

    # -- Computed properties --

    @property
    def verb(self) -> Verb:
        """The parsed verb. Raises ``UnsupportedVerbError`` for unknown methods."""
        from stubroute.routing.verb import Verb

        return Verb.parse(self.method)

    @property
    def url(self) -> str:
        """Path plus query string."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def text(self) -> str:
        """The body decoded as UTF-8."""
        return self.body.decode("utf-8")

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(self.body)
