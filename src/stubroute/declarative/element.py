"""Capability built from a single ``MockResponseConfig``.

The entry is parsed once at construction: headers are split, the
Content-Type is settled, and the body is rendered. Every matching
request then gets the same immutable ``Response``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from stubroute.config import check_status
from stubroute.declarative.config import MockResponseConfig
from stubroute.declarative.kv_json import key_values_to_json
from stubroute.errors import ConfigurationError, UnsupportedVerbError
from stubroute.http.response import Response
from stubroute.routing.capability import Capability
from stubroute.routing.verb import Verb

if TYPE_CHECKING:
    from stubroute.http.request import Request

logger = logging.getLogger("stubroute.declarative")

CONTENT_TYPE_HEADER = "Content-Type"
TEXT_PLAIN_CONTENT_TYPE = "text/plain"
JSON_CONTENT_TYPE = "application/json"


def parse_header_entries(entries: tuple[str, ...]) -> list[tuple[str, str]]:
    """Split ``"Name=value"`` entries on the first ``=``.

    Entries without ``=`` or with an empty name are dropped.
    """
    pairs: list[tuple[str, str]] = []
    for entry in entries:
        if not entry or "=" not in entry:
            continue
        name, value = entry.split("=", 1)
        name = name.strip()
        if not name:
            continue
        pairs.append((name, value.strip()))
    return pairs


def _has_header(pairs: list[tuple[str, str]], name: str) -> bool:
    name_lower = name.lower()
    return any(key.lower() == name_lower for key, _ in pairs)


class DeclarativeCapability(Capability):
    """Answers one verb on one path with a fixed response.

    Raises ``ConfigurationError`` when more than one content kind is set,
    when the status is missing or invalid, or when the verb is unknown.
    """

    def __init__(self, config: MockResponseConfig) -> None:
        kinds = config.content_kinds()
        if len(kinds) > 1:
            msg = (
                "Only one of text_content, json_content_key_value, or string_content "
                f"can be specified (got {', '.join(kinds)}) for {config.path!r}"
            )
            raise ConfigurationError(msg)
        try:
            self.verb = Verb.parse(config.verb)
        except UnsupportedVerbError as exc:
            msg = f"Mock response for {config.path!r} has an unsupported verb: {exc}"
            raise ConfigurationError(msg) from exc

        self.config = config
        self.base_path = config.path
        self.response = self._build_response(config, check_status(config.status))
        logger.debug("Built %r", self)

    @staticmethod
    def _build_response(config: MockResponseConfig, status: int) -> Response:
        headers = parse_header_entries(config.headers)

        body: str | None = None
        inferred: str | None = None
        if config.text_content:
            body = config.text_content
            inferred = TEXT_PLAIN_CONTENT_TYPE
        elif config.json_content_key_value:
            body = key_values_to_json(config.json_content_key_value)
            inferred = JSON_CONTENT_TYPE
        elif config.string_content:
            body = config.string_content

        if config.content_type:
            headers = [(k, v) for k, v in headers if k.lower() != CONTENT_TYPE_HEADER.lower()]
            headers.append((CONTENT_TYPE_HEADER, config.content_type))
        elif inferred is not None and not _has_header(headers, CONTENT_TYPE_HEADER):
            headers.append((CONTENT_TYPE_HEADER, inferred))

        return Response(status=status, headers=tuple(headers), body=body)

    def supported_methods(self) -> frozenset[Verb]:
        return frozenset({self.verb})

    def _respond(self, verb: Verb) -> Response | None:
        if verb is self.verb:
            return self.response
        return None

    def handle_get(self, request: Request) -> Response | None:
        return self._respond(Verb.GET)

    def handle_post(self, request: Request) -> Response | None:
        return self._respond(Verb.POST)

    def handle_put(self, request: Request) -> Response | None:
        return self._respond(Verb.PUT)

    def handle_delete(self, request: Request) -> Response | None:
        return self._respond(Verb.DELETE)

    def __repr__(self) -> str:
        return f"DeclarativeCapability({self.verb.name} {self.base_path!r} -> {self.response.status})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DeclarativeCapability):
            return NotImplemented
        return self.config == other.config

    def __hash__(self) -> int:
        return hash(self.config)
