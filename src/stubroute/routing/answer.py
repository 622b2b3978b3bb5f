"""Mutable per-verb answers and the optimistic all-accept capability.

An ``EndpointAnswer`` is an explicit mutable cell owned by one
capability instance: tests swap the answer with ``respond_*()`` and put
it back with ``reset_to_default()``. Nothing here is shared between
capability instances, so one test unit's changes never leak into another.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from stubroute.http.response import Response
from stubroute.routing.capability import ALL_VERBS, Capability
from stubroute.routing.verb import Verb

if TYPE_CHECKING:
    from stubroute.http.request import Request

RESPONSE_OK = Response(200)
RESPONSE_CREATED = Response(201)
RESPONSE_NO_CONTENT = Response(204)
RESPONSE_MOVED_PERMANENTLY = Response(301)
RESPONSE_MOVED_TEMPORARILY = Response(302)
RESPONSE_UNAUTHORIZED = Response(401)
RESPONSE_FORBIDDEN = Response(403)
RESPONSE_NOT_FOUND = Response(404)
RESPONSE_NOT_IMPLEMENTED = Response(501)

_POSITIVE_DEFAULTS: dict[Verb, Response] = {
    Verb.GET: RESPONSE_OK,
    Verb.POST: RESPONSE_OK,
    Verb.PUT: RESPONSE_CREATED,
    Verb.DELETE: RESPONSE_NO_CONTENT,
}


class EndpointAnswer:
    """The current answer for one verb of one endpoint.

    ``respond()`` returns the current response, or ``None`` to defer to
    the next capability. Every setter returns ``self`` for chaining::

        answer = EndpointAnswer.for_positive_request(Verb.GET)
        answer.respond_forbidden()
        ...
        answer.reset_to_default()
    """

    __slots__ = ("default_response", "response", "verb")

    def __init__(self, verb: Verb, default_response: Response | None = None) -> None:
        self.verb = verb
        self.default_response = default_response
        self.response: Response | None = default_response

    @classmethod
    def for_positive_request(cls, verb: Verb) -> EndpointAnswer:
        """Answer with the optimistic default for *verb*.

        GET and POST answer 200, PUT answers 201, DELETE answers 204.
        """
        return cls(verb, _POSITIVE_DEFAULTS[verb])

    @classmethod
    def no_content(cls, verb: Verb) -> EndpointAnswer:
        """An answer with no default: ``respond()`` returns ``None``."""
        return cls(verb, None)

    def respond(self) -> Response | None:
        return self.response

    def reset_to_default(self) -> EndpointAnswer:
        self.response = self.default_response
        return self

    def respond_with(self, response: Response | None) -> EndpointAnswer:
        """Answer with *response*; ``None`` makes the endpoint defer."""
        self.response = response
        return self

    def respond_ok(self) -> EndpointAnswer:
        return self.respond_with(RESPONSE_OK)

    def respond_created(self) -> EndpointAnswer:
        return self.respond_with(RESPONSE_CREATED)

    def respond_no_content(self) -> EndpointAnswer:
        return self.respond_with(RESPONSE_NO_CONTENT)

    def respond_moved_permanently(self) -> EndpointAnswer:
        return self.respond_with(RESPONSE_MOVED_PERMANENTLY)

    def respond_moved_temporarily(self) -> EndpointAnswer:
        return self.respond_with(RESPONSE_MOVED_TEMPORARILY)

    def respond_unauthorized(self) -> EndpointAnswer:
        return self.respond_with(RESPONSE_UNAUTHORIZED)

    def respond_forbidden(self) -> EndpointAnswer:
        return self.respond_with(RESPONSE_FORBIDDEN)

    def respond_not_found(self) -> EndpointAnswer:
        return self.respond_with(RESPONSE_NOT_FOUND)

    def respond_not_implemented(self) -> EndpointAnswer:
        return self.respond_with(RESPONSE_NOT_IMPLEMENTED)

    def __repr__(self) -> str:
        status = self.response.status if self.response is not None else None
        return f"EndpointAnswer({self.verb.name}, status={status})"


class AllAcceptCapability(Capability):
    """Accepts every verb under ``base_path`` with optimistic answers.

    Each verb has its own ``EndpointAnswer``; change them per test and
    call ``reset()`` to restore the defaults::

        api = AllAcceptCapability("/api")
        api.set_result(Response(500), Verb.POST, Verb.PUT)
        api.reset()
    """

    def __init__(self, base_path: str) -> None:
        self.base_path = base_path
        self.answers: dict[Verb, EndpointAnswer] = {
            verb: EndpointAnswer.for_positive_request(verb) for verb in Verb
        }

    @property
    def get_answer(self) -> EndpointAnswer:
        return self.answers[Verb.GET]

    @property
    def post_answer(self) -> EndpointAnswer:
        return self.answers[Verb.POST]

    @property
    def put_answer(self) -> EndpointAnswer:
        return self.answers[Verb.PUT]

    @property
    def delete_answer(self) -> EndpointAnswer:
        return self.answers[Verb.DELETE]

    def supported_methods(self) -> frozenset[Verb]:
        return ALL_VERBS

    def reset(self) -> None:
        """Put every answer back to its default."""
        for answer in self.answers.values():
            answer.reset_to_default()

    def set_result(self, response: Response | None, *verbs: Verb) -> None:
        """Answer *verbs* with *response* (``None`` makes them defer)."""
        for verb in verbs:
            self.answers[Verb.parse(verb)].respond_with(response)

    def set_result_for_all_but(self, response: Response | None, *verbs: Verb) -> None:
        """Answer every verb except *verbs* with *response*."""
        excluded = {Verb.parse(verb) for verb in verbs}
        self.set_result(response, *(verb for verb in Verb if verb not in excluded))

    def handle_get(self, request: Request) -> Response | None:
        return self.get_answer.respond()

    def handle_post(self, request: Request) -> Response | None:
        return self.post_answer.respond()

    def handle_put(self, request: Request) -> Response | None:
        return self.put_answer.respond()

    def handle_delete(self, request: Request) -> Response | None:
        return self.delete_answer.respond()
