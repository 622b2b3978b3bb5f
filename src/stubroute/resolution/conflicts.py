"""Route conflict detection.

Two capabilities conflict when both claim the same verb on the same
base path. Conflicts are always fatal: the resolver never picks one
of the claimants silently.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from stubroute.errors import RouteConflictError
from stubroute.routing.capability import Capability
from stubroute.routing.verb import Verb


@dataclass(frozen=True, slots=True, order=True)
class RouteKey:
    """A (verb, path) pair claimed by a capability."""

    path: str
    verb_name: str

    @classmethod
    def of(cls, verb: Verb, path: str) -> RouteKey:
        return cls(path=path, verb_name=verb.name)

    def __str__(self) -> str:
        return f"{self.verb_name} {self.path}"


@dataclass(frozen=True, slots=True)
class RouteConflict:
    """A key claimed by more than one capability."""

    key: RouteKey
    claimants: tuple[Capability, ...]

    @property
    def count(self) -> int:
        return len(self.claimants)

    def __str__(self) -> str:
        names = ", ".join(type(claimant).__name__ for claimant in self.claimants)
        return f"{self.key} handled by {self.count} capabilities ({names})"


def route_table(capabilities: Iterable[Capability]) -> dict[RouteKey, list[Capability]]:
    """Group capabilities by every (verb, base_path) key they claim."""
    table: dict[RouteKey, list[Capability]] = {}
    for capability in capabilities:
        for verb in capability.supported_methods():
            key = RouteKey.of(verb, capability.base_path)
            table.setdefault(key, []).append(capability)
    return table


def find_conflicts(capabilities: Iterable[Capability]) -> list[RouteConflict]:
    """Every contested key, sorted by path then verb."""
    table = route_table(capabilities)
    return [
        RouteConflict(key=key, claimants=tuple(claimants))
        for key, claimants in sorted(table.items())
        if len(claimants) > 1
    ]


def validate_unique_routes(capabilities: Iterable[Capability]) -> None:
    """Raise ``RouteConflictError`` if any (verb, path) key has several claimants."""
    conflicts = find_conflicts(capabilities)
    if conflicts:
        raise RouteConflictError(conflicts)
