"""Conditional registration of scanners, interpreters and scorers.

Every contributor is held as a Registration, a small tagged union:

    Registration[W] = Unconditional(W) | Conditional(W, run_when)

so the engines dispatch identically whatever the payload is. The run
predicate receives the AnalysisOptions of the current call and the
SdmContext, and is evaluated afresh every time ``eligible`` is called.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Generic, Iterable, Iterator, TypeVar, Union

if TYPE_CHECKING:
    from .models import AnalysisOptions

W = TypeVar("W")

RunCondition = Callable[["AnalysisOptions", Any], bool]


@dataclass(frozen=True)
class Unconditional(Generic[W]):
    """Registration that always runs."""

    action: W

    def should_run(self, options: "AnalysisOptions", context: Any) -> bool:
        return True


@dataclass(frozen=True)
class Conditional(Generic[W]):
    """Registration that runs only when ``run_when(options, context)`` holds."""

    action: W
    run_when: RunCondition

    def should_run(self, options: "AnalysisOptions", context: Any) -> bool:
        return bool(self.run_when(options, context))


Registration = Union[Unconditional[W], Conditional[W]]


def conditional(action: W, run_when: RunCondition) -> Conditional[W]:
    """Wrap ``action`` so it only runs when ``run_when`` holds."""
    return Conditional(action, run_when)


def describe(action: Any) -> str:
    """Human-readable name of a contributor for logs."""
    name = getattr(action, "name", None) or getattr(action, "__name__", None)
    if isinstance(name, str) and name:
        return name
    return type(action).__name__


def is_registration(item: Any) -> bool:
    return isinstance(item, (Unconditional, Conditional))


def as_registration(item: Union[W, Registration[W]]) -> Registration[W]:
    """Return ``item`` unchanged if already a registration, else wrap it unconditionally."""
    if is_registration(item):
        return item
    return Unconditional(item)


class ConditionalRegistry(Generic[W]):
    """Ordered registry of conditional registrations.

    Registration order is significant: it is the order in which eligible
    actions are returned, and therefore the order of sequential execution
    and of merging.
    """

    def __init__(self, items: Iterable[Union[W, Registration[W]]] = ()):
        self._registrations: list[Registration[W]] = []
        for item in items:
            self.add(item)

    def add(self, item: Union[W, Registration[W]]) -> Registration[W]:
        registration = as_registration(item)
        self._registrations.append(registration)
        return registration

    @property
    def registrations(self) -> tuple[Registration[W], ...]:
        return tuple(self._registrations)

    @property
    def actions(self) -> list[W]:
        """All registered actions, eligible or not."""
        return [r.action for r in self._registrations]

    def eligible(self, options: "AnalysisOptions", context: Any) -> list[W]:
        """Actions whose predicate holds right now, in registration order."""
        return [r.action for r in self._registrations if r.should_run(options, context)]

    def __iter__(self) -> Iterator[Registration[W]]:
        return iter(self._registrations)

    def __len__(self) -> int:
        return len(self._registrations)
