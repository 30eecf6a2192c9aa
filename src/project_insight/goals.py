"""Goals: opaque schedulable units wired into a delivery graph.

A Goal is never executed here. It carries a display name (used by
preference-driven suppression) and a unique name (its identity). A Goals
value is a named, ordered set of goals together with the precondition
edges each goal must wait for.

Goals is a builder while it is being planned (``plan`` appends in place)
and otherwise treated as a value: ``depending_on`` and ``excluding`` return
copies so phase wiring never mutates what an interpreter registered.

A Goal may also carry registrations: actions such as autofixes, each behind
an async push test deciding whether it applies to a given project.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterable, Iterator, Optional, Union

# Decides whether a registration applies: (project, context) -> bool
PushTest = Callable[[Any, Any], Awaitable[bool]]


@dataclass(frozen=True)
class GoalRegistration:
    """Something a goal performs when its push test passes, e.g. one autofix."""

    name: str
    action: Any = field(compare=False)
    push_test: Optional[PushTest] = field(default=None, compare=False)

    async def applies(self, project: Any, context: Any) -> bool:
        if self.push_test is None:
            return True
        return bool(await self.push_test(project, context))


@dataclass(frozen=True)
class Goal:
    display_name: str
    unique_name: str = ""
    description: str = ""
    parameters: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    registrations: list[GoalRegistration] = field(
        default_factory=list, compare=False, hash=False, repr=False
    )

    def __post_init__(self) -> None:
        if not self.display_name:
            raise ValueError("Goal display_name must not be empty")
        if not self.unique_name:
            object.__setattr__(self, "unique_name", self.display_name)

    def with_registration(
        self, name: str, action: Any, push_test: Optional[PushTest] = None
    ) -> "Goal":
        """Attach ``action`` under ``name``; a name already attached is left alone."""
        if all(r.name != name for r in self.registrations):
            self.registrations.append(GoalRegistration(name, action, push_test))
        return self

    async def selected_registrations(self, project: Any, context: Any) -> list[GoalRegistration]:
        """Registrations whose push test passes for ``project``, in attachment order."""
        return [r for r in self.registrations if await r.applies(project, context)]

    def __repr__(self) -> str:
        return f"Goal({self.unique_name!r})"


GoalLike = Union[Goal, "Goals"]


def _flatten(items: Iterable[Optional[GoalLike]]) -> list[Goal]:
    out: list[Goal] = []
    for item in items:
        if item is None:
            continue
        if isinstance(item, Goals):
            out.extend(item.goals)
        else:
            out.append(item)
    return out


class Goals:
    """Named, ordered set of goals with precondition edges."""

    def __init__(self, name: str):
        self.name = name
        self._goals: list[Goal] = []
        self._preconditions: dict[Goal, list[Goal]] = {}

    def plan(self, *items: GoalLike, after: Iterable[Optional[GoalLike]] = ()) -> "Goals":
        """Add goals (or the contents of other Goals) to this set.

        Preconditions already declared inside a planned Goals are carried over;
        every planned goal additionally waits for everything in ``after``.
        """
        extra = _flatten(after)
        for item in items:
            if isinstance(item, Goals):
                for goal in item.goals:
                    self._add(goal, list(item.preconditions_of(goal)) + extra)
            else:
                self._add(item, extra)
        return self

    def _add(self, goal: Goal, preconditions: Iterable[Goal]) -> None:
        if goal not in self._preconditions:
            self._goals.append(goal)
            self._preconditions[goal] = []
        existing = self._preconditions[goal]
        for pre in preconditions:
            if pre != goal and pre not in existing:
                existing.append(pre)

    @property
    def goals(self) -> tuple[Goal, ...]:
        return tuple(self._goals)

    def preconditions_of(self, goal: Goal) -> tuple[Goal, ...]:
        return tuple(self._preconditions.get(goal, ()))

    def depending_on(self, *others: Optional[GoalLike]) -> "Goals":
        """Copy of this set in which every goal also waits for ``others``."""
        copy = Goals(self.name)
        copy.plan(self, after=others)
        return copy

    def excluding(self, display_names: Iterable[str]) -> "Goals":
        """Copy without goals whose display name is listed, and without edges to them."""
        vetoed = set(display_names)
        copy = Goals(self.name)
        for goal in self._goals:
            if goal.display_name in vetoed:
                continue
            copy._add(
                goal,
                (pre for pre in self._preconditions[goal] if pre.display_name not in vetoed),
            )
        return copy

    def __iter__(self) -> Iterator[Goal]:
        return iter(self._goals)

    def __len__(self) -> int:
        return len(self._goals)

    def __contains__(self, goal: object) -> bool:
        return goal in self._preconditions

    def __repr__(self) -> str:
        names = ", ".join(g.unique_name for g in self._goals)
        return f"Goals({self.name!r}: [{names}])"


def goals(name: str) -> Goals:
    """Start an empty, named goal set."""
    return Goals(name)
