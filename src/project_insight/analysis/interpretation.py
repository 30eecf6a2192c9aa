"""Interpretation — the in-memory decision record for one push.

Unlike an Analysis, an Interpretation is never persisted. Interpreters fill
it in one after another: each may claim a phase slot, add autofixes,
inspections or messages. A well-behaved interpreter checks whether a slot is
already populated before setting it, so the first claim wins; nothing
enforces this.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Protocol, Union

from ..goals import Goal, Goals
from ..project import Project
from .models import Analysis

if TYPE_CHECKING:
    from .scoring import Score


@dataclass(frozen=True)
class PushMessage:
    """Message about the project to show users. Rich messages are dicts with a title."""

    message: Union[str, dict[str, Any]]

    @property
    def text(self) -> str:
        if isinstance(self.message, str):
            return self.message
        return str(self.message.get("text") or self.message.get("title") or "")

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message}


@dataclass(frozen=True)
class AutofixRegistration:
    name: str
    transform: Callable[[Project, Any], Awaitable[Any]] = field(compare=False)


@dataclass(frozen=True)
class CodeInspectionRegistration:
    name: str
    inspection: Callable[[Project, Any], Awaitable[Any]] = field(compare=False)


PushTest = Callable[[Any], Awaitable[bool]]


class Interpreter(Protocol):
    """Turns an Analysis, without access to the project, into delivery decisions.

    Interpreters may also expose:
        autofixes: stable list of AutofixRegistration they can select
        code_inspections: stable list of CodeInspectionRegistration they can select
        set_analyzer(analyzer): called once when the analyzer is built
    """

    async def enrich(self, interpretation: "Interpretation", context: Any) -> bool:
        """Enrich the interpretation. Return whether anything was contributed."""
        ...


@dataclass
class InterpretationReason:
    analysis: Analysis
    available_interpreters: list[Any] = field(default_factory=list)
    chosen_interpreters: list[Any] = field(default_factory=list)
    # Push event that triggered this interpretation, if any
    push: Optional[Any] = None


@dataclass
class Interpretation:
    reason: InterpretationReason

    # Control
    cancel_goal: Optional[Goal] = None
    queue_goal: Optional[Goal] = None
    delivery_started_goals: Optional[Goals] = None

    # Delivery phases, at most one Goals each
    check_goals: Optional[Goals] = None
    build_goals: Optional[Goals] = None
    test_goals: Optional[Goals] = None
    container_build_goals: Optional[Goals] = None
    release_goals: Optional[Goals] = None
    deploy_goals: Optional[Goals] = None

    autofixes: list[AutofixRegistration] = field(default_factory=list)
    inspections: list[CodeInspectionRegistration] = field(default_factory=list)
    # Any one returning True makes a change material
    material_change_push_tests: list[PushTest] = field(default_factory=list)
    messages: list[PushMessage] = field(default_factory=list)
    scores: dict[str, "Score"] = field(default_factory=dict)

    # Goals owned by the analyzer, planned into the checks and messaging phases
    autofix_goal: Optional[Goal] = None
    code_inspection_goal: Optional[Goal] = None
    message_goal: Optional[Goal] = None

    @property
    def analysis(self) -> Analysis:
        return self.reason.analysis
