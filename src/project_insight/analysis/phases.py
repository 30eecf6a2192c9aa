"""Goal graph — turns an Interpretation into phase-ordered Goals.

Phase order is fixed:

    control -> checks -> build -> test -> container_build -> release -> deploy

Every non-empty delivery phase waits for the control goals and for the
nearest non-empty phase before it, skipping empty phases. The checks phase
is assembled from the autofix goal, the code inspection goal and any
explicit check goals, and then has vetoed goals removed according to the
project's preferences element.

Messaging and delivery-started notification are side branches: neither
feeds into nor waits on the delivery phases beyond control.

Nothing here executes a goal, and nothing mutates the Goals registered on
the Interpretation; wiring works on copies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..goals import Goal, Goals, goals
from ..logging_config import get_logger
from .interpretation import Interpretation
from .preferences import disabled_goals

logger = get_logger(__name__)

# Delivery phases in order, with the Interpretation slot backing each
PHASES: tuple[tuple[str, str], ...] = (
    ("checks", "check_goals"),
    ("build", "build_goals"),
    ("test", "test_goals"),
    ("container_build", "container_build_goals"),
    ("release", "release_goals"),
    ("deploy", "deploy_goals"),
)
PHASE_NAMES = tuple(name for name, _ in PHASES)
_SLOTS = dict(PHASES)


@dataclass
class DeliveryGraph:
    """Phase-ordered goal sets ready to hand to a scheduler."""

    control: Goals
    phases: dict[str, Goals] = field(default_factory=dict)
    notification: Optional[Goals] = None
    messaging: Optional[Goals] = None

    def goal_sets(self) -> list[Goals]:
        sets = [self.control, *self.phases.values()]
        for extra in (self.notification, self.messaging):
            if extra:
                sets.append(extra)
        return sets

    def all_goals(self) -> list[Goal]:
        seen: list[Goal] = []
        for goal_set in self.goal_sets():
            for goal in goal_set:
                if goal not in seen:
                    seen.append(goal)
        return seen

    def preconditions_of(self, goal: Goal) -> tuple[Goal, ...]:
        for goal_set in self.goal_sets():
            if goal in goal_set:
                return goal_set.preconditions_of(goal)
        raise KeyError(f"{goal!r} is not planned in this graph")

    def edges(self) -> list[tuple[Goal, Goal]]:
        """(goal, precondition) pairs across the whole graph."""
        return [(g, pre) for g in self.all_goals() for pre in self.preconditions_of(g)]


class GoalGraphBuilder:
    """Assembles the delivery graph for one Interpretation.

    Phase results are memoized per builder, so the backward search for a
    preceding phase never rebuilds (or rewires) a phase twice.
    """

    def __init__(self, interpretation: Interpretation):
        self.interpretation = interpretation
        self._phases: dict[str, Optional[Goals]] = {}

    def control(self) -> Goals:
        control = goals("control")
        if self.interpretation.cancel_goal is not None:
            control.plan(self.interpretation.cancel_goal)
        if self.interpretation.queue_goal is not None:
            control.plan(self.interpretation.queue_goal)
        return control

    def delivery_notification(self) -> Optional[Goals]:
        started = self.interpretation.delivery_started_goals
        if not started:
            return None
        return goals("notification").plan(started, after=[self.control()])

    def checks(self) -> Optional[Goals]:
        i = self.interpretation
        control = self.control()
        checks = goals("checks")

        autofix: Optional[Goal] = None
        if i.autofixes and i.autofix_goal is not None:
            autofix = i.autofix_goal
            checks.plan(autofix, after=[control])
        if i.inspections and i.code_inspection_goal is not None:
            checks.plan(i.code_inspection_goal, after=[control, autofix])
        if i.check_goals:
            checks.plan(i.check_goals, after=[control, autofix])

        vetoed = disabled_goals(i.analysis)
        if vetoed:
            before = len(checks)
            checks = checks.excluding(vetoed)
            if len(checks) < before:
                logger.debug(f"Preferences vetoed {before - len(checks)} check goals")
        return checks or None

    def phase(self, name: str) -> Optional[Goals]:
        """Wired Goals for a delivery phase, or None when the phase is empty."""
        if name not in _SLOTS:
            raise ValueError(f"Unknown phase {name!r}; expected one of {PHASE_NAMES}")
        if name not in self._phases:
            if name == "checks":
                self._phases[name] = self.checks()
            else:
                registered = getattr(self.interpretation, _SLOTS[name])
                if registered:
                    self._phases[name] = registered.depending_on(
                        self.control(), self.preceding(name)
                    )
                else:
                    self._phases[name] = None
        return self._phases[name]

    def preceding(self, name: str) -> Optional[Goals]:
        """Nearest non-empty phase before ``name``."""
        index = PHASE_NAMES.index(name)
        for earlier in reversed(PHASE_NAMES[:index]):
            found = self.phase(earlier)
            if found:
                return found
        return None

    def messaging(self) -> Optional[Goals]:
        i = self.interpretation
        if i.messages and i.message_goal is not None:
            return goals("messaging").plan(i.message_goal)
        return None

    def build(self) -> DeliveryGraph:
        graph = DeliveryGraph(
            control=self.control(),
            notification=self.delivery_notification(),
            messaging=self.messaging(),
        )
        for name in PHASE_NAMES:
            wired = self.phase(name)
            if wired:
                graph.phases[name] = wired
        logger.debug(f"Delivery graph phases: {', '.join(graph.phases) or 'none'}")
        return graph


def delivery_graph(interpretation: Interpretation) -> DeliveryGraph:
    return GoalGraphBuilder(interpretation).build()


def control_goals(interpretation: Interpretation) -> Goals:
    return GoalGraphBuilder(interpretation).control()


def delivery_notification_goals(interpretation: Interpretation) -> Optional[Goals]:
    return GoalGraphBuilder(interpretation).delivery_notification()


def check_goals(interpretation: Interpretation) -> Optional[Goals]:
    return GoalGraphBuilder(interpretation).phase("checks")


def build_goals(interpretation: Interpretation) -> Optional[Goals]:
    return GoalGraphBuilder(interpretation).phase("build")


def test_goals(interpretation: Interpretation) -> Optional[Goals]:
    return GoalGraphBuilder(interpretation).phase("test")


def container_goals(interpretation: Interpretation) -> Optional[Goals]:
    return GoalGraphBuilder(interpretation).phase("container_build")


def release_goals(interpretation: Interpretation) -> Optional[Goals]:
    return GoalGraphBuilder(interpretation).phase("release")


def deploy_goals(interpretation: Interpretation) -> Optional[Goals]:
    return GoalGraphBuilder(interpretation).phase("deploy")


def messaging_goals(interpretation: Interpretation) -> Optional[Goals]:
    return GoalGraphBuilder(interpretation).messaging()
