"""InterpretationEngine — ordered, conditional enrichment of an Interpretation.

Interpreters run strictly one after another. Each is handed the same
Interpretation and completes, including any changes it makes, before the
next starts. That is what lets a later interpreter stand down when an
earlier one already claimed a phase slot.

The value an interpreter returns only decides whether it is recorded in
``reason.chosen_interpreters``; it had write access either way.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Union

from ..goals import Goal
from ..logging_config import get_logger
from ..project import Project
from .compositor import AnalysisCompositor
from .interpretation import Interpretation, InterpretationReason, Interpreter
from .models import Analysis, AnalysisOptions
from .registration import ConditionalRegistry, Registration, describe
from .scoring import ScoreAggregator

logger = get_logger(__name__)


class InterpretationEngine:
    """Builds an Interpretation from an Analysis, or from a project via the compositor."""

    def __init__(
        self,
        interpreters: Iterable[Union[Interpreter, Registration[Interpreter]]] = (),
        compositor: Optional[AnalysisCompositor] = None,
        aggregator: Optional[ScoreAggregator] = None,
        autofix_goal: Optional[Goal] = None,
        code_inspection_goal: Optional[Goal] = None,
        message_goal: Optional[Goal] = None,
        queue_goal: Optional[Goal] = None,
    ):
        self.registry: ConditionalRegistry[Interpreter] = ConditionalRegistry(interpreters)
        self.compositor = compositor or AnalysisCompositor()
        self.aggregator = aggregator or ScoreAggregator()
        self.autofix_goal = autofix_goal
        self.code_inspection_goal = code_inspection_goal
        self.message_goal = message_goal
        self.queue_goal = queue_goal

    def new_interpretation(self, analysis: Analysis, push: Any = None) -> Interpretation:
        """Empty Interpretation: no phase slots set, no interpreters chosen."""
        return Interpretation(
            reason=InterpretationReason(
                analysis=analysis,
                available_interpreters=self.registry.actions,
                chosen_interpreters=[],
                push=push,
            ),
            autofix_goal=self.autofix_goal,
            code_inspection_goal=self.code_inspection_goal,
            message_goal=self.message_goal,
            queue_goal=self.queue_goal,
        )

    async def interpret(
        self,
        subject: Union[Project, Analysis],
        context: Any,
        options: Optional[AnalysisOptions] = None,
        push: Any = None,
    ) -> Interpretation:
        """Interpret ``subject``, analyzing it first when given a project.

        Any interpreter or scorer that raises aborts the interpretation.
        """
        options = options or AnalysisOptions()
        if isinstance(subject, Analysis):
            analysis = subject
        else:
            analysis = await self.compositor.analyze(subject, context, options)

        interpretation = await self.enrich(self.new_interpretation(analysis, push), context, options)
        await self.aggregator.score(interpretation, context, options)

        logger.info(
            f"Interpreted {analysis.id}: {len(interpretation.reason.chosen_interpreters)} of "
            f"{len(self.registry)} interpreters contributed"
        )
        return interpretation

    async def enrich(
        self, interpretation: Interpretation, context: Any, options: AnalysisOptions
    ) -> Interpretation:
        for registration in self.registry:
            interpreter = registration.action
            if not registration.should_run(options, context):
                logger.debug(f"Interpreter {describe(interpreter)} skipped")
                continue
            if await interpreter.enrich(interpretation, context):
                interpretation.reason.chosen_interpreters.append(interpreter)
                logger.debug(f"Interpreter {describe(interpreter)} contributed")
        return interpretation
