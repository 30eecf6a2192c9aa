"""ProjectAnalyzer — the facade tying scanners, interpreters and scorers together.

Analyzers are assembled with a fluent builder:

    analyzer = (
        analyzer_builder(config)
        .with_scanner(node_scanner)
        .with_interpreter(NodeInterpreter())
        .with_scorer(has_readme)
        .with_stack(docker_stack)
        .build()
    )

    analysis, interpretation = await analyzer.analyze_and_interpret(
        project, context, AnalysisOptions(full=True)
    )
    graph = analyzer.delivery_graph(interpretation)

Registration order matters throughout: it is merge order for scanners,
enrichment order for interpreters and scoring order for scorers.
"""

from __future__ import annotations

import asyncio
import subprocess
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Sequence, Union

from ..config import AnalysisConfig
from ..exceptions import RegistrationError
from ..goals import Goal
from ..logging_config import get_logger
from ..project import Project
from .compositor import AnalysisCompositor
from .engine import InterpretationEngine
from .interpretation import (
    AutofixRegistration,
    CodeInspectionRegistration,
    Interpretation,
    Interpreter,
)
from .models import PHASE_SLOTS, Analysis, AnalysisOptions, Classification
from .phases import DeliveryGraph, delivery_graph
from .preferences import preferences_scanner
from .registration import (
    ConditionalRegistry,
    Registration,
    RunCondition,
    conditional,
    is_registration,
)
from .scanner import PhasedTechnologyScanner, ScannerAction, to_phased_scanner
from .scoring import ScoreAggregator, Scorer
from .seed import SeedRecipeComposer, TransformRecipeRegistration
from .vcs import GitStatusReader, VcsStatus

logger = get_logger(__name__)

VcsStatusReader = Callable[[Path], Optional[VcsStatus]]


def _read_git_status(base_dir: Path) -> Optional[VcsStatus]:
    return GitStatusReader(str(base_dir)).read()


@dataclass
class StackSupport:
    """Everything needed to support one technology stack, registered together.

    ``condition``, when given, applies to every member registered bare;
    members that are already conditional registrations keep their own
    predicate.
    """

    scanners: Sequence[Union[ScannerAction, Registration[ScannerAction]]] = ()
    interpreters: Sequence[Union[Interpreter, Registration[Interpreter]]] = ()
    scorers: Sequence[Union[Scorer, Registration[Scorer]]] = ()
    transform_recipe_contributors: Sequence[TransformRecipeRegistration] = ()
    condition: Optional[RunCondition] = None


def _unwrap(item: Any) -> Any:
    return item.action if is_registration(item) else item


class ProjectAnalyzerBuilder:
    """Collects registrations; ``build()`` produces the ProjectAnalyzer."""

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        autofix_goal: Optional[Goal] = None,
        code_inspection_goal: Optional[Goal] = None,
        message_goal: Optional[Goal] = None,
        queue_goal: Optional[Goal] = None,
    ):
        self.config = config or AnalysisConfig()
        self.autofix_goal = autofix_goal
        self.code_inspection_goal = code_inspection_goal
        self.message_goal = message_goal
        self.queue_goal = queue_goal

        self.scanners: ConditionalRegistry[ScannerAction] = ConditionalRegistry()
        self.interpreters: ConditionalRegistry[Interpreter] = ConditionalRegistry()
        self.scorers: ConditionalRegistry[Scorer] = ConditionalRegistry()
        self.transform_recipe_contributors: list[TransformRecipeRegistration] = []
        self.possible_autofixes: list[AutofixRegistration] = []
        self.possible_code_inspections: list[CodeInspectionRegistration] = []

    def with_scanner(
        self, scanner: Union[ScannerAction, Registration[ScannerAction]]
    ) -> "ProjectAnalyzerBuilder":
        action = _unwrap(scanner)
        if not (isinstance(action, PhasedTechnologyScanner) or callable(action)):
            raise RegistrationError("scanner", f"{action!r} is not a scanner")
        self.scanners.add(scanner)
        return self

    def with_interpreter(
        self, interpreter: Union[Interpreter, Registration[Interpreter]]
    ) -> "ProjectAnalyzerBuilder":
        action = _unwrap(interpreter)
        if not callable(getattr(action, "enrich", None)):
            raise RegistrationError("interpreter", f"{action!r} has no enrich method")
        self.interpreters.add(interpreter)

        for autofix in getattr(action, "autofixes", None) or ():
            if autofix not in self.possible_autofixes:
                self.possible_autofixes.append(autofix)
        for inspection in getattr(action, "code_inspections", None) or ():
            if inspection not in self.possible_code_inspections:
                self.possible_code_inspections.append(inspection)
        return self

    def with_scorer(
        self, scorer: Union[Scorer, Registration[Scorer]]
    ) -> "ProjectAnalyzerBuilder":
        action = _unwrap(scorer)
        if not callable(action):
            raise RegistrationError("scorer", f"{action!r} is not callable")
        self.scorers.add(scorer)
        return self

    def with_transform_recipe_contributor(
        self, registration: TransformRecipeRegistration
    ) -> "ProjectAnalyzerBuilder":
        if not isinstance(registration, TransformRecipeRegistration):
            raise RegistrationError(
                "transform recipe contributor",
                "expected a TransformRecipeRegistration",
            )
        self.transform_recipe_contributors.append(registration)
        return self

    def with_stack(self, stack: StackSupport) -> "ProjectAnalyzerBuilder":
        if not stack.scanners:
            raise RegistrationError("stack", "a stack must include at least one scanner")

        def scoped(item):
            if stack.condition is None or is_registration(item):
                return item
            return conditional(item, stack.condition)

        for scanner in stack.scanners:
            self.with_scanner(scoped(scanner))
        for interpreter in stack.interpreters:
            self.with_interpreter(scoped(interpreter))
        for scorer in stack.scorers:
            self.with_scorer(scoped(scorer))
        for registration in stack.transform_recipe_contributors:
            self.with_transform_recipe_contributor(registration)
        return self

    def build(self, vcs_status_reader: Optional[VcsStatusReader] = None) -> "ProjectAnalyzer":
        analyzer = ProjectAnalyzer(self, vcs_status_reader=vcs_status_reader)
        for interpreter in self.interpreters.actions:
            set_analyzer = getattr(interpreter, "set_analyzer", None)
            if callable(set_analyzer):
                set_analyzer(analyzer)

        if self.autofix_goal is not None:
            for autofix in analyzer.possible_autofixes:
                self.autofix_goal.with_registration(
                    autofix.name, autofix.transform, analyzer.interpretation_selects(autofix)
                )
        if self.code_inspection_goal is not None:
            for inspection in analyzer.possible_code_inspections:
                self.code_inspection_goal.with_registration(
                    inspection.name,
                    inspection.inspection,
                    analyzer.interpretation_selects(inspection),
                )
        logger.debug(
            f"Built analyzer: {len(self.scanners)} scanners, {len(self.interpreters)} "
            f"interpreters, {len(self.scorers)} scorers, "
            f"{len(self.transform_recipe_contributors)} recipe contributors"
        )
        return analyzer


class ProjectAnalyzer:
    """Analyzes projects and interprets the results for delivery."""

    def __init__(
        self,
        builder: ProjectAnalyzerBuilder,
        vcs_status_reader: Optional[VcsStatusReader] = None,
    ):
        self.config = builder.config
        self.scanners = ConditionalRegistry(builder.scanners.registrations)
        self.interpreters = ConditionalRegistry(builder.interpreters.registrations)
        self.scorers = ConditionalRegistry(builder.scorers.registrations)
        self.transform_recipe_contributors = tuple(builder.transform_recipe_contributors)
        self.possible_autofixes = tuple(builder.possible_autofixes)
        self.possible_code_inspections = tuple(builder.possible_code_inspections)
        self.vcs_status_reader = vcs_status_reader or _read_git_status

        self.compositor = AnalysisCompositor(
            self.scanners.registrations,
            scan_mode=self.config.scan_mode,
            seed_composer=SeedRecipeComposer(
                self.transform_recipe_contributors,
                collision_policy=self.config.seed_collision_policy,
            ),
        )
        self.engine = InterpretationEngine(
            self.interpreters.registrations,
            compositor=self.compositor,
            aggregator=ScoreAggregator(self.scorers.registrations),
            autofix_goal=builder.autofix_goal,
            code_inspection_goal=builder.code_inspection_goal,
            message_goal=builder.message_goal,
            queue_goal=builder.queue_goal,
        )

    async def classify(
        self, project: Project, context: Any, options: Optional[AnalysisOptions] = None
    ) -> Classification:
        """Cheap classification from phased scanners; plain scanners contribute nothing."""
        options = options or AnalysisOptions()
        scanners = [to_phased_scanner(a) for a in self.scanners.eligible(options, context)]
        results = await asyncio.gather(*(s.classify(project, context) for s in scanners))
        return Classification({c.name: c for c in results if c is not None})

    async def analyze(
        self, project: Project, context: Any, options: Optional[AnalysisOptions] = None
    ) -> Analysis:
        """Analyze ``project``.

        A full analysis also interprets the result and records scores,
        inspection results, messages, phase status and VCS status on it.
        """
        options = options or AnalysisOptions()
        if not options.full:
            return await self.compositor.analyze(project, context, options)
        analysis, _ = await self.analyze_and_interpret(project, context, options)
        return analysis

    async def analyze_and_interpret(
        self, project: Project, context: Any, options: Optional[AnalysisOptions] = None
    ) -> tuple[Analysis, Interpretation]:
        """Analyze ``project`` and interpret it, running each contributor once.

        In full mode the returned Interpretation refers to the full analysis.
        """
        options = options or AnalysisOptions()
        analysis = await self.compositor.analyze(project, context, options)
        interpretation = await self.engine.interpret(analysis, context, options)
        if not options.full:
            return analysis, interpretation

        inspections: dict[str, Any] = {}
        for registration in interpretation.inspections:
            inspections[registration.name] = await registration.inspection(project, context)
            logger.debug(f"Ran code inspection {registration.name}")

        analysis = replace(
            analysis,
            scores=dict(interpretation.scores),
            inspections=inspections,
            messages=tuple(interpretation.messages),
            phase_status={slot: bool(getattr(interpretation, slot)) for slot in PHASE_SLOTS},
            vcs_status=await self._vcs_status(project),
        )
        interpretation.reason.analysis = analysis
        return analysis, interpretation

    async def interpret(
        self,
        subject: Union[Project, Analysis],
        context: Any,
        options: Optional[AnalysisOptions] = None,
        push: Any = None,
    ) -> Interpretation:
        return await self.engine.interpret(subject, context, options, push=push)

    def interpretation_selects(
        self, registration: Union[AutofixRegistration, CodeInspectionRegistration]
    ) -> Callable[[Project, Any], Awaitable[bool]]:
        """Push test passing only when interpreting the project selects ``registration``."""

        async def selects(project: Project, context: Any) -> bool:
            interpretation = await self.interpret(project, context)
            if isinstance(registration, AutofixRegistration):
                return registration in interpretation.autofixes
            return registration in interpretation.inspections

        selects.__name__ = f"interpretation_selects_{registration.name}"
        return selects

    def delivery_graph(self, interpretation: Interpretation) -> DeliveryGraph:
        return delivery_graph(interpretation)

    async def _vcs_status(self, project: Project) -> Optional[VcsStatus]:
        if project.base_dir is None:
            return None
        try:
            return await asyncio.to_thread(self.vcs_status_reader, project.base_dir)
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning(f"Could not read VCS status for {project.id}: {e}")
            return None


def analyzer_builder(config: Optional[AnalysisConfig] = None) -> ProjectAnalyzerBuilder:
    """Start a builder with the goals the configuration calls for.

    The preferences scanner, when configured, is registered first.
    """
    config = config or AnalysisConfig()
    queue_goal = None
    if config.queue_enabled:
        queue_goal = Goal(
            "queue",
            description="Queue goal sets",
            parameters={"concurrent": config.queue_concurrent, "fetch": config.queue_fetch},
        )
    builder = ProjectAnalyzerBuilder(
        config,
        autofix_goal=Goal("autofix", description="Apply autofixes"),
        code_inspection_goal=Goal("code inspection", description="Run code inspections"),
        message_goal=Goal("message", description="Send messages"),
        queue_goal=queue_goal,
    )
    if config.optional_goals:
        builder.with_scanner(preferences_scanner(config.optional_goals))
    return builder
