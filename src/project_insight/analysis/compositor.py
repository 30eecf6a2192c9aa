"""Runs scanners and merges their elements into an Analysis.

Merge rules, applied per returned element in registration order:

- ``elements[name] = element``; a later element with the same name wins
- services are deep-merged; colliding keys take the later value
- dependencies are concatenated without deduplication
- referenced environment variables are appended if not already present,
  preserving first-seen order
- fingerprints are flattened into one map keyed by fingerprint name

In "concurrent" scan mode every eligible scanner is started before any is
awaited, so all of them see the Analysis as it was before merging. In
"sequential" mode each scanner is awaited in turn and sees everything
merged before it.

A scanner that raises aborts the whole analysis. Scanners report "not
applicable" by returning None.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import replace
from typing import Any, Iterable, Optional, Union

from ..logging_config import get_logger
from ..project import Project
from .models import Analysis, AnalysisOptions, Dependency, Fingerprint, TechnologyElement
from .registration import ConditionalRegistry, Registration, describe
from .scanner import ScannerAction, to_phased_scanner
from .seed import SeedRecipeComposer

logger = get_logger(__name__)


def deep_merge(target: dict, source: Mapping) -> dict:
    """Recursively merge ``source`` into ``target`` in place."""
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(existing, dict) and isinstance(value, Mapping):
            deep_merge(existing, value)
        elif isinstance(value, Mapping):
            target[key] = deep_merge({}, value)
        else:
            target[key] = value
    return target


class AnalysisBuilder:
    """Accumulates scanner output for one analyze call."""

    def __init__(self, project_id: str, options: AnalysisOptions):
        self.project_id = project_id
        self.options = options
        self.elements: dict[str, TechnologyElement] = {}
        self.services: dict[str, Any] = {}
        self.dependencies: list[Dependency] = []
        self.referenced_environment_variables: list[str] = []
        self.fingerprints: dict[str, Fingerprint] = {}

    def merge(self, element: TechnologyElement) -> None:
        if element.name in self.elements:
            logger.debug(f"Element '{element.name}' replaced by a later scanner")
        self.elements[element.name] = element
        if element.services:
            deep_merge(self.services, element.services)
        self.dependencies.extend(element.dependencies)
        for name in element.referenced_environment_variables:
            if name not in self.referenced_environment_variables:
                self.referenced_environment_variables.append(name)
        for fingerprint in element.fingerprints:
            self.fingerprints[fingerprint.name] = fingerprint

    def snapshot(self) -> Analysis:
        return Analysis(
            id=self.project_id,
            options=self.options,
            elements=dict(self.elements),
            services=deep_merge({}, self.services),
            dependencies=tuple(self.dependencies),
            referenced_environment_variables=tuple(self.referenced_environment_variables),
            fingerprints=dict(self.fingerprints),
        )


class AnalysisCompositor:
    """Runs the registered, currently eligible scanners against a project."""

    def __init__(
        self,
        scanners: Iterable[Union[ScannerAction, Registration[ScannerAction]]] = (),
        scan_mode: str = "concurrent",
        seed_composer: Optional[SeedRecipeComposer] = None,
    ):
        if scan_mode not in ("concurrent", "sequential"):
            raise ValueError("scan_mode must be 'concurrent' or 'sequential'")
        self.registry: ConditionalRegistry[ScannerAction] = ConditionalRegistry(scanners)
        self.scan_mode = scan_mode
        self.seed_composer = seed_composer or SeedRecipeComposer()

    async def analyze(
        self, project: Project, context: Any, options: Optional[AnalysisOptions] = None
    ) -> Analysis:
        options = options or AnalysisOptions()
        builder = AnalysisBuilder(project.id, options)
        scanners = [to_phased_scanner(a) for a in self.registry.eligible(options, context)]
        logger.debug(
            f"Running {len(scanners)} of {len(self.registry)} scanners ({self.scan_mode})"
        )

        if self.scan_mode == "sequential":
            for scanner in scanners:
                element = await scanner.scan(project, context, builder.snapshot(), options)
                self._accept(builder, scanner, element)
        else:
            before = builder.snapshot()
            results = await asyncio.gather(
                *(s.scan(project, context, before, options) for s in scanners)
            )
            for scanner, element in zip(scanners, results):
                self._accept(builder, scanner, element)

        analysis = builder.snapshot()
        if options.full:
            seed_analysis = await self.seed_composer.compose(project, analysis, context)
            analysis = replace(analysis, seed_analysis=seed_analysis)
        logger.info(
            f"Analyzed {project.id}: {len(analysis.elements)} elements, "
            f"{len(analysis.referenced_environment_variables)} environment variables"
        )
        return analysis

    @staticmethod
    def _accept(builder: AnalysisBuilder, scanner, element: Optional[TechnologyElement]) -> None:
        if element is None:
            logger.debug(f"Scanner {describe(scanner.scan)} found nothing")
            return
        builder.merge(element)
