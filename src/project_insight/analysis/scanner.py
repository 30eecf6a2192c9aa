"""Scanner types.

A scanner inspects a project and returns a TechnologyElement, or None when
the technology it looks for is absent. Scanners must signal "not
applicable" by returning None; raising aborts the whole analysis.

Scanners should decide quickly whether expensive work (parsing and the
like) is warranted, and should check ``options.full`` if they can scan to
varying depth.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Optional, Union

from ..project import Project
from .models import Analysis, AnalysisOptions, TechnologyClassification, TechnologyElement

TechnologyScanner = Callable[
    [Project, Any, Analysis, AnalysisOptions], Awaitable[Optional[TechnologyElement]]
]

Classifier = Callable[[Project, Any], Awaitable[Optional[TechnologyClassification]]]

ProjectPredicate = Callable[[Project], Awaitable[bool]]


async def _never_classified(project: Project, context: Any) -> Optional[TechnologyClassification]:
    return None


@dataclass(frozen=True)
class PhasedTechnologyScanner:
    """Scanner that can also classify a project cheaply ahead of a full scan."""

    scan: TechnologyScanner
    classify: Classifier = _never_classified


ScannerAction = Union[TechnologyScanner, PhasedTechnologyScanner]


def to_phased_scanner(action: ScannerAction) -> PhasedTechnologyScanner:
    """Plain scanners are never classified: they would have to do real work."""
    if isinstance(action, PhasedTechnologyScanner):
        return action
    return PhasedTechnologyScanner(scan=action)


def presence_tested_element_scanner(
    element: TechnologyElement, test: ProjectPredicate
) -> TechnologyScanner:
    """Scanner returning a bare ``element`` whenever ``test`` holds for the project.

    Useful to record the presence of a technology nothing else needs to
    understand, so that it can still be queried.
    """

    async def scan(
        project: Project, context: Any, analysis: Analysis, options: AnalysisOptions
    ) -> Optional[TechnologyElement]:
        if await test(project):
            return replace(element, referenced_environment_variables=())
        return None

    scan.__name__ = f"presence_scanner[{element.name}]"
    return scan
