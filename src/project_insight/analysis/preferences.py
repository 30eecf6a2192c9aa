"""Which optional goals are switched off for this project.

The element is produced by an ordinary scanner that consults the context's
preference store. Goal wiring reads it late: goals whose display name is
listed in ``disabled_goals`` are vetoed from the checks phase after it has
been assembled.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from ..context import SDM_SCOPE
from ..project import Project
from .models import Analysis, AnalysisOptions, TechnologyElement
from .scanner import TechnologyScanner

PREFERENCES_ELEMENT = "preferences"


@dataclass(frozen=True)
class PreferencesElement(TechnologyElement):
    name: str = PREFERENCES_ELEMENT
    disabled_goals: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "disabled_goals", tuple(self.disabled_goals))


def enabled_key(display_name: str) -> str:
    return f"{display_name}:enabled"


def preferences_scanner(optional_goals: Iterable[str]) -> TechnologyScanner:
    """Scanner marking every optional goal not explicitly enabled as disabled."""
    optional = list(optional_goals)

    async def scan(
        project: Project, context: Any, analysis: Analysis, options: AnalysisOptions
    ) -> Optional[PreferencesElement]:
        disabled = []
        for display_name in optional:
            if not await context.preferences.get(enabled_key(display_name), scope=SDM_SCOPE):
                disabled.append(display_name)
        return PreferencesElement(disabled_goals=tuple(disabled))

    scan.__name__ = "preferences_scanner"
    return scan


def disabled_goals(analysis: Analysis) -> tuple[str, ...]:
    element = analysis.elements.get(PREFERENCES_ELEMENT)
    if isinstance(element, PreferencesElement):
        return element.disabled_goals
    return ()
