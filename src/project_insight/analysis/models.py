"""Data models for project analysis.

An Analysis is the persistable snapshot of what scanners found in a
project. It records facts, never delivery decisions; those belong to an
Interpretation.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Optional

if TYPE_CHECKING:
    from .interpretation import PushMessage
    from .scoring import Score
    from .seed import SeedAnalysis
    from .vcs import VcsStatus


@dataclass(frozen=True)
class AnalysisOptions:
    """Per-call options. ``full`` adds seed analysis, scores, inspections and more."""

    full: bool = False


@dataclass(frozen=True)
class Dependency:
    artifact: str
    version: str
    group: Optional[str] = None


@dataclass(frozen=True)
class Fingerprint:
    name: str
    sha: str
    data: Any = None
    version: str = "0.1.0"
    abbreviation: str = ""


@dataclass(frozen=True)
class TechnologyElement:
    """One scanner's finding about a project, e.g. "node" or "docker".

    ``name`` must be unique within an Analysis. A later element with the
    same name replaces the earlier one.
    """

    name: str
    tags: tuple[str, ...] = ()
    referenced_environment_variables: tuple[str, ...] = ()
    services: Mapping[str, Any] = field(default_factory=dict)
    dependencies: tuple[Dependency, ...] = ()
    fingerprints: tuple[Fingerprint, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("TechnologyElement name must not be empty")
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(
            self, "referenced_environment_variables", tuple(self.referenced_environment_variables)
        )
        object.__setattr__(self, "dependencies", tuple(self.dependencies))
        object.__setattr__(self, "fingerprints", tuple(self.fingerprints))


@dataclass(frozen=True)
class TechnologyClassification:
    """Cheap classification emitted by a phased scanner before full scanning."""

    name: str
    tags: tuple[str, ...] = ()
    messages: tuple[str, ...] = ()


@dataclass(frozen=True)
class Classification:
    elements: Mapping[str, TechnologyClassification] = field(default_factory=dict)


# Phase slots whose population is reported in a full analysis
PHASE_SLOTS = (
    "check_goals",
    "build_goals",
    "test_goals",
    "container_build_goals",
    "release_goals",
    "deploy_goals",
)


@dataclass(frozen=True)
class Analysis:
    """Aggregate snapshot of a project, built once per (project, options) pair.

    Optional fields are only populated when ``options.full`` is set.
    """

    id: str
    options: AnalysisOptions
    elements: Mapping[str, TechnologyElement]
    services: Mapping[str, Any]
    dependencies: tuple[Dependency, ...]
    referenced_environment_variables: tuple[str, ...]
    fingerprints: Mapping[str, Fingerprint]
    messages: tuple["PushMessage", ...] = ()
    seed_analysis: Optional["SeedAnalysis"] = None
    scores: Optional[Mapping[str, "Score"]] = None
    inspections: Optional[Mapping[str, Any]] = None
    phase_status: Optional[Mapping[str, bool]] = None
    vcs_status: Optional["VcsStatus"] = None

    def __post_init__(self) -> None:
        for name in ("elements", "services", "fingerprints", "scores", "inspections", "phase_status"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(value)))
        object.__setattr__(self, "dependencies", tuple(self.dependencies))
        object.__setattr__(
            self, "referenced_environment_variables", tuple(self.referenced_environment_variables)
        )
        object.__setattr__(self, "messages", tuple(self.messages))

    def to_dict(self) -> dict[str, Any]:
        """Data-only form suitable for persistence. Transforms appear by id."""
        data: dict[str, Any] = {
            "id": self.id,
            "options": asdict(self.options),
            "elements": {name: asdict(e) for name, e in self.elements.items()},
            "services": dict(self.services),
            "dependencies": [asdict(d) for d in self.dependencies],
            "referenced_environment_variables": list(self.referenced_environment_variables),
            "fingerprints": {name: asdict(fp) for name, fp in self.fingerprints.items()},
            "messages": [m.to_dict() for m in self.messages],
        }
        if self.seed_analysis is not None:
            data["seed_analysis"] = self.seed_analysis.to_dict()
        if self.scores is not None:
            data["scores"] = {name: asdict(s) for name, s in self.scores.items()}
        if self.inspections is not None:
            data["inspections"] = dict(self.inspections)
        if self.phase_status is not None:
            data["phase_status"] = dict(self.phase_status)
        if self.vcs_status is not None:
            data["vcs_status"] = asdict(self.vcs_status)
        return data
