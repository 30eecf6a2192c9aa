"""Seed analysis: can this project be used as a template for new projects?

Transform recipe contributors each propose parameters (values a user
supplies when creating a project from this seed) and code transforms that
apply them. The composer runs contributors strictly one after another so
that accumulation is deterministic, and deduplicates across recipes:

- a parameter whose name was already claimed by an earlier recipe is dropped
- a transform whose ``transform_id`` was already claimed is dropped

Under the "error" collision policy either case raises SeedCompositionError
instead. Applying transforms is up to the caller.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterable, Optional, Protocol, Sequence

from ..exceptions import SeedCompositionError
from ..logging_config import get_logger
from ..project import Project

if TYPE_CHECKING:
    from .models import Analysis

logger = get_logger(__name__)


@dataclass(frozen=True)
class NamedParameter:
    name: str
    description: str = ""
    required: bool = False
    default_value: Optional[str] = None
    pattern: Optional[str] = None
    display_name: Optional[str] = None


@dataclass(frozen=True)
class CodeTransform:
    """A transform plus the stable identifier used to deduplicate it.

    ``apply(project, parameters)`` performs the edit.
    """

    transform_id: str
    apply: Callable[[Any, dict[str, Any]], Awaitable[None]] = field(compare=False)
    description: str = ""

    def __post_init__(self) -> None:
        if not self.transform_id:
            raise ValueError("CodeTransform requires a non-empty transform_id")


@dataclass
class TransformRecipe:
    parameters: list[NamedParameter] = field(default_factory=list)
    transforms: list[CodeTransform] = field(default_factory=list)
    # e.g. environment variables the user must set to run the project
    messages: list[str] = field(default_factory=list)
    # e.g. a problematic license
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "parameters": [asdict(p) for p in self.parameters],
            "transforms": [t.transform_id for t in self.transforms],
            "messages": list(self.messages),
            "warnings": list(self.warnings),
        }


class TransformRecipeContributor(Protocol):
    async def analyze(
        self, project: Project, analysis: "Analysis", context: Any
    ) -> Optional[TransformRecipe]: ...


@dataclass(frozen=True)
class TransformRecipeRegistration:
    """How a contributor is applied.

    ``optional`` recipes are offered to the user rather than applied
    automatically. ``originator`` records provenance.
    """

    originator: str
    contributor: TransformRecipeContributor
    optional: bool = False
    description: str = ""


@dataclass(frozen=True)
class TransformRecipeRequest:
    originator: str
    optional: bool
    description: str
    recipe: TransformRecipe

    def to_dict(self) -> dict[str, Any]:
        return {
            "originator": self.originator,
            "optional": self.optional,
            "description": self.description,
            "recipe": self.recipe.to_dict(),
        }


@dataclass(frozen=True)
class SeedAnalysis:
    """Recipes in contributor registration order."""

    transform_recipes: tuple[TransformRecipeRequest, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"transform_recipes": [r.to_dict() for r in self.transform_recipes]}


class SeedRecipeComposer:
    """Runs transform recipe contributors and merges their recipes."""

    def __init__(
        self,
        registrations: Iterable[TransformRecipeRegistration] = (),
        collision_policy: str = "first_wins",
    ):
        if collision_policy not in ("first_wins", "error"):
            raise ValueError("collision_policy must be 'first_wins' or 'error'")
        self.registrations = list(registrations)
        self.collision_policy = collision_policy

    async def compose(self, project: Project, analysis: "Analysis", context: Any) -> SeedAnalysis:
        requests: list[TransformRecipeRequest] = []
        claimed_parameters: set[str] = set()
        claimed_transforms: set[str] = set()

        for registration in self.registrations:
            recipe = await registration.contributor.analyze(project, analysis, context)
            if recipe is None:
                logger.debug(f"Contributor {registration.originator} has no recipe")
                continue

            parameters = self._unclaimed(
                registration.originator, "parameter", recipe.parameters,
                lambda p: p.name, claimed_parameters,
            )
            transforms = self._unclaimed(
                registration.originator, "transform", recipe.transforms,
                lambda t: t.transform_id, claimed_transforms,
            )
            claimed_parameters.update(p.name for p in parameters)
            claimed_transforms.update(t.transform_id for t in transforms)

            requests.append(
                TransformRecipeRequest(
                    originator=registration.originator,
                    optional=registration.optional,
                    description=registration.description,
                    recipe=TransformRecipe(
                        parameters=parameters,
                        transforms=transforms,
                        messages=list(recipe.messages),
                        warnings=list(recipe.warnings),
                    ),
                )
            )

        logger.debug(f"Seed analysis gathered {len(requests)} transform recipes")
        return SeedAnalysis(transform_recipes=tuple(requests))

    def _unclaimed(self, originator, kind, items, key, claimed):
        kept = []
        for item in items:
            name = key(item)
            if name in claimed:
                if self.collision_policy == "error":
                    raise SeedCompositionError(originator, kind, name)
                logger.debug(f"Dropping {kind} '{name}' from {originator}: already claimed")
                continue
            kept.append(item)
        return kept


async def perform_seed_analysis(
    project: Project,
    analysis: "Analysis",
    registrations: Sequence[TransformRecipeRegistration],
    context: Any,
    collision_policy: str = "first_wins",
) -> SeedAnalysis:
    """Compose a SeedAnalysis from ``registrations`` against ``project``."""
    composer = SeedRecipeComposer(registrations, collision_policy=collision_policy)
    return await composer.compose(project, analysis, context)
