"""Named five-star quality signals about a project.

Scorers run one after another once interpretation is complete. Each returns
exactly one Score, stored under its name; a later score with the same name
replaces the earlier one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterable, Mapping, Optional, Union

import numpy as np

from ..logging_config import get_logger
from .registration import ConditionalRegistry, Registration, describe

if TYPE_CHECKING:
    from .interpretation import Interpretation
    from .models import AnalysisOptions

logger = get_logger(__name__)

MIN_SCORE = 0
MAX_SCORE = 5


@dataclass(frozen=True)
class Score:
    """Rating of one aspect of a project. More stars are better."""

    name: str
    score: int
    category: Optional[str] = None
    reason: Optional[str] = None

    def __post_init__(self) -> None:
        if not MIN_SCORE <= self.score <= MAX_SCORE:
            raise ValueError(f"score must be between {MIN_SCORE} and {MAX_SCORE}, got {self.score}")


Scorer = Callable[["Interpretation", Any], Awaitable[Score]]

# How heavily to weight a named score. Absent names weigh 1.
ScoreWeightings = Mapping[str, int]


def weighted_composite_score(
    holder: Union[Any, Mapping[str, Score]],
    weightings: Optional[ScoreWeightings] = None,
) -> Optional[float]:
    """Weighted mean of all scores, a real number from 0 to 5.

    Weights may be negative. When they cancel out the mean is undefined and
    the result is ``inf`` or ``-inf`` (or ``nan`` when the weighted sum is
    also zero); nothing is raised.

    Args:
        holder: Anything with a ``scores`` mapping (Interpretation, full
            Analysis) or the mapping itself
        weightings: Per-name weighting; names not listed weigh 1

    Returns:
        The composite, or None when there are no scores
    """
    scores = holder if isinstance(holder, Mapping) else (getattr(holder, "scores", None) or {})
    if not scores:
        return None
    weightings = weightings or {}

    values = np.array([s.score for s in scores.values()], dtype=float)
    weights = np.array([weightings.get(s.name) or 1 for s in scores.values()], dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.dot(values, weights) / weights.sum())


class ScoreAggregator:
    """Runs eligible scorers in registration order against an Interpretation."""

    def __init__(self, scorers: Iterable[Union[Scorer, Registration[Scorer]]] = ()):
        self.registry: ConditionalRegistry[Scorer] = ConditionalRegistry(scorers)

    async def score(
        self, interpretation: "Interpretation", context: Any, options: "AnalysisOptions"
    ) -> None:
        for registration in self.registry:
            if not registration.should_run(options, context):
                logger.debug(f"Scorer {describe(registration.action)} skipped")
                continue
            result = await registration.action(interpretation, context)
            interpretation.scores[result.name] = result
            logger.debug(f"Scorer {describe(registration.action)} scored {result.name}={result.score}")
