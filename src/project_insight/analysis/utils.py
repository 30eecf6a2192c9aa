"""Queries over a finished Analysis."""

from __future__ import annotations

from .models import Analysis, TechnologyElement


def all_technology_elements(analysis: Analysis) -> list[TechnologyElement]:
    return list(analysis.elements.values())


def is_usable_as_seed(analysis: Analysis) -> bool:
    """True when at least one optional recipe asks the user for a parameter.

    Requires a full analysis; without seed analysis the answer is False.
    """
    if analysis.seed_analysis is None:
        return False
    return any(
        request.optional and request.recipe.parameters
        for request in analysis.seed_analysis.transform_recipes
    )
