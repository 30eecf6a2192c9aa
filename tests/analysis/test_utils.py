"""Tests for Analysis helpers."""

from dataclasses import replace

from project_insight.analysis.models import TechnologyElement
from project_insight.analysis.seed import (
    NamedParameter,
    SeedAnalysis,
    TransformRecipe,
    TransformRecipeRequest,
)
from project_insight.analysis.utils import all_technology_elements, is_usable_as_seed


def request(optional, *parameters):
    return TransformRecipeRequest(
        originator="node",
        optional=optional,
        description="",
        recipe=TransformRecipe(parameters=[NamedParameter(p) for p in parameters]),
    )


class TestIsUsableAsSeed:
    """Test seed usability."""

    def test_quick_analysis_not_usable(self, bare_analysis):
        assert not is_usable_as_seed(bare_analysis)

    def test_no_recipes(self, bare_analysis):
        assert not is_usable_as_seed(replace(bare_analysis, seed_analysis=SeedAnalysis()))

    def test_optional_recipe_without_parameters(self, bare_analysis):
        seed = SeedAnalysis(transform_recipes=(request(True),))
        assert not is_usable_as_seed(replace(bare_analysis, seed_analysis=seed))

    def test_required_parameters_do_not_count(self, bare_analysis):
        seed = SeedAnalysis(transform_recipes=(request(False, "name"),))
        assert not is_usable_as_seed(replace(bare_analysis, seed_analysis=seed))

    def test_optional_parameter_from_any_contributor(self, bare_analysis):
        seed = SeedAnalysis(transform_recipes=(request(False, "name"), request(True, "port")))
        assert is_usable_as_seed(replace(bare_analysis, seed_analysis=seed))


class TestAllTechnologyElements:
    def test_lists_elements(self, bare_analysis):
        assert all_technology_elements(bare_analysis) == [TechnologyElement("node", tags=("node",))]
