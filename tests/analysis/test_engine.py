"""Tests for InterpretationEngine enrichment."""

import pytest

from project_insight.analysis.compositor import AnalysisCompositor
from project_insight.analysis.engine import InterpretationEngine
from project_insight.analysis.models import Analysis, AnalysisOptions, TechnologyElement
from project_insight.analysis.registration import conditional
from project_insight.analysis.scoring import Score, ScoreAggregator
from project_insight.goals import Goal, goals


def analysis_with(*names):
    return Analysis(
        id="toy-project",
        options=AnalysisOptions(),
        elements={name: TechnologyElement(name) for name in names},
        services={},
        dependencies=(),
        referenced_environment_variables=(),
        fingerprints={},
    )


class ToyInterpreter:
    """Claims deploy goals whenever a toy element is present."""

    name = "toy"

    async def enrich(self, interpretation, context):
        if "toy" not in interpretation.analysis.elements:
            return False
        interpretation.deploy_goals = goals("deploy").plan(Goal("deploy toy"))
        return True


class PoliteDeployInterpreter:
    """Only claims deploy goals when nobody else has."""

    name = "polite"

    async def enrich(self, interpretation, context):
        if interpretation.deploy_goals:
            return False
        interpretation.deploy_goals = goals("deploy").plan(Goal("deploy politely"))
        return True


class SneakyInterpreter:
    """Mutates the interpretation but reports no contribution."""

    async def enrich(self, interpretation, context):
        interpretation.build_goals = goals("build").plan(Goal("sneaky build"))
        return False


class TestToyInterpreter:
    """Test chosen interpreters follow enrich's return value."""

    @pytest.mark.asyncio
    async def test_toy_present(self, context):
        engine = InterpretationEngine([ToyInterpreter()])
        interpretation = await engine.interpret(analysis_with("toy"), context)
        assert len(interpretation.reason.chosen_interpreters) == 1
        assert interpretation.deploy_goals

    @pytest.mark.asyncio
    async def test_toy_absent(self, context):
        engine = InterpretationEngine([ToyInterpreter()])
        interpretation = await engine.interpret(analysis_with("node"), context)
        assert interpretation.reason.chosen_interpreters == []
        assert interpretation.deploy_goals is None


class TestOrdering:
    """Test that later interpreters observe earlier ones."""

    @pytest.mark.asyncio
    async def test_first_claim_wins(self, context):
        engine = InterpretationEngine([ToyInterpreter(), PoliteDeployInterpreter()])
        interpretation = await engine.interpret(analysis_with("toy"), context)
        assert [g.display_name for g in interpretation.deploy_goals] == ["deploy toy"]
        assert [i.name for i in interpretation.reason.chosen_interpreters] == ["toy"]

    @pytest.mark.asyncio
    async def test_mutation_without_choice_is_kept(self, context):
        """Returning False does not undo changes."""
        engine = InterpretationEngine([SneakyInterpreter()])
        interpretation = await engine.interpret(analysis_with(), context)
        assert interpretation.build_goals
        assert interpretation.reason.chosen_interpreters == []

    @pytest.mark.asyncio
    async def test_available_lists_all_registered(self, context):
        toy = ToyInterpreter()
        skipped = PoliteDeployInterpreter()
        engine = InterpretationEngine([toy, conditional(skipped, lambda options, ctx: False)])
        interpretation = await engine.interpret(analysis_with("toy"), context)
        assert interpretation.reason.available_interpreters == [toy, skipped]
        assert interpretation.reason.chosen_interpreters == [toy]


class TestSubjects:
    """Test interpreting projects and analyses."""

    @pytest.mark.asyncio
    async def test_project_is_analyzed_first(self, project, context):
        async def toy_scanner(project, context, analysis, options):
            return TechnologyElement("toy")

        engine = InterpretationEngine(
            [ToyInterpreter()], compositor=AnalysisCompositor([toy_scanner])
        )
        interpretation = await engine.interpret(project, context)
        assert interpretation.analysis.id == project.id
        assert interpretation.deploy_goals

    @pytest.mark.asyncio
    async def test_push_recorded(self, context):
        engine = InterpretationEngine()
        interpretation = await engine.interpret(analysis_with(), context, push={"sha": "abc"})
        assert interpretation.reason.push == {"sha": "abc"}

    @pytest.mark.asyncio
    async def test_interpreter_error_propagates(self, context):
        class Broken:
            async def enrich(self, interpretation, context):
                raise RuntimeError("cannot interpret")

        with pytest.raises(RuntimeError):
            await InterpretationEngine([Broken()]).interpret(analysis_with(), context)


class TestScoringAfterEnrichment:
    """Test scorers see the enriched interpretation."""

    @pytest.mark.asyncio
    async def test_scorer_sees_deploy_goals(self, context):
        async def deployable(interpretation, context):
            return Score("deployable", 5 if interpretation.deploy_goals else 0)

        engine = InterpretationEngine(
            [ToyInterpreter()], aggregator=ScoreAggregator([deployable])
        )
        interpretation = await engine.interpret(analysis_with("toy"), context)
        assert interpretation.scores["deployable"].score == 5

    def test_new_interpretation_carries_goals(self, bare_analysis):
        autofix = Goal("autofix")
        engine = InterpretationEngine(autofix_goal=autofix)
        interpretation = engine.new_interpretation(bare_analysis)
        assert interpretation.autofix_goal is autofix
        assert interpretation.check_goals is None
        assert interpretation.reason.chosen_interpreters == []
